"""
节点树系统基本使用示例
"""
import sys
import os
import tempfile

# 添加src到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from node_tree import NodeTreeSystem


def print_tree(tree, indent=0):
    """打印嵌套字典形式的树"""
    for node in tree:
        print(f"{'  ' * indent}- {node['name']} ({node['node_id'][:8]})")
        print_tree(node['children'], indent + 1)


def main():
    """主函数"""
    print("=" * 60)
    print("节点树系统 - 基本使用示例")
    print("=" * 60)

    work_dir = tempfile.mkdtemp()
    db_path = os.path.join(work_dir, "node_tree.db")

    # 1. 创建系统实例
    print("\n1. 初始化系统...")
    system = NodeTreeSystem({
        "system_name": "区域组织树",
        "log_level": "WARNING",
        "storage_backend": "sqlite",
        "storage_path": db_path
    })

    # 2. 构建树结构
    print("\n2. 构建树结构...")
    east = system.create_node("华东")
    shanghai = system.create_node("上海", east['node_id'])
    system.create_node("浦东", shanghai['node_id'])
    system.create_node("杭州", east['node_id'])
    south = system.create_node("华南")
    system.create_node("广州", south['node_id'])
    print_tree(system.get_tree())

    # 3. 重命名
    print("\n3. 重命名节点...")
    system.update_node(south['node_id'], "华南区")
    print(f"   新名称: {system.get_node(south['node_id'])['name']}")

    # 4. 导出后删除子树
    print("\n4. 导出并删除子树...")
    export_path = os.path.join(work_dir, "nodes.xlsx")
    print(f"   导出 {system.export_file(export_path)} 条记录到 {export_path}")

    result = system.delete_node(east['node_id'])
    print(f"   删除 {len(result['deleted_ids'])} 个节点")
    print_tree(system.get_tree())

    # 5. 从导出文件恢复
    print("\n5. 从导出文件导入...")
    imported = system.import_file(export_path, file_format='records')
    print(f"   导入 {imported['stats']['nodes_created']} 个节点")
    print_tree(system.get_tree())

    # 6. 统计
    print("\n6. 统计信息:")
    for key, value in system.get_stats().items():
        print(f"   {key}: {value}")

    system.close()


if __name__ == "__main__":
    main()

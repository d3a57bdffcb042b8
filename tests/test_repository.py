"""
测试节点仓库：组装读取与级联删除
"""
import pytest

from node_tree.core.node import NodeRepository
from node_tree.data.storage import MemoryStore
from node_tree.exceptions import NodeNotFoundError, StoreUnavailableError


def build_sample(repo):
    """华东 -> 上海 -> 浦东, 华东 -> 杭州, 华南"""
    east = repo.create_node("华东")
    shanghai = repo.create_node("上海", east.node_id)
    pudong = repo.create_node("浦东", shanghai.node_id)
    hangzhou = repo.create_node("杭州", east.node_id)
    south = repo.create_node("华南")
    return {
        "east": east.node_id,
        "shanghai": shanghai.node_id,
        "pudong": pudong.node_id,
        "hangzhou": hangzhou.node_id,
        "south": south.node_id,
    }


class TestNodeRepository:
    """在三种存储上测试仓库"""

    @pytest.fixture
    def repo(self, store):
        return NodeRepository(store)

    def test_get_tree(self, repo):
        ids = build_sample(repo)
        forest = {node.node_id: node for node in repo.get_tree()}

        assert set(forest) == {ids["east"], ids["south"]}
        east = forest[ids["east"]]
        assert {c.name for c in east.children} == {"上海", "杭州"}
        shanghai = east.find_child_by_name("上海")
        assert [c.node_id for c in shanghai.children] == [ids["pudong"]]

    def test_delete_subtree(self, repo):
        ids = build_sample(repo)
        deleted = repo.delete_node(ids["east"])

        assert deleted == {ids["east"], ids["shanghai"], ids["pudong"], ids["hangzhou"]}
        assert [r.node_id for r in repo.store.fetch_all()] == [ids["south"]]

    def test_delete_middle_node_keeps_ancestors(self, repo):
        ids = build_sample(repo)
        repo.delete_node(ids["shanghai"])

        remaining = {r.node_id for r in repo.store.fetch_all()}
        assert remaining == {ids["east"], ids["hangzhou"], ids["south"]}

    def test_delete_missing_is_noop(self, repo):
        build_sample(repo)
        assert repo.delete_node("missing") == {"missing"}
        assert repo.get_node_count() == 5

    def test_rename(self, repo):
        ids = build_sample(repo)
        assert repo.rename_node(ids["south"], "华南区").name == "华南区"
        assert repo.get_node(ids["south"]).name == "华南区"

    def test_rename_missing(self, repo):
        with pytest.raises(NodeNotFoundError):
            repo.rename_node("missing", "名称")

    def test_get_node_missing(self, repo):
        with pytest.raises(NodeNotFoundError):
            repo.get_node("missing")

    def test_depth_and_find(self, repo):
        assert repo.get_tree_depth() == 0
        ids = build_sample(repo)
        assert repo.get_tree_depth() == 2
        assert [r.node_id for r in repo.find_nodes(name="杭州")] == [ids["hangzhou"]]
        roots = repo.find_nodes(parent_id=None)
        assert {r.node_id for r in roots} == {ids["east"], ids["south"]}
        assert repo.find_nodes(unknown_field=1) == []


class TestTraverse:
    """遍历顺序（内存存储保持插入顺序）"""

    @pytest.fixture
    def repo(self):
        repo = NodeRepository(MemoryStore())
        build_sample(repo)
        return repo

    def test_preorder(self, repo):
        assert [n.name for n in repo.traverse("preorder")] == ["华东", "上海", "浦东", "杭州", "华南"]

    def test_postorder(self, repo):
        assert [n.name for n in repo.traverse("postorder")] == ["浦东", "上海", "杭州", "华东", "华南"]

    def test_levelorder(self, repo):
        assert [n.name for n in repo.traverse("levelorder")] == ["华东", "华南", "上海", "杭州", "浦东"]

    def test_unknown_order(self, repo):
        with pytest.raises(ValueError):
            repo.traverse("inorder")


class TestDeleteAtomicity:
    """规划失败时不执行任何删除"""

    def test_planning_failure_deletes_nothing(self, monkeypatch):
        store = MemoryStore()
        repo = NodeRepository(store)
        ids = build_sample(repo)

        original = store.fetch_children

        def flaky(parent_id):
            if parent_id == ids["shanghai"]:
                raise StoreUnavailableError("超时", operation="fetch_children", store_type="memory")
            return original(parent_id)

        # 规划器在构造时绑定了 fetch_children，这里替换仓库中的规划器查询
        monkeypatch.setattr(repo._planner, "_lookup_children", flaky)
        deletes = []
        monkeypatch.setattr(store, "bulk_delete", lambda ids_: deletes.append(ids_) or 0)

        with pytest.raises(StoreUnavailableError):
            repo.delete_node(ids["east"])
        assert deletes == []
        assert repo.get_node_count() == 5

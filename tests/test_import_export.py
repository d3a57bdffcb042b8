"""
测试表格导入导出
"""
import pandas as pd
import pytest

from node_tree import NodeTreeSystem
from node_tree.core.node import NodeRepository
from node_tree.data.storage import MemoryStore
from node_tree.exceptions import DataImportError, ValidationError
from node_tree.services.import_export.outline_importer import OutlineImporter
from node_tree.services.import_export.table_importer import RecordTableImporter
from node_tree.services.import_export.exporter import export_records, records_to_frame

OUTLINE = ["华东", "  上海", "    浦东", "  杭州", "华南", "", "  广州"]


def write_outline(path, names, column="name"):
    pd.DataFrame({column: names}).to_csv(path, index=False)
    return str(path)


def tree_shape(repo):
    """{名称: 子节点名称集合}"""
    shape = {}
    for node in repo.traverse("preorder"):
        shape[node.name] = {child.name for child in node.children}
    return shape


@pytest.fixture
def repo():
    return NodeRepository(MemoryStore())


class TestOutlineImporter:

    def test_import_csv(self, repo, tmp_path):
        path = write_outline(tmp_path / "outline.csv", OUTLINE)
        created = OutlineImporter(repo).import_data(path)

        assert len(created) == 6
        assert tree_shape(repo) == {
            "华东": {"上海", "杭州"},
            "上海": {"浦东"},
            "浦东": set(),
            "杭州": set(),
            "华南": {"广州"},
            "广州": set(),
        }

    def test_import_excel(self, repo, tmp_path):
        path = tmp_path / "outline.xlsx"
        pd.DataFrame({"节点名称": OUTLINE}).to_excel(path, index=False)

        importer = OutlineImporter(repo)
        importer.import_data(str(path))
        assert importer.stats['nodes_created'] == 6
        assert {r.name for r in repo.find_nodes(parent_id=None)} == {"华东", "华南"}

    def test_parse_level(self, repo):
        importer = OutlineImporter(repo, config={'indent_width': 2, 'max_depth': 3})
        assert importer.parse_level("根") == 0
        assert importer.parse_level("   三个空格") == 1
        assert importer.parse_level("\t制表符") == 1
        assert importer.parse_level(" " * 40 + "很深") == 3

    def test_skipped_level_attaches_to_nearest_shallower(self, repo, tmp_path):
        path = write_outline(tmp_path / "outline.csv", ["根", "      跳级"])
        OutlineImporter(repo).import_data(path)
        assert tree_shape(repo) == {"根": {"跳级"}, "跳级": set()}

    def test_top_level_under_existing_parent(self, repo, tmp_path):
        parent = repo.create_node("已有节点")
        path = write_outline(tmp_path / "outline.csv", ["子一", "子二"])
        OutlineImporter(repo, config={'parent_id': parent.node_id}).import_data(path)
        assert tree_shape(repo)["已有节点"] == {"子一", "子二"}

    def test_name_column_config(self, repo, tmp_path):
        path = tmp_path / "outline.csv"
        pd.DataFrame({"id": ["1", "2"], "标题": ["甲乙", "  丙丁"]}).to_csv(path, index=False)
        OutlineImporter(repo, config={'name_column': '标题'}).import_data(str(path))
        assert tree_shape(repo) == {"甲乙": {"丙丁"}, "丙丁": set()}

    def test_missing_name_column(self, repo, tmp_path):
        path = write_outline(tmp_path / "outline.csv", ["根"])
        with pytest.raises(DataImportError):
            OutlineImporter(repo, config={'name_column': 'title'}).import_data(path)

    def test_invalid_file(self, repo, tmp_path):
        with pytest.raises(DataImportError):
            OutlineImporter(repo).import_data(str(tmp_path / "missing.csv"))

        text_file = tmp_path / "outline.txt"
        text_file.write_text("根", encoding="utf-8")
        with pytest.raises(DataImportError):
            OutlineImporter(repo).import_data(str(text_file))

    def test_invalid_config(self, repo):
        with pytest.raises(DataImportError):
            OutlineImporter(repo, config={'indent_width': 0})


class TestRecordTableImporter:

    def test_import_remaps_ids(self, repo, tmp_path):
        path = tmp_path / "records.csv"
        pd.DataFrame([
            {"node_id": "c", "name": "浦东", "parent_id": "b"},
            {"node_id": "b", "name": "上海", "parent_id": "a"},
            {"node_id": "a", "name": "华东", "parent_id": ""},
            {"node_id": "d", "name": "华南", "parent_id": ""},
        ]).to_csv(path, index=False)

        importer = RecordTableImporter(repo)
        created = importer.import_data(str(path))

        assert len(created) == 4
        assert importer.stats['skipped'] == 0
        assert {r.node_id for r in created}.isdisjoint({"a", "b", "c", "d"})
        assert tree_shape(repo) == {
            "华东": {"上海"},
            "上海": {"浦东"},
            "浦东": set(),
            "华南": set(),
        }

    def test_dangling_parent_imported_as_root(self, repo, tmp_path):
        path = tmp_path / "records.csv"
        pd.DataFrame([
            {"node_id": "x", "name": "孤儿", "parent_id": "missing"},
        ]).to_csv(path, index=False)

        created = RecordTableImporter(repo).import_data(str(path))
        assert created[0].parent_id is None

    def test_cycle_rows_skipped(self, repo, tmp_path):
        path = tmp_path / "records.csv"
        pd.DataFrame([
            {"node_id": "r", "name": "根节点", "parent_id": ""},
            {"node_id": "p", "name": "环一", "parent_id": "q"},
            {"node_id": "q", "name": "环二", "parent_id": "p"},
        ]).to_csv(path, index=False)

        importer = RecordTableImporter(repo)
        created = importer.import_data(str(path))
        assert [r.name for r in created] == ["根节点"]
        assert importer.stats['skipped'] == 2

    def test_missing_columns(self, repo, tmp_path):
        path = tmp_path / "records.csv"
        pd.DataFrame({"name": ["根节点"]}).to_csv(path, index=False)
        with pytest.raises(DataImportError):
            RecordTableImporter(repo).import_data(str(path))

    def test_parent_column_optional(self, repo, tmp_path):
        path = tmp_path / "records.csv"
        pd.DataFrame({"node_id": ["1", "2"], "name": ["甲乙", "丙丁"]}).to_csv(path, index=False)
        assert len(RecordTableImporter(repo).import_data(str(path))) == 2
        assert len(repo.find_nodes(parent_id=None)) == 2


class TestExport:

    def test_frame(self, repo):
        root = repo.create_node("华东")
        repo.create_node("上海", root.node_id)
        df = records_to_frame(repo.store)

        assert list(df.columns) == ['node_id', 'name', 'parent_id']
        assert df.loc[df['name'] == '华东', 'parent_id'].iloc[0] == ''
        assert df.loc[df['name'] == '上海', 'parent_id'].iloc[0] == root.node_id

    def test_empty_store(self, repo, tmp_path):
        assert export_records(repo.store, str(tmp_path / "empty.csv")) == 0

    def test_round_trip_through_system(self, tmp_path):
        source = NodeTreeSystem(storage=MemoryStore())
        a = source.create_node("华东")
        b = source.create_node("上海", a['node_id'])
        source.create_node("浦东", b['node_id'])
        source.create_node("华南")

        path = tmp_path / "export.xlsx"
        assert source.export_file(str(path)) == 4

        target = NodeTreeSystem(storage=MemoryStore())
        result = target.import_file(str(path), file_format='records')
        assert result['success']
        assert result['stats']['nodes_created'] == 4
        assert tree_shape(target.repository) == tree_shape(source.repository)

    def test_unsupported_suffix(self, repo, tmp_path):
        with pytest.raises(DataImportError):
            export_records(repo.store, str(tmp_path / "out.json"))


class TestSystemImport:

    def test_invalid_outline_name_writes_nothing(self, tmp_path):
        system = NodeTreeSystem(storage=MemoryStore())
        path = write_outline(tmp_path / "outline.csv", ["根节点", "  上海", "  x"])
        with pytest.raises(ValidationError):
            system.import_file(path)
        assert system.storage.count() == 0

    def test_invalid_record_name_writes_nothing(self, tmp_path):
        system = NodeTreeSystem(storage=MemoryStore())
        path = tmp_path / "records.csv"
        pd.DataFrame([
            {"node_id": "1", "name": "华东", "parent_id": ""},
            {"node_id": "2", "name": "y", "parent_id": "1"},
        ]).to_csv(path, index=False)

        with pytest.raises(ValidationError):
            system.import_file(str(path), file_format='records')
        assert system.storage.count() == 0

    def test_unknown_format(self, tmp_path):
        system = NodeTreeSystem(storage=MemoryStore())
        with pytest.raises(ValidationError):
            system.import_file(str(tmp_path / "a.csv"), file_format='yaml')

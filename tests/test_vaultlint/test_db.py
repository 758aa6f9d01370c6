"""Unit tests for vaultlint.db.IndexDB."""

import duckdb
import polars as pl
import pytest

from vaultlint.db import IndexDB
from vaultlint.index import build_index


@pytest.fixture()
def db(registry) -> IndexDB:
    files = [
        ("proj.md", "---\ntype: project\nid: proj-a\ntitle: A\nstatus: active\n---\n"),
        ("t1.md", "---\ntype: task\nid: t1\ntitle: One\nstatus: todo\nprojects: [proj-a]\n---\n"),
        ("t2.md", "---\ntype: task\nid: t2\ntitle: Two\nstatus: bogus\nprojects: [ghost]\n---\n"),
        ("loose.md", "plain"),
    ]
    return IndexDB(build_index(files, registry))


# ---------------------------------------------------------------------------
# query()
# ---------------------------------------------------------------------------


class TestIndexDBQuery:
    def test_basic_select(self, db: IndexDB):
        df = db.query("SELECT file_path FROM nodes ORDER BY file_path")
        assert list(df["file_path"]) == ["loose.md", "proj.md", "t1.md", "t2.md"]

    def test_returns_polars_dataframe(self, db: IndexDB):
        assert isinstance(db.query("SELECT * FROM edges"), pl.DataFrame)

    def test_frontmatter_json(self, db: IndexDB):
        df = db.query("SELECT json_extract_string(frontmatter, '$.status') AS s FROM nodes WHERE id = 't1'")
        assert df["s"][0] == "todo"

    def test_invalid_sql_raises(self, db: IndexDB):
        with pytest.raises(duckdb.Error):
            db.query("SELECT * FROM nonexistent_table")


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class TestReports:
    def test_type_distribution(self, db: IndexDB):
        rows = db.type_distribution().to_dicts()
        assert rows[0] == {"type": "task", "file_count": 2}
        assert {r["type"] for r in rows} == {"task", "project", "(none)"}

    def test_broken_references(self, db: IndexDB):
        rows = db.broken_references().to_dicts()
        assert rows == [{"source_file": "t2.md", "target_id": "ghost", "field": "projects"}]

    def test_invalid_files(self, db: IndexDB):
        assert set(db.invalid_files()["file_path"]) == {"t2.md", "loose.md"}

    def test_summary(self, db: IndexDB):
        summary = db.summary()
        assert summary["totalFiles"] == 4
        assert summary["validFiles"] == 2
        assert summary["edgeCount"] == 2
        assert summary["brokenReferenceCount"] == 1


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_refresh_replaces_rows(self, db: IndexDB, registry):
        db.refresh(build_index([("only.md", "---\ntype: idea\n---\n")], registry))
        assert db.query("SELECT COUNT(*) AS n FROM nodes")["n"][0] == 1
        assert db.query("SELECT COUNT(*) AS n FROM edges")["n"][0] == 0

    def test_context_manager_closes(self, registry):
        with IndexDB(build_index([], registry)) as db:
            assert db.query("SELECT COUNT(*) AS n FROM nodes")["n"][0] == 0
        with pytest.raises(duckdb.Error):
            db.query("SELECT 1")

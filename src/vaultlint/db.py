"""IndexDB: tabular view over a built :class:`~vaultlint.index.VaultIndex`.

Loads the index's nodes and reference edges into an in-memory DuckDB
database and returns query results as :mod:`polars` DataFrames.

Usage::

    db = IndexDB(index)

    # Free-form SQL
    df = db.query("SELECT file_path, title FROM nodes WHERE type = 'task'")

    # Pre-built reports
    types  = db.type_distribution()
    broken = db.broken_references()
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import duckdb
import polars as pl

if TYPE_CHECKING:
    from vaultlint.index import VaultIndex


class IndexDB:
    """In-memory DuckDB database over index nodes and edges."""

    def __init__(self, index: "VaultIndex") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(index)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, index: "VaultIndex") -> None:
        """(Re-)populate the database from *index* (call after a rebuild)."""
        self._index = index
        self._create_schema()
        self._load()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE nodes (
                file_path     VARCHAR PRIMARY KEY,
                type          VARCHAR,
                id            VARCHAR,
                title         VARCHAR,
                is_valid      BOOLEAN,
                error_count   INTEGER,
                warning_count INTEGER,
                frontmatter   JSON
            )
        """)
        self.conn.execute("""
            CREATE OR REPLACE TABLE edges (
                source_file VARCHAR,
                target_id   VARCHAR,
                field       VARCHAR
            )
        """)
        self.conn.execute("CREATE OR REPLACE TABLE ids (id VARCHAR PRIMARY KEY, file_path VARCHAR)")

    def _load(self) -> None:
        nodes = [
            (
                n.file_path,
                n.type,
                n.id,
                n.title,
                n.is_valid,
                n.error_count,
                n.warning_count,
                json.dumps(n.frontmatter, default=str) if n.frontmatter is not None else None,
            )
            for n in self._index.files.values()
        ]
        if nodes:
            self.conn.executemany("INSERT INTO nodes VALUES (?,?,?,?,?,?,?,?)", nodes)
        edges = [(e.source_file, e.target_id, e.field) for e in self._index.edges]
        if edges:
            self.conn.executemany("INSERT INTO edges VALUES (?,?,?)", edges)
        ids = list(self._index.id_index.items())
        if ids:
            self.conn.executemany("INSERT INTO ids VALUES (?,?)", ids)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql).pl()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def type_distribution(self) -> pl.DataFrame:
        """``type -> file_count``, most common first; untyped files appear as ``(none)``."""
        return self.conn.execute(
            """
            SELECT COALESCE(type, '(none)') AS type, COUNT(*) AS file_count
            FROM nodes
            GROUP BY 1
            ORDER BY 2 DESC, 1
            """
        ).pl()

    def broken_references(self) -> pl.DataFrame:
        """Edges whose target id is not owned by any indexed file."""
        return self.conn.execute(
            """
            SELECT e.source_file, e.target_id, e.field
            FROM edges e
            LEFT JOIN ids i ON i.id = e.target_id
            WHERE i.id IS NULL
            ORDER BY e.source_file, e.target_id
            """
        ).pl()

    def invalid_files(self) -> pl.DataFrame:
        return self.conn.execute(
            """
            SELECT file_path, type, error_count, warning_count
            FROM nodes
            WHERE NOT is_valid
            ORDER BY error_count DESC, file_path
            """
        ).pl()

    def summary(self) -> dict[str, Any]:
        """Index stats plus node and edge counts, as a plain dict."""
        stats = self._index.stats
        edge_count = self.conn.execute("SELECT COUNT(*) FROM edges").fetchone()[0]
        return {
            "totalFiles": stats.total_files,
            "validFiles": stats.valid_files,
            "errorCount": stats.error_count,
            "warningCount": stats.warning_count,
            "edgeCount": edge_count,
            "brokenReferenceCount": self.broken_references().height,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "IndexDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

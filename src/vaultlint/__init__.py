"""vaultlint: schema validation, indexing and autofix for Markdown vault frontmatter."""

from vaultlint.autofix import FixOptions, FixResult, apply_fixes, migrate_type
from vaultlint.builtin_schemas import load_default_schemas
from vaultlint.config import VaultConfig, load_config, parse_config, resolve_type
from vaultlint.db import IndexDB
from vaultlint.graph import Subgraph, VaultGraph
from vaultlint.index import VaultIndex, build_index
from vaultlint.issues import Issue, IssueCode, Severity
from vaultlint.node import FileNode, ReferenceEdge, VaultStats
from vaultlint.parser import ParsedDocument, parse_frontmatter
from vaultlint.registry import SchemaEntry, SchemaRegistry, UnknownTypeError
from vaultlint.scaffold import ScaffoldResult, scaffold
from vaultlint.schema import Field, FieldKind, SchemaModel
from vaultlint.validator import detect_unknown_types, validate_frontmatter, validate_vault
from vaultlint.walk import walk_vault

__all__ = [
    "Field",
    "FieldKind",
    "SchemaModel",
    "SchemaEntry",
    "SchemaRegistry",
    "UnknownTypeError",
    "load_default_schemas",
    "Issue",
    "IssueCode",
    "Severity",
    "ParsedDocument",
    "parse_frontmatter",
    "VaultConfig",
    "load_config",
    "parse_config",
    "resolve_type",
    "validate_frontmatter",
    "validate_vault",
    "detect_unknown_types",
    "FileNode",
    "ReferenceEdge",
    "VaultStats",
    "VaultIndex",
    "build_index",
    "VaultGraph",
    "Subgraph",
    "FixOptions",
    "FixResult",
    "apply_fixes",
    "migrate_type",
    "ScaffoldResult",
    "scaffold",
    "IndexDB",
    "walk_vault",
]

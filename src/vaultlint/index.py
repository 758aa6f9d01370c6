"""VaultIndex: one-pass index of every file, its identity and its references."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from vaultlint.config import VaultConfig, resolve_type
from vaultlint.issues import Issue, count_by_severity
from vaultlint.node import FileNode, ReferenceEdge, VaultStats
from vaultlint.parser import parse_frontmatter
from vaultlint.registry import SchemaRegistry
from vaultlint.validator import validate_frontmatter

DEFAULT_ID_FIELD = "id"


@dataclass
class VaultIndex:
    """Files, identity index, reference edges and stats for one vault scan.

    An index is rebuilt wholesale, never patched: call :func:`build_index`
    again to pick up changes.
    """

    #: file path -> node, in input order
    files: dict[str, FileNode] = field(default_factory=dict)
    #: identity -> file path (last writer wins on duplicates)
    id_index: dict[str, str] = field(default_factory=dict)
    edges: list[ReferenceEdge] = field(default_factory=list)
    stats: VaultStats = field(default_factory=VaultStats)

    @classmethod
    def build(
        cls,
        files: Iterable[tuple[str, str]],
        registry: SchemaRegistry,
        config: VaultConfig | None = None,
    ) -> "VaultIndex":
        return build_index(files, registry, config)

    def issues_by_file(self) -> dict[str, list[Issue]]:
        """Per-file parse/schema issues (files without issues omitted)."""
        return {path: list(node.issues) for path, node in self.files.items() if node.issues}


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def build_index(
    files: Iterable[tuple[str, str]],
    registry: SchemaRegistry,
    config: VaultConfig | None = None,
) -> VaultIndex:
    """Parse and validate every ``(path, content)`` pair and derive the reference graph."""
    index = VaultIndex()
    total = valid = total_errors = total_warnings = 0

    for file_path, content in files:
        total += 1
        parsed = parse_frontmatter(content)
        issues: list[Issue] = list(parsed.issues)
        data = parsed.data

        if data is not None:
            issues.extend(validate_frontmatter(data, registry, config))

        errors, warnings = count_by_severity(issues)
        total_errors += errors
        total_warnings += warnings
        is_valid = data is not None and errors == 0
        if is_valid:
            valid += 1

        user_type = data.get("type") if data is not None else None
        if data is None or not isinstance(user_type, str) or not user_type:
            title = data.get("title") if data is not None else None
            index.files[file_path] = FileNode(
                file_path=file_path,
                type=None,
                id=None,
                title=title if isinstance(title, str) else None,
                is_valid=is_valid,
                error_count=errors,
                warning_count=warnings,
                issues=tuple(issues),
            )
            continue

        canonical = resolve_type(user_type, config)
        entry = registry.get_entry(canonical)
        id_field = entry.id_field if entry else DEFAULT_ID_FIELD
        reference_fields = entry.reference_fields if entry else ()

        for ref_field in reference_fields:
            for target in _reference_values(data.get(ref_field)):
                index.edges.append(ReferenceEdge(file_path, target, ref_field))

        identity = data.get(id_field)
        identity = identity if isinstance(identity, str) and identity else None
        if identity:
            index.id_index[identity] = file_path

        title = data.get("title")
        index.files[file_path] = FileNode(
            file_path=file_path,
            type=canonical,
            id=identity,
            title=title if isinstance(title, str) else None,
            is_valid=is_valid,
            error_count=errors,
            warning_count=warnings,
            frontmatter=data,
            issues=tuple(issues),
        )

    index.stats = VaultStats(
        total_files=total,
        valid_files=valid,
        error_count=total_errors,
        warning_count=total_warnings,
    )
    logger.debug(
        "Indexed {} file(s): {} valid, {} error(s), {} warning(s), {} edge(s)",
        total,
        valid,
        total_errors,
        total_warnings,
        len(index.edges),
    )
    return index


def _reference_values(value: Any) -> list[str]:
    """One target per scalar string, or per string element of a list."""
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str) and v]
    return []

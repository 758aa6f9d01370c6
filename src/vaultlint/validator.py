"""Per-document and vault-wide frontmatter validation.

Both entry points return fully enumerated issue lists and never raise for data
problems.  Unknown types are a warning: unmanaged documents are tolerated.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from vaultlint.config import VaultConfig, resolve_type
from vaultlint.issues import Issue, IssueCode
from vaultlint.parser import parse_frontmatter
from vaultlint.registry import SchemaRegistry
from vaultlint.schema import FieldKind, SchemaModel

if TYPE_CHECKING:
    from vaultlint.index import VaultIndex

#: Cross-field staleness rule: summary regenerated before the last edit
UPDATED_FIELD = "updated"
SUMMARISED_AT_FIELD = "summarisedAt"


# ---------------------------------------------------------------------------
# Single document
# ---------------------------------------------------------------------------


def validate_frontmatter(
    data: Mapping[str, Any],
    registry: SchemaRegistry,
    config: VaultConfig | None = None,
) -> list[Issue]:
    """Validate one document's decoded frontmatter against its registered schema."""
    user_type = data.get("type")
    if not isinstance(user_type, str) or not user_type:
        return [
            Issue.error(
                IssueCode.FM_MISSING_TYPE,
                'Frontmatter missing required "type" field',
                suggestion='Add a "type" field to frontmatter',
            )
        ]

    issues: list[Issue] = []
    canonical = resolve_type(user_type, config)

    if canonical != user_type and config is not None and config.warn_on_mapped_types:
        issues.append(
            Issue.warning(
                IssueCode.FM_MAPPED_TYPE,
                f'Type "{user_type}" is mapped to "{canonical}"',
                path=("type",),
                suggestion=f'Consider migrating every "{user_type}" document to type "{canonical}"',
            )
        )

    model = registry.get(canonical)
    if model is None:
        issues.append(
            Issue.warning(
                IssueCode.FM_UNKNOWN_TYPE,
                f'Unknown frontmatter type: "{canonical}"',
                suggestion=f'Register a schema for type "{canonical}"',
            )
        )
        return issues

    subject = dict(data)
    subject["type"] = canonical
    schema_issues = check_schema(subject, model)
    if schema_issues:
        return issues + schema_issues

    issues.extend(_business_rules(subject))
    return issues


def check_schema(data: Mapping[str, Any], model: SchemaModel) -> list[Issue]:
    """Check *data* against the closed field set of *model*."""
    issues: list[Issue] = []

    for f in model.fields:
        if f.name not in data:
            if f.required:
                issues.append(
                    Issue.error(IssueCode.FM_SCHEMA_INVALID, "Required", path=(f.name,))
                )
            continue

        value = data[f.name]
        if f.name == "tags" and f.kind is FieldKind.ARRAY and isinstance(value, str):
            issues.append(
                Issue.error(
                    IssueCode.FM_TAGS_NOT_ARRAY,
                    f"tags must be a list, got the string {value!r}",
                    path=("tags",),
                    suggestion="Run autofix to convert tags to a list",
                )
            )
            continue

        problem = f.check(value)
        if problem:
            issues.append(Issue.error(IssueCode.FM_SCHEMA_INVALID, problem, path=(f.name,)))

    unknown = [key for key in data if key not in model]
    if unknown:
        keys = ", ".join(unknown)
        issues.append(
            Issue.error(
                IssueCode.FM_UNKNOWN_KEY,
                f"Unknown key(s): {keys}",
                suggestion=f"Remove unknown keys: {keys}",
            )
        )

    return issues


def _business_rules(data: Mapping[str, Any]) -> list[Issue]:
    updated = data.get(UPDATED_FIELD)
    summarised_at = data.get(SUMMARISED_AT_FIELD)
    if not (isinstance(updated, str) and isinstance(summarised_at, str)):
        return []
    if not (updated and summarised_at) or summarised_at >= updated:
        return []
    return [
        Issue.warning(
            IssueCode.FM_STALE_SUMMARY,
            f"Summary not updated since last edit "
            f"({SUMMARISED_AT_FIELD}: {summarised_at}, {UPDATED_FIELD}: {updated})",
            path=(SUMMARISED_AT_FIELD,),
            suggestion="Regenerate the summary to reflect recent changes",
        )
    ]


# ---------------------------------------------------------------------------
# Vault-wide
# ---------------------------------------------------------------------------


def validate_vault(index: "VaultIndex") -> dict[str, list[Issue]]:
    """Cross-document checks: duplicate identities and dangling references.

    Returns ``{file_path: issues}``; files without vault-level issues are absent.
    """
    issues: dict[str, list[Issue]] = {}

    owners: dict[str, list[str]] = {}
    for file_path, node in index.files.items():
        if node.id:
            owners.setdefault(node.id, []).append(file_path)

    for identity, paths in owners.items():
        if len(paths) < 2:
            continue
        for file_path in paths:
            others = ", ".join(p for p in paths if p != file_path)
            issues.setdefault(file_path, []).append(
                Issue.error(
                    IssueCode.VAULT_DUPLICATE_ID,
                    f'Duplicate id "{identity}" also found in: {others}',
                )
            )

    for edge in index.edges:
        if edge.target_id not in index.id_index:
            issues.setdefault(edge.source_file, []).append(
                Issue.error(
                    IssueCode.VAULT_MISSING_REFERENCE,
                    f'Reference to unknown id "{edge.target_id}" in field "{edge.field}"',
                    path=(edge.field,),
                )
            )

    return issues


# ---------------------------------------------------------------------------
# Unknown type detection
# ---------------------------------------------------------------------------


@dataclass
class UnknownType:
    type: str
    files: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.files)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "count": self.count, "files": list(self.files)}


def detect_unknown_types(
    files: Iterable[tuple[str, str]],
    registry: SchemaRegistry,
    config: VaultConfig | None = None,
) -> list[UnknownType]:
    """Group files whose declared type does not resolve to a registered schema.

    Sorted by descending file count, then type name.
    """
    found: dict[str, UnknownType] = {}
    for file_path, content in files:
        data = parse_frontmatter(content).data
        if data is None:
            continue
        user_type = data.get("type")
        if not isinstance(user_type, str) or not user_type:
            continue
        if resolve_type(user_type, config) in registry:
            continue
        found.setdefault(user_type, UnknownType(user_type)).files.append(file_path)
    return sorted(found.values(), key=lambda u: (-u.count, u.type))

"""Generate a fresh frontmatter block for a registered type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from vaultlint.autofix import sort_keys
from vaultlint.registry import SchemaRegistry
from vaultlint.serialize import stringify_frontmatter


@dataclass(frozen=True)
class ScaffoldResult:
    content: str
    type: str


def scaffold(
    type_name: str,
    registry: SchemaRegistry,
    overrides: Mapping[str, Any] | None = None,
) -> ScaffoldResult:
    """Return a ``---``-delimited frontmatter block for *type_name*.

    Every non-optional field gets its schema default, *overrides* win, and
    keys follow the type's canonical order.  Reference fields are written as
    ``[[links]]``.

    Raises :class:`~vaultlint.registry.UnknownTypeError` if the type is not
    registered.
    """
    entry = registry.require_entry(type_name)
    data = {**entry.model.defaults(), **(overrides or {})}
    ordered = sort_keys(data, entry.key_order)
    header = stringify_frontmatter(ordered, entry.reference_fields)
    return ScaffoldResult(content=f"---\n{header}\n---\n", type=type_name)

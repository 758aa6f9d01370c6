"""Autofix pipeline: composable ``data -> data`` strategies plus re-serialization.

A strategy is any callable taking a frontmatter mapping and returning a new
one; strategies never mutate their input and are no-ops when their
precondition does not hold.  :func:`apply_fixes` runs, in order:

1. the caller's ``pre_strategies`` (e.g. :func:`rename_fields`)
2. :func:`normalize_array_fields`
3. :func:`sort_keys_by_schema`
4. :func:`remove_unknown_keys` (only with ``unsafe=True``)
5. the caller's ``extra_strategies`` (e.g. :func:`populate_missing_fields`),
   followed by a second key sort so added keys land in canonical position

The body is reused verbatim and the whole pipeline is idempotent.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from loguru import logger

from vaultlint.config import VaultConfig, resolve_type
from vaultlint.parser import parse_frontmatter
from vaultlint.registry import SchemaEntry, SchemaRegistry
from vaultlint.schema import FieldKind
from vaultlint.serialize import assemble_document, stringify_frontmatter

FixStrategy = Callable[[dict[str, Any]], dict[str, Any]]

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class FixOptions:
    #: Allow destructive removal of keys the schema does not declare
    unsafe: bool = False
    pre_strategies: Sequence[FixStrategy] = ()
    extra_strategies: Sequence[FixStrategy] = ()
    config: VaultConfig | None = None


@dataclass(frozen=True)
class FixResult:
    content: str
    changed: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Lower-case *text* and collapse every run of non-alphanumerics to ``-``."""
    return _SLUG_STRIP_RE.sub("-", text.lower()).strip("-")


def sort_keys(data: Mapping[str, Any], order: Iterable[str] | None = None) -> dict[str, Any]:
    """Order keys by *order*, then the rest in their current order.

    Without an order every key is sorted alphabetically.
    """
    if order is None:
        return {key: data[key] for key in sorted(data)}
    result = {key: data[key] for key in order if key in data}
    for key, value in data.items():
        if key not in result:
            result[key] = value
    return result


def _entry_for(
    data: Mapping[str, Any], registry: SchemaRegistry, config: VaultConfig | None
) -> SchemaEntry | None:
    user_type = data.get("type")
    if not isinstance(user_type, str) or not user_type:
        return None
    return registry.get_entry(resolve_type(user_type, config))


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---------------------------------------------------------------------------
# Default pipeline strategies
# ---------------------------------------------------------------------------


def normalize_array_fields(registry: SchemaRegistry, config: VaultConfig | None = None) -> FixStrategy:
    """Coerce a scalar string into a one-element list for ``tags``, reference
    fields and every array field the schema declares."""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        names = {"tags"}
        entry = _entry_for(data, registry, config)
        if entry is not None:
            names.update(entry.reference_fields)
            names.update(f.name for f in entry.model.fields if f.kind is FieldKind.ARRAY)
        targets = [name for name in names if isinstance(data.get(name), str)]
        if not targets:
            return data
        result = dict(data)
        for name in targets:
            result[name] = [data[name]]
        return result

    return strategy


def sort_keys_by_schema(registry: SchemaRegistry, config: VaultConfig | None = None) -> FixStrategy:
    """Reorder keys by the type's canonical key order (alphabetical if unregistered)."""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        entry = _entry_for(data, registry, config)
        return sort_keys(data, entry.key_order if entry else None)

    return strategy


def remove_unknown_keys(allowed_keys: Iterable[str]) -> FixStrategy:
    allowed = set(allowed_keys)

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in data.items() if key in allowed}

    return strategy


def _remove_keys_outside_schema(registry: SchemaRegistry, config: VaultConfig | None) -> FixStrategy:
    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        entry = _entry_for(data, registry, config)
        if entry is None:
            return data
        return remove_unknown_keys(entry.field_names)(data)

    return strategy


# ---------------------------------------------------------------------------
# Optional strategies
# ---------------------------------------------------------------------------


def rename_fields(renames: Mapping[str, str]) -> FixStrategy:
    """Rename ``old -> new`` when *old* exists and *new* does not.  Never overwrites."""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        applicable = {old: new for old, new in renames.items() if old in data and new not in data}
        if not applicable:
            return data
        return {applicable.get(key, key): value for key, value in data.items()}

    return strategy


def populate_missing_fields(registry: SchemaRegistry, config: VaultConfig | None = None) -> FixStrategy:
    """Fill in schema defaults for absent fields; existing values always win."""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        entry = _entry_for(data, registry, config)
        if entry is None:
            return data
        missing = {k: v for k, v in entry.model.defaults().items() if k not in data}
        if not missing:
            return data
        return {**data, **missing}

    return strategy


def infer_id_from_title(registry: SchemaRegistry, config: VaultConfig | None = None) -> FixStrategy:
    """Set the identity field to ``<type>-<slug(title)>`` when it is empty."""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        entry = _entry_for(data, registry, config)
        if entry is None or not _is_empty(data.get(entry.id_field)):
            return data
        title = data.get("title")
        if not isinstance(title, str) or not slugify(title):
            return data
        return {**data, entry.id_field: f"{entry.type}-{slugify(title)}"}

    return strategy


def infer_id_from_path(
    file_path: str | PurePath,
    registry: SchemaRegistry,
    config: VaultConfig | None = None,
) -> FixStrategy:
    """Like :func:`infer_id_from_title` but slugifies the bare filename.

    Meant to run after title-based inference as a fallback.
    """
    stem = PurePath(file_path).stem

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        entry = _entry_for(data, registry, config)
        if entry is None or not _is_empty(data.get(entry.id_field)) or not slugify(stem):
            return data
        return {**data, entry.id_field: f"{entry.type}-{slugify(stem)}"}

    return strategy


def infer_title_from_path(
    file_path: str | PurePath,
    registry: SchemaRegistry,
    config: VaultConfig | None = None,
) -> FixStrategy:
    """Set ``title`` from the filename in sentence case when it is empty.

    ``my-great-plan.md`` becomes ``"My great plan"``.
    """
    words = re.sub(r"[-_\s]+", " ", PurePath(file_path).stem).strip()
    title = words[:1].upper() + words[1:].lower() if words else ""

    def strategy(data: dict[str, Any]) -> dict[str, Any]:
        if not title or _entry_for(data, registry, config) is None:
            return data
        if not _is_empty(data.get("title")):
            return data
        return {**data, "title": title}

    return strategy


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def apply_fixes(
    content: str,
    registry: SchemaRegistry,
    options: FixOptions | None = None,
) -> FixResult:
    """Run the autofix pipeline over one document.

    Documents without parseable frontmatter are returned unchanged.
    """
    options = options or FixOptions()
    parsed = parse_frontmatter(content)
    if parsed.data is None:
        return FixResult(content=content, changed=False)

    config = options.config
    sort_step = sort_keys_by_schema(registry, config)
    strategies: list[FixStrategy] = [
        *options.pre_strategies,
        normalize_array_fields(registry, config),
        sort_step,
    ]
    if options.unsafe:
        strategies.append(_remove_keys_outside_schema(registry, config))
    if options.extra_strategies:
        strategies.extend(options.extra_strategies)
        strategies.append(sort_step)

    data = parsed.data
    for strategy in strategies:
        data = strategy(data)

    entry = _entry_for(data, registry, config)
    header = stringify_frontmatter(data, entry.reference_fields if entry else ())
    new_content = assemble_document(header, parsed.body)
    changed = new_content != content
    if changed:
        logger.debug("Autofix rewrote frontmatter ({} key(s))", len(data))
    return FixResult(content=new_content, changed=changed)


def migrate_type(
    content: str,
    from_type: str,
    to_type: str,
    registry: SchemaRegistry | None = None,
) -> FixResult:
    """Rewrite ``type: from_type`` to ``type: to_type``; other values are kept.

    With a *registry*, reference fields of the new type are written back as
    ``[[links]]``.
    """
    parsed = parse_frontmatter(content)
    if parsed.data is None or parsed.data.get("type") != from_type:
        return FixResult(content=content, changed=False)
    data = {**parsed.data, "type": to_type}
    entry = registry.get_entry(to_type) if registry is not None else None
    header = stringify_frontmatter(data, entry.reference_fields if entry else ())
    new_content = assemble_document(header, parsed.body)
    return FixResult(content=new_content, changed=new_content != content)

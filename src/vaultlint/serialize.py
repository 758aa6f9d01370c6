"""Frontmatter serializer.

Encodes a frontmatter mapping back to YAML in block style, preserving key
order.  Strings that start with ``YYYY-MM-DD`` are double quoted so they stay
strings on the next read instead of turning into dates; ``[[...]]`` link
strings are double quoted too, which is how Obsidian writes them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

import yaml

from vaultlint.parser import is_wikilink, unwrap_wikilink, wrap_wikilink

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


class _FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> Any:
        return super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if _DATE_PREFIX_RE.match(value) or is_wikilink(value):
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style='"')
    return dumper.represent_str(value)


_FrontmatterDumper.add_representer(str, _represent_str)


def _as_link(value: Any) -> Any:
    # Only values that read back unchanged are wrapped; "a]b" is written plain
    if not isinstance(value, str) or not value:
        return value
    wrapped = wrap_wikilink(value)
    return wrapped if unwrap_wikilink(wrapped) == value else value


def wrap_reference_fields(data: Mapping[str, Any], reference_fields: Iterable[str]) -> dict[str, Any]:
    """Return a copy of *data* with reference-field strings wrapped as ``[[v]]``."""
    result = dict(data)
    for name in reference_fields:
        value = result.get(name)
        if isinstance(value, list):
            result[name] = [_as_link(v) for v in value]
        elif name in result:
            result[name] = _as_link(value)
    return result


def stringify_frontmatter(data: Mapping[str, Any], reference_fields: Iterable[str] = ()) -> str:
    """Encode *data* as a YAML block (no delimiters, no trailing newline)."""
    payload = wrap_reference_fields(data, reference_fields)
    if not payload:
        return ""
    text = yaml.dump(
        payload,
        Dumper=_FrontmatterDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )
    return text.strip()


def assemble_document(header: str, body: str) -> str:
    """Glue a YAML block and a body (as returned by the parser) into a document."""
    if header:
        return f"---\n{header}\n---{body}"
    return f"---\n---{body}"

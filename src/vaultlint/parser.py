"""YAML-frontmatter parser.

Splits a Markdown document into its decoded frontmatter mapping and the
untouched body text.  The body is always sliced from the input string, so
whitespace, heading styles and code blocks survive byte for byte.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import yaml

from vaultlint.issues import Issue, IssueCode

# Opening delimiter must be the very first line
_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
# Closing delimiter: first subsequent line that is exactly "---"
_CLOSE_RE = re.compile(r"^---[ \t]*(?=\r?$)", re.MULTILINE)
# [[Target]] spanning the whole string, no nested brackets
_WIKILINK_RE = re.compile(r"\[\[([^\[\]]+)\]\]")


@dataclass
class ParsedDocument:
    """Result of parsing one document."""

    data: dict[str, Any] | None
    body: str
    issues: list[Issue] = field(default_factory=list)
    #: Raw YAML text between the delimiters
    raw_header: str = ""

    @property
    def is_valid(self) -> bool:
        return self.data is not None and not any(i.is_error for i in self.issues)


# ---------------------------------------------------------------------------
# Wiki-link helpers
# ---------------------------------------------------------------------------


def unwrap_wikilink(value: str) -> str:
    """Return ``X`` for ``"[[X]]"``; any other string is returned unchanged."""
    match = _WIKILINK_RE.fullmatch(value)
    return match.group(1) if match else value


def wrap_wikilink(value: str) -> str:
    """Return ``"[[value]]"``; already-wrapped values are left alone."""
    if _WIKILINK_RE.fullmatch(value):
        return value
    return f"[[{value}]]"


def is_wikilink(value: Any) -> bool:
    return isinstance(value, str) and _WIKILINK_RE.fullmatch(value) is not None


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def normalize_dates(value: Any) -> Any:
    """Turn any ``date``/``datetime`` produced by the YAML loader back into ``YYYY-MM-DD``."""
    if isinstance(value, date):
        return value.isoformat()[:10]
    if isinstance(value, list):
        return [normalize_dates(v) for v in value]
    if isinstance(value, dict):
        return {k: normalize_dates(v) for k, v in value.items()}
    return value


def normalize_wikilinks(value: Any) -> Any:
    """Strip ``[[...]]`` wrappers from whole-string values, recursively."""
    if isinstance(value, str):
        return unwrap_wikilink(value)
    if isinstance(value, list):
        return [normalize_wikilinks(v) for v in value]
    if isinstance(value, dict):
        return {k: normalize_wikilinks(v) for k, v in value.items()}
    return value


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keys every mapping by the key's source text.

    ``1``, ``1.0`` and ``true`` stay three distinct keys (``"1"``, ``"1.0"``,
    ``"true"``) instead of collapsing into one Python key.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[str, Any]:
        self.flatten_mapping(node)
        mapping: dict[str, Any] = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
            else:
                key = str(self.construct_object(key_node, deep=True))
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """Return ``(raw_header, body)`` or ``None`` when there is no complete block.

    *body* starts right after the closing ``---`` characters, so it begins
    with the line break that ends the delimiter line (if any).
    """
    opening = _OPEN_RE.match(content)
    if not opening:
        return None
    closing = _CLOSE_RE.search(content, opening.end())
    if not closing:
        return None
    raw_header = content[opening.end() : closing.start()]
    return raw_header, content[closing.end() :]


def parse_frontmatter(content: str) -> ParsedDocument:
    """Parse the frontmatter block of *content*.

    Never raises for malformed input; problems are reported as issues with
    ``data`` set to ``None``.
    """
    if not _OPEN_RE.match(content):
        return ParsedDocument(
            data=None,
            body=content,
            issues=[Issue.error(IssueCode.FM_MISSING, "No frontmatter found")],
        )

    parts = split_frontmatter(content)
    if parts is None:
        return ParsedDocument(
            data=None,
            body=content,
            issues=[
                Issue.error(
                    IssueCode.FM_PARSE_ERROR,
                    "Failed to parse frontmatter: missing closing '---' delimiter",
                )
            ],
        )
    raw_header, body = parts

    try:
        decoded = yaml.load(raw_header, Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        return ParsedDocument(
            data=None,
            body=content,
            raw_header=raw_header,
            issues=[Issue.error(IssueCode.FM_PARSE_ERROR, f"Failed to parse frontmatter: {exc}")],
        )

    if decoded is None:
        decoded = {}
    if not isinstance(decoded, dict):
        return ParsedDocument(
            data=None,
            body=content,
            raw_header=raw_header,
            issues=[
                Issue.error(
                    IssueCode.FM_PARSE_ERROR,
                    f"Failed to parse frontmatter: expected a mapping, got {type(decoded).__name__}",
                )
            ],
        )

    data = normalize_wikilinks(normalize_dates(decoded))
    return ParsedDocument(data=data, body=body, raw_header=raw_header)

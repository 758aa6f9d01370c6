"""Unit tests for vaultlint.parser."""

import textwrap

from vaultlint.issues import IssueCode
from vaultlint.parser import (
    is_wikilink,
    normalize_dates,
    parse_frontmatter,
    split_frontmatter,
    unwrap_wikilink,
    wrap_wikilink,
)

# ---------------------------------------------------------------------------
# parse_frontmatter
# ---------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_basic_frontmatter(self):
        raw = textwrap.dedent("""\
            ---
            type: project
            id: proj-1
            title: My Project
            ---
            # Heading

            Body here.
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data == {"type": "project", "id": "proj-1", "title": "My Project"}
        assert parsed.issues == []
        assert parsed.is_valid
        assert parsed.body == "\n# Heading\n\nBody here.\n"

    def test_no_frontmatter(self):
        parsed = parse_frontmatter("Just some text.")
        assert parsed.data is None
        assert parsed.body == "Just some text."
        assert [i.code for i in parsed.issues] == [IssueCode.FM_MISSING]
        assert parsed.issues[0].message == "No frontmatter found"
        assert not parsed.is_valid

    def test_frontmatter_not_at_start_is_missing(self):
        parsed = parse_frontmatter("Intro\n---\ntitle: Nope\n---\nMore text.")
        assert parsed.data is None
        assert parsed.issues[0].code is IssueCode.FM_MISSING

    def test_empty_block_is_empty_mapping(self):
        parsed = parse_frontmatter("---\n---\nBody.")
        assert parsed.data == {}
        assert parsed.issues == []
        assert parsed.body == "\nBody."

    def test_invalid_yaml_is_parse_error(self):
        parsed = parse_frontmatter("---\ntitle: [unclosed\n---\nBody.")
        assert parsed.data is None
        assert [i.code for i in parsed.issues] == [IssueCode.FM_PARSE_ERROR]
        assert parsed.issues[0].message.startswith("Failed to parse frontmatter")

    def test_missing_closing_delimiter_is_parse_error(self):
        parsed = parse_frontmatter("---\ntitle: Open\nno end here\n")
        assert parsed.data is None
        assert parsed.issues[0].code is IssueCode.FM_PARSE_ERROR

    def test_non_mapping_block_is_parse_error(self):
        parsed = parse_frontmatter("---\n- a\n- b\n---\n")
        assert parsed.data is None
        assert parsed.issues[0].code is IssueCode.FM_PARSE_ERROR

    def test_crlf_line_endings(self):
        parsed = parse_frontmatter("---\r\ntype: idea\r\n---\r\nBody\r\n")
        assert parsed.data == {"type": "idea"}
        assert parsed.body == "\r\nBody\r\n"

    def test_dates_are_normalised_to_strings(self):
        raw = textwrap.dedent("""\
            ---
            created: 2024-01-15
            updated: 2024-02-01T10:30:00
            ---
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data["created"] == "2024-01-15"
        assert parsed.data["updated"] == "2024-02-01"

    def test_wikilinks_are_unwrapped(self):
        raw = textwrap.dedent("""\
            ---
            type: decision
            projects:
              - "[[proj-alpha]]"
              - proj-beta
            parent: "[[proj-gamma]]"
            ---
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data["projects"] == ["proj-alpha", "proj-beta"]
        assert parsed.data["parent"] == "proj-gamma"

    def test_nested_values_are_normalised(self):
        raw = textwrap.dedent("""\
            ---
            meta:
              when: 2024-03-03
              link: "[[x]]"
            ---
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data["meta"] == {"when": "2024-03-03", "link": "x"}

    def test_keys_are_strings(self):
        parsed = parse_frontmatter("---\n1: one\ntrue: yes\n---\n")
        assert parsed.data == {"1": "one", "true": True}

    def test_keys_equal_in_python_stay_distinct(self):
        raw = textwrap.dedent("""\
            ---
            1: int
            1.0: float
            true: bool
            on: switch
            2024-01-01: dated
            ---
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data == {
            "1": "int",
            "1.0": "float",
            "true": "bool",
            "on": "switch",
            "2024-01-01": "dated",
        }

    def test_nested_keys_use_source_text(self):
        parsed = parse_frontmatter("---\nmeta:\n  1: a\n  true: b\nrows:\n  - 2: c\n---\n")
        assert parsed.data == {"meta": {"1": "a", "true": "b"}, "rows": [{"2": "c"}]}

    def test_merge_keys_still_resolved(self):
        raw = textwrap.dedent("""\
            ---
            base: &base
              status: active
            derived:
              <<: *base
              id: x
            ---
        """)
        parsed = parse_frontmatter(raw)
        assert parsed.data["derived"] == {"status": "active", "id": "x"}

    def test_raw_header_is_kept(self):
        parsed = parse_frontmatter("---\ntype: idea\n---\nBody")
        assert parsed.raw_header == "type: idea\n"

    def test_delimiter_with_trailing_spaces(self):
        parsed = parse_frontmatter("---  \ntype: idea\n---  \nBody")
        assert parsed.data == {"type": "idea"}
        assert parsed.body == "\nBody"


# ---------------------------------------------------------------------------
# split_frontmatter
# ---------------------------------------------------------------------------


class TestSplitFrontmatter:
    def test_returns_header_and_body(self):
        assert split_frontmatter("---\na: 1\n---\nrest") == ("a: 1\n", "\nrest")

    def test_none_without_block(self):
        assert split_frontmatter("no block") is None
        assert split_frontmatter("---\na: 1\n") is None

    def test_document_ending_at_delimiter(self):
        assert split_frontmatter("---\na: 1\n---") == ("a: 1\n", "")


# ---------------------------------------------------------------------------
# Wiki-link helpers
# ---------------------------------------------------------------------------


class TestWikilinks:
    def test_unwrap(self):
        assert unwrap_wikilink("[[proj-alpha]]") == "proj-alpha"

    def test_unwrap_plain_string_unchanged(self):
        assert unwrap_wikilink("proj-alpha") == "proj-alpha"

    def test_unwrap_partial_link_unchanged(self):
        assert unwrap_wikilink("see [[x]]") == "see [[x]]"
        assert unwrap_wikilink("[[a]] and [[b]]") == "[[a]] and [[b]]"

    def test_wrap(self):
        assert wrap_wikilink("proj-alpha") == "[[proj-alpha]]"

    def test_wrap_is_idempotent(self):
        assert wrap_wikilink("[[proj-alpha]]") == "[[proj-alpha]]"

    def test_symmetry(self):
        for value in ["a", "proj-alpha", "Some Title", "x/y"]:
            assert unwrap_wikilink(wrap_wikilink(value)) == value

    def test_is_wikilink(self):
        assert is_wikilink("[[a]]")
        assert not is_wikilink("a")
        assert not is_wikilink(["[[a]]"])


class TestNormalizeDates:
    def test_leaves_other_values(self):
        assert normalize_dates({"a": [1, "x", None]}) == {"a": [1, "x", None]}

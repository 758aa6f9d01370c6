"""Plain-text rendering of issues and index statistics."""

from __future__ import annotations

from vaultlint.issues import Issue
from vaultlint.node import VaultStats


def format_issue(file_path: str, issue: Issue) -> str:
    """Render one issue as ``[SEVERITY] path (field): message``.

    The field part is omitted for document-level issues; a suggestion, when
    present, follows on an indented second line.
    """
    location = f" ({'.'.join(issue.path)})" if issue.path else ""
    line = f"[{issue.severity.value.upper()}] {file_path}{location}: {issue.message}"
    if issue.suggestion:
        line += f"\n  → {issue.suggestion}"
    return line


def format_issues(issues_by_file: dict[str, list[Issue]]) -> str:
    lines = [format_issue(path, issue) for path, issues in issues_by_file.items() for issue in issues]
    return "\n".join(lines)


def build_summary(stats: VaultStats) -> str:
    """One-line summary, e.g. ``12 files, 10 valid, 3 errors, 1 warning``."""
    return (
        f"{stats.total_files} {_plural(stats.total_files, 'file')}, "
        f"{stats.valid_files} valid, "
        f"{stats.error_count} {_plural(stats.error_count, 'error')}, "
        f"{stats.warning_count} {_plural(stats.warning_count, 'warning')}"
    )


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"

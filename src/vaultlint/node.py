"""File nodes, reference edges and vault statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vaultlint.issues import Issue


@dataclass(frozen=True)
class FileNode:
    """One indexed file.  Built once per indexing pass and never mutated."""

    file_path: str
    type: str | None
    id: str | None
    title: str | None
    is_valid: bool
    error_count: int
    warning_count: int
    #: Parsed frontmatter; present only for typed files
    frontmatter: dict[str, Any] | None = None
    #: The file's own parse and schema issues
    issues: tuple[Issue, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "filePath": self.file_path,
            "type": self.type,
            "id": self.id,
            "title": self.title,
            "isValid": self.is_valid,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
        }
        if self.frontmatter is not None:
            result["frontmatter"] = self.frontmatter
        return result


@dataclass(frozen=True)
class ReferenceEdge:
    """``source_file`` names ``target_id`` through reference field ``field``."""

    source_file: str
    target_id: str
    field: str

    def to_dict(self) -> dict[str, str]:
        return {"sourceFile": self.source_file, "targetId": self.target_id, "field": self.field}


@dataclass(frozen=True)
class VaultStats:
    total_files: int = 0
    valid_files: int = 0
    error_count: int = 0
    warning_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalFiles": self.total_files,
            "validFiles": self.valid_files,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
        }

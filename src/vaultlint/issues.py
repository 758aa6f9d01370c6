"""Validation issues: pure data, never raised."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    """Stable issue codes. Values are part of the public contract."""

    FM_MISSING = "FM_MISSING"
    FM_PARSE_ERROR = "FM_PARSE_ERROR"
    FM_MISSING_TYPE = "FM_MISSING_TYPE"
    FM_UNKNOWN_TYPE = "FM_UNKNOWN_TYPE"
    FM_MAPPED_TYPE = "FM_MAPPED_TYPE"
    FM_SCHEMA_INVALID = "FM_SCHEMA_INVALID"
    FM_UNKNOWN_KEY = "FM_UNKNOWN_KEY"
    FM_TAGS_NOT_ARRAY = "FM_TAGS_NOT_ARRAY"
    FM_STALE_SUMMARY = "FM_STALE_SUMMARY"
    VAULT_DUPLICATE_ID = "VAULT_DUPLICATE_ID"
    VAULT_MISSING_REFERENCE = "VAULT_MISSING_REFERENCE"


@dataclass(frozen=True)
class Issue:
    """A single problem found in a document or across the vault."""

    severity: Severity
    code: IssueCode
    message: str
    #: Field path inside the frontmatter, e.g. ``("projects",)``
    path: tuple[str, ...] = ()
    suggestion: str | None = None

    @classmethod
    def error(cls, code: IssueCode, message: str, **kwargs: Any) -> "Issue":
        return cls(Severity.ERROR, code, message, **kwargs)

    @classmethod
    def warning(cls, code: IssueCode, message: str, **kwargs: Any) -> "Issue":
        return cls(Severity.WARNING, code, message, **kwargs)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "severity": self.severity.value,
            "code": self.code.value,
            "message": self.message,
        }
        if self.path:
            result["path"] = list(self.path)
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


def count_by_severity(issues: list[Issue]) -> tuple[int, int]:
    """Return ``(errors, warnings)`` for *issues*."""
    errors = sum(1 for i in issues if i.is_error)
    return errors, len(issues) - errors

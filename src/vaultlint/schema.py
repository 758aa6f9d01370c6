"""Declarative schema model for one document type.

A :class:`SchemaModel` is an ordered tuple of :class:`Field` descriptors.  The
model is plain data: validation, introspection and default extraction all read
it directly.

Example::

    project = SchemaModel(
        "project",
        [
            literal("type", "project"),
            string("id", min_length=1, description="Unique project id"),
            enum("status", ["active", "paused"], description="Lifecycle state"),
            array("tags", default=[], description="Freeform tags"),
            date("created", optional=True, description="Creation date"),
        ],
    )
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date as _date
from enum import Enum
from typing import Any


class FieldKind(str, Enum):
    STRING = "string"
    DATE = "date"
    LITERAL = "literal"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


#: Sentinel for "no default declared"
MISSING: Any = _Missing()

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ---------------------------------------------------------------------------
# Field descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Field:
    """One field of a document type."""

    name: str
    kind: FieldKind
    optional: bool = False
    default: Any = MISSING
    description: str = ""
    #: ENUM only
    values: tuple[str, ...] = ()
    #: LITERAL only
    literal: Any = None
    #: ARRAY only: kind of each element
    items: FieldKind | None = None
    #: STRING only
    min_length: int = 0

    @property
    def required(self) -> bool:
        """True when the field has neither an optional nor a default wrapper."""
        return not self.optional and self.default is MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def default_value(self) -> Any:
        """Return the value a freshly scaffolded document gets for this field."""
        if self.kind is FieldKind.LITERAL:
            return self.literal
        if self.has_default:
            return copy.deepcopy(self.default)
        if self.kind is FieldKind.ENUM:
            return self.values[0] if self.values else ""
        if self.kind is FieldKind.ARRAY:
            return []
        if self.kind is FieldKind.OBJECT:
            return {}
        return ""

    def check(self, value: Any) -> str | None:
        """Return a problem description for *value*, or ``None`` if it conforms."""
        return _check_kind(
            self.kind,
            value,
            values=self.values,
            literal=self.literal,
            items=self.items,
            min_length=self.min_length,
        )


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _check_kind(
    kind: FieldKind,
    value: Any,
    *,
    values: tuple[str, ...] = (),
    literal: Any = None,
    items: FieldKind | None = None,
    min_length: int = 0,
) -> str | None:
    if kind is FieldKind.STRING:
        if not isinstance(value, str):
            return f"Expected string, received {_type_name(value)}"
        if len(value) < min_length:
            return f"String must contain at least {min_length} character(s)"
        return None

    if kind is FieldKind.DATE:
        if not isinstance(value, str):
            return f"Expected string, received {_type_name(value)}"
        if not is_iso_date(value):
            return f"Invalid date {value!r}, expected YYYY-MM-DD"
        return None

    if kind is FieldKind.LITERAL:
        if value != literal or type(value) is not type(literal):
            return f"Invalid literal value, expected {literal!r}"
        return None

    if kind is FieldKind.ENUM:
        if value not in values:
            allowed = " | ".join(repr(v) for v in values)
            return f"Invalid enum value. Expected {allowed}, received {value!r}"
        return None

    if kind is FieldKind.ARRAY:
        if not isinstance(value, list):
            return f"Expected array, received {_type_name(value)}"
        if items is not None:
            for pos, item in enumerate(value):
                problem = _check_kind(items, item)
                if problem:
                    return f"Item {pos}: {problem}"
        return None

    if kind is FieldKind.OBJECT:
        if not isinstance(value, Mapping):
            return f"Expected object, received {_type_name(value)}"
        return None

    raise ValueError(f"Unsupported field kind: {kind!r}")


def is_iso_date(value: str) -> bool:
    """True if *value* is a real calendar date written as ``YYYY-MM-DD``."""
    if not _ISO_DATE_RE.match(value):
        return False
    try:
        _date.fromisoformat(value)
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# Field constructors
# ---------------------------------------------------------------------------


def string(
    name: str,
    *,
    min_length: int = 0,
    optional: bool = False,
    default: Any = MISSING,
    description: str = "",
) -> Field:
    return Field(
        name,
        FieldKind.STRING,
        optional=optional,
        default=default,
        description=description,
        min_length=min_length,
    )


def date(name: str, *, optional: bool = False, default: Any = MISSING, description: str = "") -> Field:
    return Field(name, FieldKind.DATE, optional=optional, default=default, description=description)


def literal(name: str, value: Any, *, description: str = "") -> Field:
    return Field(name, FieldKind.LITERAL, literal=value, description=description)


def enum(
    name: str,
    values: Iterable[str],
    *,
    optional: bool = False,
    default: Any = MISSING,
    description: str = "",
) -> Field:
    return Field(
        name,
        FieldKind.ENUM,
        values=tuple(values),
        optional=optional,
        default=default,
        description=description,
    )


def array(
    name: str,
    items: FieldKind = FieldKind.STRING,
    *,
    optional: bool = False,
    default: Any = MISSING,
    description: str = "",
) -> Field:
    return Field(
        name,
        FieldKind.ARRAY,
        items=items,
        optional=optional,
        default=default,
        description=description,
    )


def obj(name: str, *, optional: bool = False, default: Any = MISSING, description: str = "") -> Field:
    return Field(name, FieldKind.OBJECT, optional=optional, default=default, description=description)


# ---------------------------------------------------------------------------
# Schema model
# ---------------------------------------------------------------------------


class SchemaModel:
    """Closed, ordered set of fields for one document type."""

    __slots__ = ("type_name", "fields", "description", "_by_name")

    def __init__(self, type_name: str, fields: Iterable[Field], description: str = "") -> None:
        fields = tuple(fields)
        by_name: dict[str, Field] = {}
        for f in fields:
            if f.name in by_name:
                raise ValueError(f"Schema {type_name!r} declares field {f.name!r} twice")
            by_name[f.name] = f

        type_field = by_name.get("type")
        if (
            type_field is None
            or type_field.kind is not FieldKind.LITERAL
            or type_field.literal != type_name
        ):
            raise ValueError(
                f"Schema {type_name!r} must declare a 'type' field that is literal({type_name!r})"
            )

        self.type_name = type_name
        self.fields: tuple[Field, ...] = fields
        self.description = description
        self._by_name = by_name

    def __repr__(self) -> str:
        return f"SchemaModel({self.type_name!r}, fields={self.field_names()!r})"

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Field | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def defaults(self) -> dict[str, Any]:
        """Default value for every non-optional field, in declaration order."""
        return {f.name: f.default_value() for f in self.fields if not f.optional}

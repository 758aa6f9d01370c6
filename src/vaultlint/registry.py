"""Schema registry: type name -> :class:`SchemaEntry`.

The registry is an ordinary object owned by the caller.  Build one at start-up,
register the vault's document types on it, and pass it to the validator,
indexer, autofix pipeline and scaffolder.  Tests simply create a fresh one.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from vaultlint.schema import Field, FieldKind, SchemaModel


class UnknownTypeError(LookupError):
    """Raised when an operation needs a schema for a type that is not registered."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f'Unknown schema type: "{type_name}". Register it with SchemaRegistry.register().'
        )


@dataclass(frozen=True)
class SchemaEntry:
    """A registered type: its model plus graph/serialization metadata."""

    type: str
    model: SchemaModel
    #: Field holding the document's unique identity
    id_field: str = "id"
    #: Fields whose values name other documents by identity
    reference_fields: tuple[str, ...] = ()
    #: Key order used when re-serializing; defaults to the model's field order
    key_order: tuple[str, ...] = ()

    @property
    def field_names(self) -> set[str]:
        return set(self.model.field_names())


# ---------------------------------------------------------------------------
# Introspection descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: str
    required: bool
    description: str | None = None
    literal: Any = None
    values: tuple[str, ...] | None = None
    items: str | None = None

    @classmethod
    def from_field(cls, f: Field) -> "FieldDescriptor":
        return cls(
            name=f.name,
            kind=f.kind.value,
            required=f.required,
            description=f.description or None,
            literal=f.literal if f.kind is FieldKind.LITERAL else None,
            values=f.values if f.kind is FieldKind.ENUM else None,
            items=f.items.value if f.kind is FieldKind.ARRAY and f.items else None,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "kind": self.kind, "required": self.required}
        if self.description:
            result["description"] = self.description
        if self.literal is not None:
            result["literal"] = self.literal
        if self.values is not None:
            result["values"] = list(self.values)
        if self.items is not None:
            result["items"] = self.items
        return result


@dataclass(frozen=True)
class SchemaDescriptor:
    type: str
    id_field: str
    reference_fields: tuple[str, ...]
    fields: list[FieldDescriptor] = field(default_factory=list)
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "idField": self.id_field,
            "referenceFields": list(self.reference_fields),
            "fields": [f.to_dict() for f in self.fields],
        }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class SchemaRegistry:
    """Holds every registered document type, keyed by type name."""

    def __init__(self) -> None:
        self._entries: dict[str, SchemaEntry] = {}

    def register(
        self,
        type_name: str,
        model: SchemaModel,
        *,
        id_field: str = "id",
        reference_fields: Iterable[str] = (),
        key_order: Iterable[str] | None = None,
    ) -> SchemaEntry:
        """Register (or replace) *type_name*.  Entries are never mutated in place."""
        if model.type_name != type_name:
            raise ValueError(
                f"Schema model is for type {model.type_name!r}, cannot register as {type_name!r}"
            )
        entry = SchemaEntry(
            type=type_name,
            model=model,
            id_field=id_field,
            reference_fields=tuple(reference_fields),
            key_order=tuple(key_order) if key_order is not None else tuple(model.field_names()),
        )
        self._entries[type_name] = entry
        return entry

    def get(self, type_name: str) -> SchemaModel | None:
        entry = self._entries.get(type_name)
        return entry.model if entry else None

    def get_entry(self, type_name: str) -> SchemaEntry | None:
        return self._entries.get(type_name)

    def require_entry(self, type_name: str) -> SchemaEntry:
        entry = self._entries.get(type_name)
        if entry is None:
            raise UnknownTypeError(type_name)
        return entry

    def list_types(self) -> list[str]:
        """Registered type names in registration order."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries = {}

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def introspect(self, type_name: str) -> SchemaDescriptor | None:
        entry = self._entries.get(type_name)
        if entry is None:
            return None
        return SchemaDescriptor(
            type=type_name,
            description=entry.model.description or None,
            id_field=entry.id_field,
            reference_fields=entry.reference_fields,
            fields=[FieldDescriptor.from_field(f) for f in entry.model.fields],
        )

    def introspect_all_types(self) -> list[str]:
        return sorted(self._entries)

    def defaults(self, type_name: str) -> dict[str, Any]:
        """Schema-derived default values for *type_name* (empty if unregistered)."""
        entry = self._entries.get(type_name)
        return entry.model.defaults() if entry else {}

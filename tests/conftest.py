import pytest

from vaultlint.builtin_schemas import load_default_schemas
from vaultlint.registry import SchemaRegistry


@pytest.fixture()
def registry() -> SchemaRegistry:
    """A fresh registry with the built-in document types."""
    return load_default_schemas(SchemaRegistry())

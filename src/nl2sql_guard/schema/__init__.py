"""Schema registry helpers."""

from nl2sql_guard.schema.registry import (
    Entity,
    FieldInfo,
    Registry,
    RegistryError,
    build_registry,
    load_registry,
    parse_entity,
)

__all__ = [
    "Entity",
    "FieldInfo",
    "Registry",
    "RegistryError",
    "build_registry",
    "load_registry",
    "parse_entity",
]

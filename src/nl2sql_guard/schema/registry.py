"""Semantic entity registry with precomputed lookup indexes."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """Raised when a registry payload cannot be loaded safely."""


@dataclass(frozen=True)
class FieldInfo:
    name: str
    aliases: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"name": self.name}
        if self.aliases:
            payload["aliases"] = list(self.aliases)
        return payload


@dataclass(frozen=True)
class Entity:
    """Logical table definition; indexes are derived once at construction."""

    name: str
    table: str
    dimensions: tuple[FieldInfo, ...] = ()
    time_dimensions: tuple[FieldInfo, ...] = ()
    measures: tuple[FieldInfo, ...] = ()
    metrics: tuple[FieldInfo, ...] = ()
    description: str | None = None
    dim_index: frozenset[str] = field(init=False, repr=False, compare=False)
    time_index: frozenset[str] = field(init=False, repr=False, compare=False)
    measure_index: frozenset[str] = field(init=False, repr=False, compare=False)
    metric_index: frozenset[str] = field(init=False, repr=False, compare=False)
    reverse_alias_index: Mapping[str, str] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        measure_names = frozenset(item.name for item in self.measures)
        object.__setattr__(
            self, "dim_index", frozenset(item.name for item in self.dimensions)
        )
        object.__setattr__(
            self, "time_index", frozenset(item.name for item in self.time_dimensions)
        )
        object.__setattr__(self, "measure_index", measure_names)
        object.__setattr__(
            self,
            "metric_index",
            measure_names | frozenset(item.name for item in self.metrics),
        )

        reverse: dict[str, str] = {}
        for item in (
            *self.dimensions,
            *self.time_dimensions,
            *self.measures,
            *self.metrics,
        ):
            for alias in item.aliases:
                existing = reverse.get(alias)
                if existing is not None and existing != item.name:
                    raise RegistryError(
                        f"Entity '{self.name}' alias '{alias}' maps to both "
                        f"'{existing}' and '{item.name}'."
                    )
                reverse[alias] = item.name
        object.__setattr__(self, "reverse_alias_index", MappingProxyType(reverse))

    def canonical(self, name: str) -> str | None:
        return self.reverse_alias_index.get(name)

    def has_time_dimensions(self) -> bool:
        return bool(self.time_dimensions)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "table": self.table,
            "description": self.description,
            "dimensions": [item.to_dict() for item in self.dimensions],
            "time_dimensions": [item.to_dict() for item in self.time_dimensions],
            "measures": [item.to_dict() for item in self.measures],
            "metrics": [item.to_dict() for item in self.metrics],
        }


class Registry(Mapping[str, Entity]):
    """Read-only mapping of entity name to :class:`Entity`.

    The set of identifiers known to the quote normalizer is computed once
    here, so a registry snapshot can be shared across requests.
    """

    def __init__(self, entities: Mapping[str, Entity] | None = None) -> None:
        self._entities: dict[str, Entity] = dict(entities or {})
        known: set[str] = set()
        for entity in self._entities.values():
            known.add(entity.name)
            known.add(entity.table)
            for item in entity.dimensions:
                known.add(item.name)
                known.update(item.aliases)
            for item in entity.time_dimensions:
                known.add(item.name)
            for item in (*entity.measures, *entity.metrics):
                known.add(item.name)
        self.known_identifiers: frozenset[str] = frozenset(known)
        self.known_identifiers_lower: frozenset[str] = frozenset(
            value.lower() for value in known
        )

    def __getitem__(self, name: str) -> Entity:
        return self._entities[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"Registry({sorted(self._entities)!r})"

    @property
    def tables(self) -> frozenset[str]:
        return frozenset(entity.table for entity in self._entities.values())

    def has_time_dimensions(self) -> bool:
        return any(entity.has_time_dimensions() for entity in self._entities.values())

    def to_dict(self) -> dict[str, object]:
        return {"entities": [entity.to_dict() for entity in self._entities.values()]}


def _parse_fields(
    entity_name: str, kind: str, payload: Any
) -> tuple[FieldInfo, ...]:
    if payload is None:
        return ()
    if not isinstance(payload, list):
        raise RegistryError(f"Entity '{entity_name}' has invalid '{kind}'.")

    fields: list[FieldInfo] = []
    for item in payload:
        if not isinstance(item, dict):
            raise RegistryError(f"Entity '{entity_name}' has invalid {kind} entry.")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise RegistryError(f"Entity '{entity_name}' {kind} entry missing name.")
        aliases = item.get("aliases") or []
        if not isinstance(aliases, list) or not all(
            isinstance(alias, str) for alias in aliases
        ):
            raise RegistryError(
                f"Entity '{entity_name}' {kind} '{name}' has invalid aliases."
            )
        fields.append(FieldInfo(name=name, aliases=tuple(aliases)))
    return tuple(fields)


def parse_entity(payload: Any) -> Entity:
    """Build a single :class:`Entity` from its JSON representation."""
    if not isinstance(payload, dict):
        raise RegistryError("Entity entry must be a JSON object.")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise RegistryError("Entity entry is missing a valid 'name'.")
    table = payload.get("table", name)
    if not isinstance(table, str) or not table.strip():
        raise RegistryError(f"Entity '{name}' has invalid 'table'.")
    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        raise RegistryError(f"Entity '{name}' has invalid description.")

    return Entity(
        name=name,
        table=table,
        dimensions=_parse_fields(name, "dimensions", payload.get("dimensions")),
        time_dimensions=_parse_fields(
            name, "time_dimensions", payload.get("time_dimensions")
        ),
        measures=_parse_fields(name, "measures", payload.get("measures")),
        metrics=_parse_fields(name, "metrics", payload.get("metrics")),
        description=description,
    )


def build_registry(payload: Any) -> Registry:
    """Build a registry from ``{"entities": [...]}`` or a bare entity list."""
    if isinstance(payload, dict):
        payload = payload.get("entities")
    if not isinstance(payload, list):
        raise RegistryError("Registry payload must contain an 'entities' list.")

    entities: dict[str, Entity] = {}
    for item in payload:
        entity = parse_entity(item)
        if entity.name in entities:
            raise RegistryError(f"Duplicate entity name '{entity.name}'.")
        entities[entity.name] = entity

    logger.debug("Built registry with %d entities", len(entities))
    return Registry(entities)


def load_registry(registry_path: Path) -> Registry:
    """Load and validate a registry JSON file."""
    if not registry_path.exists():
        raise RegistryError(f"Registry file does not exist: {registry_path}")

    try:
        payload = json.loads(registry_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RegistryError(f"Registry file is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise RegistryError(f"Failed to read registry file: {exc}") from exc

    return build_registry(payload)

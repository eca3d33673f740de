"""Table allow-list policy applied to registry snapshots."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from nl2sql_guard.schema.registry import Registry

TablePolicy = Callable[[Registry], None]


class PolicyError(RuntimeError):
    """Raised when a registry exposes tables outside the allow list."""


@dataclass(frozen=True)
class AllowedTablesPolicy:
    """Reject registries referencing tables outside ``allowed_tables``.

    An empty allow list permits every table.
    """

    allowed_tables: frozenset[str] = frozenset()

    @classmethod
    def from_names(cls, names: Iterable[str] | None) -> AllowedTablesPolicy:
        return cls(frozenset(name.strip() for name in names or () if name.strip()))

    def __call__(self, registry: Registry) -> None:
        verify_allowed_tables(registry, self.allowed_tables)


def verify_allowed_tables(registry: Registry, allowed_tables: Iterable[str]) -> None:
    allowed = set(allowed_tables)
    if not allowed:
        return

    disallowed = sorted(registry.tables - allowed)
    if disallowed:
        raise PolicyError(
            "Registry references tables outside the allowed list: "
            + ", ".join(disallowed)
        )

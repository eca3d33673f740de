"""Typed finalized query plan consumed by the semantic validator."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _PlanModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class JoinEdge(_PlanModel):
    """Declared relationship between two entities."""

    from_entity: str = Field(alias="from", min_length=1)
    to_entity: str = Field(alias="to", min_length=1)


class PlanIntent(_PlanModel):
    """Requested fields; each reference is ``field`` or ``entity.field``."""

    dimensions: list[str] = Field(default_factory=list)
    metrics: list[str] = Field(default_factory=list)
    # Planner-defined shape; only its truthiness is checked.
    time_range: Any = None

    @field_validator("dimensions", "metrics", mode="before")
    @classmethod
    def null_as_empty(cls, value: list[str] | None) -> list[str]:
        return [] if value is None else value


class FinalizedPlan(_PlanModel):
    """Planner output contract for a single query."""

    selected_entities: list[str] = Field(default_factory=list)
    join_graph: list[JoinEdge] = Field(default_factory=list)
    intent: PlanIntent = Field(default_factory=PlanIntent)

"""Semantic validation of finalized plans and the full pre-execution pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nl2sql_guard.models.plan import FinalizedPlan
from nl2sql_guard.policy import TablePolicy
from nl2sql_guard.schema.registry import Entity, Registry
from nl2sql_guard.sql.quotes import normalize_quotes
from nl2sql_guard.sql.safety import ValidationResult, scan_statement_safety

logger = logging.getLogger(__name__)


class SQLValidationError(RuntimeError):
    """Raised when SQL fails validation guardrails."""


@dataclass(frozen=True)
class SemanticValidationResult(ValidationResult):
    """Semantic check outcome; ``semantic_ok`` mirrors ``ok``."""

    @property
    def semantic_ok(self) -> bool:
        return self.ok

    def to_dict(self) -> dict[str, object]:
        return {**super().to_dict(), "semantic_ok": self.semantic_ok}


@dataclass(frozen=True)
class SQLValidationResult:
    """Structured result of the normalize, scan and semantic pipeline."""

    is_valid: bool
    sql: str
    normalized_sql: str
    issues: list[str] = field(default_factory=list)


def _dimension_in_entity(entity: Entity, name: str) -> bool:
    if name in entity.dim_index or name in entity.time_index:
        return True
    canonical = entity.canonical(name)
    return canonical is not None and (
        canonical in entity.dim_index or canonical in entity.time_index
    )


def _metric_in_entity(entity: Entity, name: str) -> bool:
    if name in entity.metric_index:
        return True
    canonical = entity.canonical(name)
    return canonical is not None and canonical in entity.metric_index


def _resolve_field(registry: Registry, reference: str, matcher) -> bool:
    if "." in reference:
        entity_name, field_name = reference.split(".")[:2]
        entity = registry.get(entity_name)
        return entity is not None and matcher(entity, field_name)
    return any(matcher(entity, reference) for entity in registry.values())


def validate_semantics(
    plan: FinalizedPlan,
    sql: str,
    registry: Registry,
    *,
    policy: TablePolicy | None = None,
) -> SemanticValidationResult:
    """Cross-check a plan's entities, joins and fields against the registry."""
    issues: list[str] = []

    if policy is not None:
        try:
            policy(registry)
        except Exception as exc:  # noqa: BLE001 - policy verdicts become issues
            issues.append(str(exc) or exc.__class__.__name__)

    for entity_name in plan.selected_entities:
        if entity_name not in registry:
            issues.append(f'Selected entity "{entity_name}" not loaded.')

    for edge in plan.join_graph:
        if edge.from_entity not in registry:
            issues.append(f'Join edge from missing entity "{edge.from_entity}".')
        if edge.to_entity not in registry:
            issues.append(f'Join edge to missing entity "{edge.to_entity}".')

    for dimension in plan.intent.dimensions:
        if not _resolve_field(registry, dimension, _dimension_in_entity):
            issues.append(
                f'Dimension "{dimension}" not found in selected entities or aliases.'
            )

    for metric in plan.intent.metrics:
        if not _resolve_field(registry, metric, _metric_in_entity):
            issues.append(
                f'Metric/measure "{metric}" not found in selected entities or aliases.'
            )

    if plan.intent.time_range and not registry.has_time_dimensions():
        issues.append("Time range provided but no time dimensions available.")

    logger.debug(
        "Semantic validation finished with %d issue(s) for SQL: %s",
        len(issues),
        sql,
    )
    return SemanticValidationResult(ok=not issues, issues=issues)


def validate_sql(
    plan: FinalizedPlan,
    sql: str,
    registry: Registry,
    *,
    policy: TablePolicy | None = None,
    strict: bool = False,
) -> SQLValidationResult:
    """Normalize quoting, then run the safety scan and semantic checks."""
    normalized_sql = normalize_quotes(sql, registry)
    safety = scan_statement_safety(normalized_sql, strict=strict)
    semantics = validate_semantics(plan, normalized_sql, registry, policy=policy)
    issues = [*safety.issues, *semantics.issues]
    return SQLValidationResult(
        is_valid=not issues,
        sql=sql,
        normalized_sql=normalized_sql,
        issues=issues,
    )


def ensure_valid_sql(
    plan: FinalizedPlan,
    sql: str,
    registry: Registry,
    *,
    policy: TablePolicy | None = None,
    strict: bool = False,
) -> SQLValidationResult:
    """Validate SQL and raise when issues are present."""
    result = validate_sql(plan, sql, registry, policy=policy, strict=strict)
    if not result.is_valid:
        raise SQLValidationError("\n".join(f"- {item}" for item in result.issues))
    return result

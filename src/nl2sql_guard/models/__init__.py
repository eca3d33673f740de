"""Input contracts produced by upstream planning stages."""

from nl2sql_guard.models.plan import FinalizedPlan, JoinEdge, PlanIntent

__all__ = ["FinalizedPlan", "JoinEdge", "PlanIntent"]

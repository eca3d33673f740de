"""Pre-execution guardrails for generated SQL."""

__version__ = "0.1.0"

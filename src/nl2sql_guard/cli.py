"""Command-line entrypoint for nl2sql-guard."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from nl2sql_guard import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nl2sql-guard",
        description=(
            "Pre-execution guardrails for generated SQL: quote repair, "
            "statement safety, semantic plan checks and error classification."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "config-check",
        help="Validate environment configuration for nl2sql-guard.",
    )
    subparsers.add_parser(
        "show-registry",
        help="Show entities loaded from the registry file.",
    )
    normalize_parser = subparsers.add_parser(
        "normalize-sql",
        help="Rewrite double-quoted literal values to single quotes.",
    )
    normalize_parser.add_argument("sql", help="SQL statement to normalize.")
    scan_parser = subparsers.add_parser(
        "scan-sql",
        help="Run the statement safety scan on a SQL statement.",
    )
    scan_parser.add_argument("sql", help="SQL statement to scan.")
    scan_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Also require the SQL to parse as a single query.",
    )
    validate_parser = subparsers.add_parser(
        "validate-plan",
        help="Validate SQL and its finalized plan against the registry.",
    )
    validate_parser.add_argument(
        "plan", type=Path, help="Path to the finalized plan JSON file."
    )
    validate_parser.add_argument("sql", help="SQL statement produced for the plan.")
    classify_parser = subparsers.add_parser(
        "classify-error",
        help="Classify a database error message for the repair loop.",
    )
    classify_parser.add_argument("message", help="Raw database error text.")
    return parser


def _print_issues(title: str, issues: list[str]) -> None:
    print(title)
    for issue in issues:
        print(f"- {issue}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    from nl2sql_guard.config import ConfigError, load_settings

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level_number,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "config-check":
        allowed = ", ".join(settings.allowed_tables) or "(all)"
        print("Configuration loaded successfully:")
        print(f"- REGISTRY_PATH: {settings.registry_path}")
        print(f"- ALLOWED_TABLES: {allowed}")
        print(f"- STRICT_SQL_VALIDATION: {settings.strict_sql_validation}")
        print(f"- LOG_LEVEL: {settings.log_level}")
        return 0

    if args.command == "scan-sql":
        from nl2sql_guard.sql.safety import scan_statement_safety

        strict = settings.strict_sql_validation if args.strict is None else args.strict
        result = scan_statement_safety(args.sql, strict=strict)
        if not result.ok:
            _print_issues("Statement safety scan failed:", result.issues)
            return 1
        print("Statement safety scan passed.")
        return 0

    if args.command == "classify-error":
        from nl2sql_guard.execute.errors import classify_error

        classified = classify_error(args.message)
        if classified is None:
            print("Unclassified database error.")
            return 1
        print(f"Classified as {type(classified).__name__}:")
        print(f"- retryable: {'yes' if classified.retryable else 'no'}")
        for key, value in vars(classified).items():
            if isinstance(value, tuple):
                value = ", ".join(value)
            print(f"- {key}: {value}")
        return 0

    from nl2sql_guard.schema.registry import RegistryError, load_registry

    try:
        registry = load_registry(settings.registry_path)
    except RegistryError as exc:
        print(f"Registry load failed:\n{exc}", file=sys.stderr)
        return 1

    if args.command == "show-registry":
        print("Registry loaded:")
        print(f"- registry_path: {settings.registry_path}")
        print(f"- entities: {len(registry)}")
        for entity in registry.values():
            print(
                f"- {entity.name} (table={entity.table}) "
                f"dimensions={len(entity.dimensions)} "
                f"time_dimensions={len(entity.time_dimensions)} "
                f"measures={len(entity.metric_index)}"
            )
        return 0

    if args.command == "normalize-sql":
        from nl2sql_guard.sql.quotes import normalize_quotes

        print(normalize_quotes(args.sql, registry))
        return 0

    if args.command == "validate-plan":
        from pydantic import ValidationError

        from nl2sql_guard.models.plan import FinalizedPlan
        from nl2sql_guard.policy import AllowedTablesPolicy
        from nl2sql_guard.sql.validator import validate_sql

        try:
            payload = json.loads(args.plan.read_text(encoding="utf-8"))
            plan = FinalizedPlan.model_validate(payload)
        except (OSError, json.JSONDecodeError) as exc:
            print(f"Plan file could not be read:\n{exc}", file=sys.stderr)
            return 1
        except ValidationError as exc:
            print(f"Plan file is invalid:\n{exc}", file=sys.stderr)
            return 1

        validation = validate_sql(
            plan,
            args.sql,
            registry,
            policy=AllowedTablesPolicy.from_names(settings.allowed_tables),
            strict=settings.strict_sql_validation,
        )
        if not validation.is_valid:
            _print_issues("SQL validation failed:", validation.issues)
            return 1

        print("SQL validation succeeded.")
        print("\nNormalized SQL:")
        print(validation.normalized_sql)
        return 0

    print(f"Unknown command '{args.command}'.", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())

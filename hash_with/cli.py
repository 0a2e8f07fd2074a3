"""hash-with command line tool.

Resolves record schema files and prints the contribution plan, the
generated Python hash method, or the resolution errors.

Usage:
    hash-with plan schema.json [--json]
    hash-with emit schema.json [--config generator.json]
    hash-with check schema.json [--json]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import GeneratorConfig, config_from_env, load_config
from .emitter import render_hash_function
from .errors import HashWithError, SchemaResolutionError
from .loader import load_record_schemas
from .planner import compile_schemas, compute_plan_hash
from .types import EmissionPlan

logger = logging.getLogger(__name__)


def format_plan(plan: EmissionPlan) -> str:
    """Human-readable plan listing."""
    lines = [f"{plan.record_name} (plan hash {compute_plan_hash(plan)[:16]})"]
    if plan.is_empty:
        lines.append("  (no contributions)")
    for i, step in enumerate(plan.steps, 1):
        lines.append(f"  {i}. {step.field_name}: {step.policy}")
    return "\n".join(lines)


def _plan_to_dict(plan: EmissionPlan) -> dict:
    data = plan.model_dump(mode="json")
    data["plan_hash"] = compute_plan_hash(plan)
    return data


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    if args.config is not None:
        return load_config(args.config)
    return config_from_env()


def run(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    schemas = load_record_schemas(args.schema)
    results = compile_schemas(schemas, config)

    failures = {name: r for name, r in results.items() if isinstance(r, SchemaResolutionError)}
    plans = {name: r for name, r in results.items() if isinstance(r, EmissionPlan)}

    if args.command == "check":
        if args.json:
            print(json.dumps({
                "ok": not failures,
                "records": list(results),
                "errors": [e.to_dict() for e in failures.values()]
            }, indent=2))
        else:
            for name in results:
                print(f"{name}: {failures[name] if name in failures else 'OK'}")
        return 1 if failures else 0

    for error in failures.values():
        print(str(error), file=sys.stderr)
    if failures:
        return 1

    if args.command == "plan":
        if args.json:
            print(json.dumps([_plan_to_dict(p) for p in plans.values()], indent=2))
        else:
            print("\n\n".join(format_plan(p) for p in plans.values()))
    elif args.command == "emit":
        print("\n\n".join(render_hash_function(p, config) for p in plans.values()), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hash-with",
        description="Generate combined-hash methods from record schemas"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("plan", "Print the contribution plan"),
        ("emit", "Print the generated Python hash method"),
        ("check", "Validate directives; exit 1 on any error"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("schema", type=Path, help="Path to record schema JSON file")
        cmd.add_argument(
            "--config",
            type=Path,
            default=None,
            help="Generator config JSON (default: HASH_WITH_* environment)"
        )
        if name != "emit":
            cmd.add_argument("--json", action="store_true", help="Output JSON format")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        return run(args)
    except HashWithError as e:
        print(str(e), file=sys.stderr)
        return 2
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

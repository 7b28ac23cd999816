"""Command line entry point for the schema export/fixup/verify build step.

Exit status is 0 when the schema matches (or verification is disabled), 1
when the generated schema differs from the baseline and 2 for any other
failure.
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from ddlguard.config import Settings, load_settings
from ddlguard.errors import ConfigurationError, DDLGuardError, SchemaMismatchError
from ddlguard.fixup import FixupRule
from ddlguard.runner import run_schema_check
from ddlguard.shared.logging import configure_logging

EXIT_OK = 0
EXIT_SCHEMA_MISMATCH = 1
EXIT_ERROR = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class _FixupAction(argparse.Action):
    """Collect --fixup and --required-fixup into one list, in command line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        rules = list(getattr(namespace, self.dest, None) or [])
        pattern, replacement = values
        rules.append(
            {
                "pattern": pattern,
                "replacement": replacement,
                "modification_required": self.const,
            }
        )
        setattr(namespace, self.dest, rules)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddlguard",
        description="Generate schema DDL from SQLAlchemy metadata, apply fixups and verify it",
    )
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument(
        "--metadata",
        type=str,
        default=None,
        help="Import path of the metadata, e.g. myapp.models:Base",
    )
    parser.add_argument("--dialect", type=str, default=None)
    parser.add_argument(
        "--output-file",
        type=str,
        default=None,
        help="Where to write the schema; empty or NONE uses a discarded temporary file",
    )
    parser.add_argument(
        "--verify-file",
        type=str,
        default=None,
        help="Baseline schema to compare against; empty or NONE disables verification",
    )
    parser.add_argument("--drop", action="store_true", default=None)
    parser.add_argument("--delimiter", type=str, default=None)
    parser.add_argument("--no-format", dest="format", action="store_false", default=None)
    parser.add_argument("--charset", type=str, default=None)
    parser.add_argument(
        "--fixup",
        dest="fixups",
        nargs=2,
        metavar=("PATTERN", "REPLACEMENT"),
        action=_FixupAction,
        const=False,
        default=None,
    )
    parser.add_argument(
        "--required-fixup",
        dest="fixups",
        nargs=2,
        metavar=("PATTERN", "REPLACEMENT"),
        action=_FixupAction,
        const=True,
        default=None,
        help="Like --fixup, but fail when it does not modify the schema",
    )
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None)
    parser.add_argument("--json-logs", action="store_true", default=None)
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "output_file": args.output_file,
        "verify_file": args.verify_file,
        "charset": args.charset,
        "export": {
            "metadata": args.metadata,
            "dialect": args.dialect,
            "drop": args.drop,
            "delimiter": args.delimiter,
            "format": args.format,
        },
        "logging": {
            "level": args.log_level,
            "json_logs": args.json_logs,
        },
    }


def _with_cli_fixups(settings: Settings, fixups: Optional[List[Dict[str, Any]]]) -> Settings:
    if not fixups:
        return settings
    try:
        extra = [FixupRule.model_validate(rule) for rule in fixups]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid command line fixup: {exc}") from exc
    return settings.model_copy(update={"fixups": list(settings.fixups) + extra})


def main(argv: Optional[Sequence[str]] = None) -> int:
    if os.environ.get("DDLGUARD_TEST_MODE") != "true":
        load_dotenv()

    args = build_parser().parse_args(argv)
    log = configure_logging(args.log_level or "INFO", bool(args.json_logs))

    try:
        settings = load_settings(args.config, **_overrides(args))
        settings = _with_cli_fixups(settings, args.fixups)
        log = configure_logging(settings.logging.level, settings.logging.json_logs)
        result = run_schema_check(settings)
    except SchemaMismatchError as exc:
        log.error(str(exc))
        return EXIT_SCHEMA_MISMATCH
    except DDLGuardError as exc:
        log.error(str(exc))
        return EXIT_ERROR

    log.info(
        {
            "ddlguard": {
                "output": str(result.output_path) if result.output_path else None,
                "fixups_applied": result.fixups_applied,
                "verified": result.verified,
            }
        }
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

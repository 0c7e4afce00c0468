"""
Main entry point for smart_localization.
Usage: python -m smart_localization [--dir DIR] COMMAND ...
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import PersistenceError, RootCorruptError
from .reconciliation import LocalizationService, read_plan, write_report
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart_localization",
        description="Keep language tables consistent with the root table.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--dir", type=Path, help="localization directory (overrides settings)")
    parser.add_argument("--settings", type=Path, help="INI settings file to use")
    parser.add_argument("--profile", default="default", help="settings profile")
    parser.add_argument(
        "--dry-run", action="store_true", help="report what would change, write nothing"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init", help="create the root table")
    commands.add_parser("languages", help="list available languages")

    add_language = commands.add_parser("add-language", help="create a language table")
    add_language.add_argument("tag")

    remove_language = commands.add_parser("remove-language", help="delete a language")
    remove_language.add_argument("tag")

    show = commands.add_parser("show", help="print a table")
    show.add_argument("tag", nargs="?", help="language tag (root table if omitted)")

    reconcile = commands.add_parser("reconcile", help="apply a JSON plan file")
    reconcile.add_argument("plan", type=Path)
    reconcile.add_argument("--report", type=Path, help="write a JSON report here")

    return parser


def run_command(
    args: argparse.Namespace, service: LocalizationService, settings: AppSettings
) -> int:
    """Run one parsed command against ``service``."""
    logger = logging.getLogger(f"{__name__}.run_command")

    if args.command == "init":
        try:
            service.create_root()
        except FileExistsError as e:
            logger.error(str(e))
            return 1
        print(f"Created {service.store.root_path}")
        return 0

    if args.command == "languages":
        for language in service.available_languages():
            print(language)
        return 0

    if args.command == "add-language":
        try:
            table = service.create_language(args.tag)
        except (FileExistsError, ValueError) as e:
            logger.error(str(e))
            return 1
        print(f"Created language '{args.tag}' with {len(table)} keys")
        return 0

    if args.command == "remove-language":
        return 0 if service.delete_language(args.tag) else 1

    if args.command == "show":
        if args.tag:
            table = service.load_language(args.tag)
            if table is None:
                return 1
        else:
            table = service.load_root()
        for key, value in table.items():
            print(f"{key}\t{value}")
        return 0

    if args.command == "reconcile":
        try:
            plan = read_plan(args.plan, service.load_root(), service.engine)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read plan file {args.plan}: {e}")
            return 1

        result = service.reconcile(plan)
        if not service.dry_run:
            settings.add_recent_plan(args.plan.resolve())
        if args.report:
            write_report(args.report, result)

        for issue in result.report.issues:
            print(f"{issue.severity.value}: {issue.message}")
        print(
            f"Reconciled {len(result.root)} keys across {len(result.languages)} languages"
            + (" (dry run)" if service.dry_run else "")
        )
        return 0

    logger.error(f"Unknown command: {args.command}")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    logger = logging.getLogger(f"{__name__}.main")
    args = build_parser().parse_args(argv)

    settings = AppSettings(profile=args.profile, settings_file=args.settings)
    setup_logging(settings)
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.debug(f"Configuration warning: {warning}")
    if not validation.is_valid and args.dir is None:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        return 1

    try:
        service = LocalizationService(
            directory=args.dir,
            settings=settings,
            dry_run=True if args.dry_run else None,
        )
        return run_command(args, service, settings)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except RootCorruptError as e:
        logger.error(e.message)
        return 1
    except PersistenceError as e:
        logger.error(e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""CLI helper that rewrites audio clip sources in a saved document."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from control.session import EditSession
from control.settings import SessionSettings
from project.models import PathMode


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Rewrite audio clip sources as absolute or document-relative paths.",
    )
    parser.add_argument(
        "--project-file",
        type=Path,
        required=True,
        help="Path to the serialized project document.",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in PathMode],
        default=PathMode.RELATIVE.value,
        help="Path form written for every resolvable audio source.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the result (defaults to overwriting --project-file).",
    )
    parser.add_argument(
        "--plugin-catalog",
        type=Path,
        default=None,
        help="Known plugin JSON list used to flag missing plugins.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any source could not be resolved.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every source rewrite.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    project_file = args.project_file.expanduser().resolve()
    if not project_file.exists():
        raise SystemExit(f"Project file '{project_file}' does not exist.")

    settings = SessionSettings.from_environment().model_copy(
        update={"verbose": args.verbose}
    )
    if args.plugin_catalog is not None:
        catalog_path = args.plugin_catalog.expanduser().resolve()
        if not catalog_path.exists():
            raise SystemExit(f"Plugin catalog '{catalog_path}' does not exist.")
        settings = settings.model_copy(update={"plugin_catalog_path": catalog_path})

    session = EditSession(settings)
    session.load(project_file)
    output = args.output.expanduser().resolve() if args.output else project_file
    destination, result = session.save(output, PathMode(args.mode))

    print(f"Wrote {destination}")
    print(f"Updated: {result.updated} | Unchanged: {result.unchanged} | Failed: {result.failed}")
    if args.strict and result.failed:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())

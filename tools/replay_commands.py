"""CLI helper that replays a JSON command script against a project document.

The script is a list of ``{"address": "/insert", "args": ["Verse"]}``
objects. Strings, integers and floats map directly to arguments; a
``{"colour": [r, g, b, a]}`` object becomes a colour and
``{"blob": "<base64>"}`` becomes binary data.
"""
from __future__ import annotations

import argparse
import base64
import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

from control.dispatcher import Argument, Colour, Command, CommandDispatcher
from control.session import EditSession
from control.settings import SessionSettings

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay scripted control commands against a project document.",
    )
    parser.add_argument(
        "--script",
        type=Path,
        required=True,
        help="JSON file holding the list of commands.",
    )
    parser.add_argument(
        "--project-file",
        type=Path,
        required=True,
        help="Document to edit; created empty when it does not exist.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics at info level.")
    return parser.parse_args(argv)


def _decode_argument(value: Any) -> Argument:
    if isinstance(value, dict):
        if "colour" in value:
            return Colour(*value["colour"])
        if "blob" in value:
            return base64.b64decode(value["blob"])
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    raise SystemExit(f"Unsupported command argument {value!r}.")


def load_script(path: Path) -> List[Command]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise SystemExit(f"Script '{path}' must contain a JSON list of commands.")
    commands: List[Command] = []
    for entry in payload:
        if not isinstance(entry, dict) or "address" not in entry:
            raise SystemExit(f"Invalid command entry {entry!r}. Expected an object with 'address'.")
        args = [_decode_argument(value) for value in entry.get("args", [])]
        commands.append(Command(address=str(entry["address"]), args=args))
    return commands


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    script = args.script.expanduser().resolve()
    if not script.exists():
        raise SystemExit(f"Script '{script}' does not exist.")
    commands = load_script(script)

    session = EditSession(SessionSettings.from_environment())
    project_file = args.project_file.expanduser().resolve()
    if project_file.exists():
        session.load(project_file)
    else:
        session.new_document(project_file, name=project_file.stem)

    dispatcher = CommandDispatcher(session)
    unknown = sorted({command.address for command in commands} - set(dispatcher.addresses))
    if unknown:
        logger.warning("Script uses unrecognized addresses: %s", ", ".join(unknown))
    dispatcher.dispatch_all(commands)

    document = session.document
    print(f"Replayed {len(commands)} commands against {project_file}")
    if unknown:
        print(f"Ignored: {', '.join(unknown)}")
    print(f"Tracks: {len(document.tracks)} | Clips: {len(document.clips)} | Plugins: {len(document.plugins)}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())

"""Map inbound control commands onto session operations.

Commands arrive already decoded as an address plus typed arguments; the
transport that produced them lives elsewhere. Only ``/test`` runs without
an active document, every other command is ignored until one is loaded.
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

from pydantic import ValidationError

from project.models import MidiClip, MidiNote, PathMode

from .session import EditSession

logger = logging.getLogger(__name__)

INSERT_NOTE_PITCH = 36
INSERT_NOTE_CHANNEL = 1
INSERT_NOTE_BEAT = 1.0
INSERT_NOTE_VELOCITY = 127
INSERT_NOTE_LENGTH = 0.0


@dataclass(frozen=True)
class Colour:
    red: int
    green: int
    blue: int
    alpha: int = 255


Argument = Union[int, float, str, bytes, Colour]


@dataclass(frozen=True)
class Command:
    """Decoded control message."""

    address: str
    args: List[Argument] = field(default_factory=list)

    def string_arg(self, index: int) -> str | None:
        """Return argument ``index`` when it exists and is a string."""

        if index < len(self.args) and isinstance(self.args[index], str):
            return self.args[index]  # type: ignore[return-value]
        return None

    def number_arg(self, index: int) -> float | None:
        """Return argument ``index`` as a float when it is an integer or float."""

        if index < len(self.args):
            value = self.args[index]
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        return None

    def int_arg(self, index: int) -> int | None:
        if index < len(self.args):
            value = self.args[index]
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None


def format_argument(value: Argument) -> str:
    """Render an argument according to its kind."""

    if isinstance(value, Colour):
        return f"RGBA({value.red},{value.green},{value.blue},{value.alpha})"
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


def format_command(command: Command) -> str:
    parts = [command.address, *(format_argument(arg) for arg in command.args)]
    return " - ".join(parts)


class CommandDispatcher:
    """Route commands by address to the handlers of an :class:`EditSession`."""

    def __init__(self, session: EditSession) -> None:
        self._session = session
        self._handlers: Dict[str, Callable[[Command], Any]] = {
            "/insert": self._insert,
            "/save": self._save,
            "/audiotrack/select": self._select_track,
            "/plugin/select": self._select_plugin,
            "/midiclip/select": self._select_clip,
            "/midiclip/clear": self._clear_clip,
            "/midiclip/n": self._add_note,
        }

    @property
    def addresses(self) -> List[str]:
        """Addresses this dispatcher acts on."""

        return ["/test", *self._handlers]

    def dispatch(self, command: Command) -> Any:
        """Run ``command`` and return the handler's result, or ``None`` if ignored."""

        if command.address == "/test":
            return self._diagnostic(command)

        if self._session.active_document is None:
            logger.debug("No active document, ignoring %s", command.address)
            return None

        handler = self._handlers.get(command.address)
        if handler is None:
            logger.debug("No handler for %s", command.address)
            return None
        return handler(command)

    def dispatch_all(self, commands: List[Command]) -> List[Any]:
        return [self.dispatch(command) for command in commands]

    def _diagnostic(self, command: Command) -> str:
        rendered = format_command(command)
        logger.info("%s", rendered)
        return rendered

    def _insert(self, command: Command) -> MidiClip:
        name = command.string_arg(0)
        if name is None:
            name = self._session.settings.default_clip_name
        clip = self._session.midi_clip(name)
        clip.add_note(
            INSERT_NOTE_PITCH,
            INSERT_NOTE_BEAT,
            length_beats=INSERT_NOTE_LENGTH,
            velocity=INSERT_NOTE_VELOCITY,
            channel=INSERT_NOTE_CHANNEL,
        )
        self._session.document.touch()
        return clip

    def _save(self, command: Command) -> Path:
        filename = command.string_arg(0)
        path = Path.cwd() / filename if filename else None
        mode = PathMode.from_token(command.string_arg(1))
        destination, _ = self._session.save(path, mode)
        return destination

    def _select_track(self, command: Command):
        name = command.string_arg(0)
        if name is None:
            logger.warning("%s requires a track name", command.address)
            return None
        return self._session.select_track(name)

    def _select_plugin(self, command: Command):
        name = command.string_arg(0)
        if name is None:
            logger.warning("%s requires a plugin name", command.address)
            return None
        return self._session.plugin(name, command.string_arg(1) or "")

    def _select_clip(self, command: Command):
        name = command.string_arg(0)
        if name is None:
            logger.warning("%s requires a clip name", command.address)
            return None
        start = command.number_arg(1)
        length = command.number_arg(2)
        if (start is not None and start < 0.0) or (length is not None and length <= 0.0):
            logger.warning("%s got an invalid clip range %s..%s", command.address, start, length)
            return None
        return self._session.select_midi_clip(name, start_beats=start, length_beats=length)

    def _clear_clip(self, command: Command) -> MidiClip:
        clip = self._session.target_clip()
        clip.notes.clear()
        self._session.document.touch()
        return clip

    def _add_note(self, command: Command) -> MidiNote | None:
        pitch = command.int_arg(0)
        start = command.number_arg(1)
        length = command.number_arg(2)
        if pitch is None or start is None or length is None:
            logger.warning("%s requires pitch, start and length", command.address)
            return None
        velocity = command.int_arg(3)
        clip = self._session.target_clip()
        try:
            note = clip.add_note(
                pitch,
                start,
                length_beats=length,
                velocity=velocity if velocity is not None else 100,
            )
        except ValidationError as exc:
            logger.warning("%s rejected note: %s", command.address, exc)
            return None
        self._session.document.touch()
        return note

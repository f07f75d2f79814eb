"""Session and command dispatch layer on top of the editing operations."""

from .dispatcher import Colour, Command, CommandDispatcher, format_argument, format_command
from .session import EditSession, NoActiveDocumentError
from .settings import SessionSettings

__all__ = [
    "Colour",
    "Command",
    "CommandDispatcher",
    "EditSession",
    "NoActiveDocumentError",
    "SessionSettings",
    "format_argument",
    "format_command",
]

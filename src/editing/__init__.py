"""Editing operations applied to an active project document."""

from .normalizer import (
    NormalizationResult,
    SourceEvent,
    SourceFailed,
    SourceUnchanged,
    SourceUpdated,
    log_event,
    normalize_sources,
)
from .resolvers import (
    plugin_insert_index,
    plugin_matches,
    resolve_midi_clip,
    resolve_plugin,
    resolve_track,
)

__all__ = [
    "NormalizationResult",
    "SourceEvent",
    "SourceFailed",
    "SourceUnchanged",
    "SourceUpdated",
    "log_event",
    "normalize_sources",
    "plugin_insert_index",
    "plugin_matches",
    "resolve_midi_clip",
    "resolve_plugin",
    "resolve_track",
]

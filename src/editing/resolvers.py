"""Find-or-create helpers for tracks, MIDI clips, and plugins.

Every resolver scans first and only mutates the document on a miss, so
repeating a call returns the same entity. Lookups that could match more
than one entity return the first one in document or chain order.
"""
from __future__ import annotations

import logging
from typing import Sequence

from project.catalog import INTERNAL_PLUGIN_MARKERS, InternalPluginFactory, PluginCatalog
from project.models import (
    APPEND,
    ExternalPlugin,
    InternalPlugin,
    MidiClip,
    ProjectDocument,
    Track,
)

logger = logging.getLogger(__name__)

DEFAULT_CLIP_LENGTH_BEATS = 4.0


def resolve_track(document: ProjectDocument, name: str) -> Track:
    """Return the first track named ``name``, appending a new one on a miss."""

    for track in document.tracks:
        if track.name == name:
            return track
    track = document.insert_track(name)
    logger.debug("Created track %r", name)
    return track


def resolve_midi_clip(document: ProjectDocument, track: Track, name: str) -> MidiClip:
    """Return the first MIDI clip named ``name`` on ``track`` or insert one.

    Audio clips sharing the name are skipped.
    """

    for clip in document.iter_clips(track):
        if isinstance(clip, MidiClip) and clip.name == name:
            return clip
    clip = document.insert_midi_clip(
        track, name, start_beats=0.0, length_beats=DEFAULT_CLIP_LENGTH_BEATS
    )
    logger.debug("Created MIDI clip %r on track %r", name, track.name)
    return clip


def plugin_matches(
    plugin: InternalPlugin | ExternalPlugin, name: str, plugin_type: str = ""
) -> bool:
    """Return whether ``plugin`` answers to ``name`` and the optional ``plugin_type``.

    External plugins are matched on display name and hosting format,
    internal plugins on their type string and the internal marker.
    """

    wanted_type = plugin_type.lower()
    if isinstance(plugin, ExternalPlugin):
        if plugin.name.lower() != name.lower():
            return False
        return not wanted_type or plugin.plugin_format.lower() == wanted_type
    if plugin.plugin_type.lower() != name.lower():
        return False
    return not wanted_type or wanted_type in INTERNAL_PLUGIN_MARKERS


def plugin_insert_index(chain: Sequence[InternalPlugin | ExternalPlugin]) -> int:
    """Return the index of the first Volume/Pan plugin, or ``APPEND`` if there is none."""

    for index, plugin in enumerate(chain):
        if plugin.is_volume_and_pan:
            return index
    return APPEND


def resolve_plugin(
    document: ProjectDocument,
    track: Track,
    name: str,
    plugin_type: str = "",
    *,
    catalog: PluginCatalog,
    factory: InternalPluginFactory,
) -> InternalPlugin | ExternalPlugin | None:
    """Return a matching plugin on ``track``, creating it when possible.

    New plugins go just before the track's Volume/Pan plugin, or at the end
    of the chain. Catalog entries win over internal types of the same name.
    Returns ``None`` when nothing matches and nothing can be created; the
    document is left untouched in that case.
    """

    for plugin in document.plugin_chain(track):
        if plugin_matches(plugin, name, plugin_type):
            logger.debug("Found existing plugin %r on track %r", plugin.display_name, track.name)
            return plugin

    if not document.can_insert_plugin(track):
        logger.warning("Track %r cannot insert plugin %r", track.name, name)
        return None

    index = plugin_insert_index(document.plugin_chain(track))
    logger.debug("Plugin insert index: %s", index)

    description = catalog.find(name, plugin_type)
    if description is not None:
        plugin = catalog.instantiate(description, track.id)
        document.insert_plugin(track, plugin, index)
        logger.info(
            "Inserted %r (%s) into track %r",
            description.name,
            description.plugin_format,
            track.name,
        )
        return plugin

    if not plugin_type or plugin_type.lower() in INTERNAL_PLUGIN_MARKERS:
        internal = factory.create(name, track.id)
        if internal is not None:
            document.insert_plugin(track, internal, index)
            logger.info("Inserted internal %r into track %r", internal.plugin_type, track.name)
            return internal

    logger.warning("Plugin not found: %s (%s)", name, plugin_type or "any type")
    return None

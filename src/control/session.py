"""Holder for the active project document and its editing collaborators."""
from __future__ import annotations

import logging
from pathlib import Path

from editing.normalizer import NormalizationResult, normalize_sources
from editing.resolvers import resolve_midi_clip, resolve_plugin, resolve_track
from project.catalog import InternalPluginFactory, PluginCatalog
from project.models import (
    ExternalPlugin,
    InternalPlugin,
    MidiClip,
    PathMode,
    ProjectDocument,
    Track,
)
from project.persistence import DocumentFileAdapter

from .settings import SessionSettings

logger = logging.getLogger(__name__)


class NoActiveDocumentError(RuntimeError):
    """Raised when an operation needs a document but none is loaded."""


class EditSession:
    """Own at most one active document plus the target track and clip for commands.

    In memory, audio sources are kept absolute; :meth:`save` writes a
    relocated copy using the requested path mode.
    """

    def __init__(
        self,
        settings: SessionSettings | None = None,
        *,
        catalog: PluginCatalog | None = None,
        factory: InternalPluginFactory | None = None,
        adapter: DocumentFileAdapter | None = None,
    ) -> None:
        self.settings = settings or SessionSettings()
        if catalog is None and self.settings.plugin_catalog_path is not None:
            catalog = PluginCatalog.from_file(self.settings.plugin_catalog_path)
        self.catalog = catalog or PluginCatalog()
        self.factory = factory or InternalPluginFactory()
        self._adapter = adapter or DocumentFileAdapter()
        self._document: ProjectDocument | None = None
        self._selected_track_id: str | None = None
        self._selected_clip_id: str | None = None

    @property
    def active_document(self) -> ProjectDocument | None:
        return self._document

    @property
    def document(self) -> ProjectDocument:
        """Return the active document, raising if none is loaded."""

        if self._document is None:
            raise NoActiveDocumentError("No active document; create or load one first")
        return self._document

    def new_document(self, path: Path | None = None, *, name: str = "Untitled") -> ProjectDocument:
        document = ProjectDocument(max_plugins_per_track=self.settings.max_plugins_per_track)
        document.metadata.name = name
        document.file_path = path
        self._activate(document)
        return document

    def load(self, path: Path) -> ProjectDocument:
        """Load ``path``, make its sources absolute, and make it active."""

        document = self._adapter.load(path)
        normalize_sources(document, PathMode.ABSOLUTE, verbose=False)
        for plugin in document.plugins.values():
            if isinstance(plugin, ExternalPlugin) and not self.catalog.contains(plugin):
                logger.warning(
                    "Document contains a plugin missing from the host: %s (%s)",
                    plugin.name,
                    plugin.plugin_format,
                )
        self._activate(document)
        logger.info("Loaded document: %s", path)
        return document

    def close(self) -> None:
        self._document = None
        self._selected_track_id = None
        self._selected_clip_id = None

    def _activate(self, document: ProjectDocument) -> None:
        self._document = document
        self._selected_track_id = None
        self._selected_clip_id = None

    # -- targets ---------------------------------------------------------

    def select_track(self, name: str) -> Track:
        track = resolve_track(self.document, name)
        if track.id != self._selected_track_id:
            self._selected_clip_id = None
        self._selected_track_id = track.id
        return track

    def target_track(self) -> Track:
        """Return the selected track, selecting the default track if needed."""

        if self._selected_track_id is not None:
            try:
                return self.document.get_track(self._selected_track_id)
            except KeyError:
                self._selected_track_id = None
        return self.select_track(self.settings.default_track_name)

    def midi_clip(self, name: str) -> MidiClip:
        return resolve_midi_clip(self.document, self.target_track(), name)

    def select_midi_clip(
        self,
        name: str,
        *,
        start_beats: float | None = None,
        length_beats: float | None = None,
    ) -> MidiClip:
        """Resolve ``name`` on the target track and make it the note target.

        When given, ``start_beats`` and ``length_beats`` move and resize the clip.
        """

        clip = self.midi_clip(name)
        if start_beats is not None:
            clip.start_beats = start_beats
        if length_beats is not None:
            clip.length_beats = length_beats
        if start_beats is not None or length_beats is not None:
            self.document.touch()
        self._selected_clip_id = clip.id
        return clip

    def target_clip(self) -> MidiClip:
        """Return the selected MIDI clip, selecting the default clip if needed."""

        if self._selected_clip_id is not None:
            clip = self.document.clips.get(self._selected_clip_id)
            if isinstance(clip, MidiClip):
                return clip
            self._selected_clip_id = None
        return self.select_midi_clip(self.settings.default_clip_name)

    def plugin(self, name: str, plugin_type: str = "") -> InternalPlugin | ExternalPlugin | None:
        return resolve_plugin(
            self.document,
            self.target_track(),
            name,
            plugin_type,
            catalog=self.catalog,
            factory=self.factory,
        )

    # -- persistence -----------------------------------------------------

    def default_path(self) -> Path:
        document = self.document
        if document.file_path is not None:
            return document.file_path
        return Path.cwd() / self.settings.default_document_name

    def save(
        self, path: Path | None = None, mode: PathMode = PathMode.RELATIVE
    ) -> tuple[Path, NormalizationResult]:
        """Write the active document to ``path`` with sources in ``mode``."""

        destination = path or self.default_path()
        snapshot = self.document.model_copy(deep=True)
        snapshot.file_path = destination
        result = normalize_sources(snapshot, mode, verbose=self.settings.verbose)
        self._adapter.save(snapshot, destination)
        logger.info("Saved document to %s (%s paths)", destination, mode.value)
        return destination, result

"""Pydantic-powered models for the editable project document.

The document stores its entities in an arena: tracks keep their order in
``ProjectDocument.tracks`` while clips and plugins live in id-keyed maps
and point back at their owning track through ``track_id``. Tracks list the
ids of their clips and of their plugin chain in order.
"""
from __future__ import annotations

import os
import re
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field

APPEND = -1
"""Insert position sentinel meaning "append at the end"."""

VOLUME_PLUGIN_TYPE = "volume"

_PROJECT_ITEM_ID = re.compile(r"^\d+/\d+$")


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class PathMode(str, Enum):
    """How an audio clip refers to its media file."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    @classmethod
    def from_token(cls, token: str | None) -> PathMode:
        """Map a loose user token to a mode; anything starting with ``a`` is absolute."""

        if token and token[:1].lower() == "a":
            return cls.ABSOLUTE
        return cls.RELATIVE


class SourceReference(BaseModel):
    """Descriptor of an audio clip's backing media.

    ``source`` is either a project-item id such as ``"4412/1001"`` or a file
    path, absolute or relative to the document's own location.
    """

    source: str = ""

    @property
    def is_project_item(self) -> bool:
        return bool(_PROJECT_ITEM_ID.match(self.source))

    @property
    def mode(self) -> PathMode | None:
        """Return the path mode, or ``None`` for project items and empty descriptors."""

        if not self.source or self.is_project_item:
            return None
        return PathMode.ABSOLUTE if Path(self.source).is_absolute() else PathMode.RELATIVE


class MidiNote(BaseModel):
    """Single note event stored inside a MIDI clip."""

    pitch: int = Field(..., ge=0, le=127)
    channel: int = Field(1, ge=1, le=16)
    start_beat: float = Field(..., ge=0.0)
    length_beats: float = Field(0.0, ge=0.0)
    velocity: int = Field(100, ge=0, le=127)


class _ClipBase(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("clip"))
    track_id: str
    name: str
    start_beats: float = Field(0.0, ge=0.0)
    length_beats: float = Field(4.0, gt=0.0)


class MidiClip(_ClipBase):
    """Clip holding note events."""

    kind: Literal["midi"] = "midi"
    notes: List[MidiNote] = Field(default_factory=list)

    def add_note(
        self,
        pitch: int,
        start_beat: float,
        *,
        length_beats: float = 0.0,
        velocity: int = 100,
        channel: int = 1,
    ) -> MidiNote:
        note = MidiNote(
            pitch=pitch,
            channel=channel,
            start_beat=start_beat,
            length_beats=length_beats,
            velocity=velocity,
        )
        self.notes.append(note)
        return note


class AudioClip(_ClipBase):
    """Clip referencing an audio file through a :class:`SourceReference`."""

    kind: Literal["audio"] = "audio"
    source: SourceReference = Field(default_factory=SourceReference)
    media_revision: int = Field(
        0, ge=0, description="Bumped whenever the media reference changes"
    )


Clip = Annotated[Union[MidiClip, AudioClip], Field(discriminator="kind")]


class InternalPlugin(BaseModel):
    """Engine-native plugin identified by its type string (``volume``, ``reverb``)."""

    variant: Literal["internal"] = "internal"
    id: str = Field(default_factory=lambda: _new_id("plugin"))
    track_id: str
    plugin_type: str

    @property
    def display_name(self) -> str:
        return self.plugin_type

    @property
    def is_volume_and_pan(self) -> bool:
        return self.plugin_type.lower() == VOLUME_PLUGIN_TYPE


class ExternalPlugin(BaseModel):
    """Hosted plugin identified by display name and hosting format."""

    variant: Literal["external"] = "external"
    id: str = Field(default_factory=lambda: _new_id("plugin"))
    track_id: str
    name: str
    plugin_format: str

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def is_volume_and_pan(self) -> bool:
        return False


Plugin = Annotated[Union[InternalPlugin, ExternalPlugin], Field(discriminator="variant")]


class Track(BaseModel):
    """Named container of clips and of an ordered plugin chain."""

    id: str = Field(default_factory=lambda: _new_id("track"))
    name: str
    clip_ids: List[str] = Field(default_factory=list)
    plugin_ids: List[str] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    """Human-readable document metadata."""

    id: str = Field(default_factory=lambda: _new_id("edit"))
    name: str = "Untitled"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    bpm: float = Field(120.0, gt=0)


class ProjectDocument(BaseModel):
    """Top-level container storing tracks, clips, and plugin chains."""

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    tracks: List[Track] = Field(default_factory=list)
    clips: Dict[str, Clip] = Field(default_factory=dict)
    plugins: Dict[str, Plugin] = Field(default_factory=dict)
    project_items: Dict[str, str] = Field(
        default_factory=dict,
        description="Project-item ids mapped to media file paths",
    )
    max_plugins_per_track: int = Field(16, gt=0)
    file_path: Optional[Path] = Field(
        None, exclude=True, description="Location of the document on disk"
    )

    def touch(self) -> None:
        """Update the modification timestamp."""

        self.metadata.updated_at = datetime.now(UTC)

    # -- enumeration -----------------------------------------------------

    def get_track(self, track_id: str) -> Track:
        for track in self.tracks:
            if track.id == track_id:
                return track
        raise KeyError(f"Track {track_id!r} not found")

    def iter_clips(self, track: Track) -> Iterator[MidiClip | AudioClip]:
        """Yield the track's clips in order."""

        for clip_id in track.clip_ids:
            yield self.clips[clip_id]

    def plugin_chain(self, track: Track) -> List[InternalPlugin | ExternalPlugin]:
        """Return the track's plugins in chain order."""

        return [self.plugins[plugin_id] for plugin_id in track.plugin_ids]

    def plugin_index(self, plugin: InternalPlugin | ExternalPlugin) -> int:
        """Return the plugin's position inside its track's chain."""

        return self.get_track(plugin.track_id).plugin_ids.index(plugin.id)

    # -- insertion -------------------------------------------------------

    def insert_track(self, name: str, index: int = APPEND) -> Track:
        track = Track(name=name)
        if index == APPEND:
            self.tracks.append(track)
        else:
            self.tracks.insert(index, track)
        self.touch()
        return track

    def insert_midi_clip(
        self,
        track: Track,
        name: str,
        *,
        start_beats: float = 0.0,
        length_beats: float = 4.0,
    ) -> MidiClip:
        clip = MidiClip(
            track_id=track.id, name=name, start_beats=start_beats, length_beats=length_beats
        )
        self._add_clip(track, clip)
        return clip

    def insert_audio_clip(
        self,
        track: Track,
        name: str,
        source: str,
        *,
        start_beats: float = 0.0,
        length_beats: float = 4.0,
    ) -> AudioClip:
        clip = AudioClip(
            track_id=track.id,
            name=name,
            source=SourceReference(source=source),
            start_beats=start_beats,
            length_beats=length_beats,
        )
        self._add_clip(track, clip)
        return clip

    def _add_clip(self, track: Track, clip: MidiClip | AudioClip) -> None:
        self.clips[clip.id] = clip
        track.clip_ids.append(clip.id)
        self.touch()

    def can_insert_plugin(self, track: Track) -> bool:
        """Return whether the track's chain has room for one more plugin."""

        return len(track.plugin_ids) < self.max_plugins_per_track

    def insert_plugin(
        self, track: Track, plugin: InternalPlugin | ExternalPlugin, index: int = APPEND
    ) -> None:
        """Place ``plugin`` in the chain at ``index`` (``APPEND`` for the end)."""

        if not self.can_insert_plugin(track):
            raise ValueError(f"Track {track.name!r} cannot accept more plugins")
        plugin.track_id = track.id
        self.plugins[plugin.id] = plugin
        if index == APPEND or index >= len(track.plugin_ids):
            track.plugin_ids.append(plugin.id)
        else:
            track.plugin_ids.insert(index, plugin.id)
        self.touch()

    # -- source references ----------------------------------------------

    @property
    def base_directory(self) -> Path:
        """Directory that relative sources are resolved against."""

        if self.file_path is not None:
            return Path(os.path.abspath(self.file_path)).parent
        return Path.cwd()

    def resolve_source_file(self, clip: AudioClip) -> Path | None:
        """Map the clip's descriptor to an absolute file path.

        Returns ``None`` when the descriptor is empty or names a project item
        that is not registered. The file itself need not exist.
        """

        reference = clip.source
        if not reference.source:
            return None
        if reference.is_project_item:
            mapped = self.project_items.get(reference.source)
            if mapped is None:
                return None
            return self._absolute(Path(mapped))
        return self._absolute(Path(reference.source))

    def _absolute(self, path: Path) -> Path:
        if path.is_absolute():
            return Path(os.path.normpath(path))
        return Path(os.path.normpath(self.base_directory / path))

    def set_source_reference(self, clip: AudioClip, file: Path, mode: PathMode) -> None:
        """Point ``clip`` directly at ``file`` using ``mode``."""

        absolute = self._absolute(file)
        text = absolute.as_posix()
        if mode is PathMode.RELATIVE:
            try:
                text = Path(os.path.relpath(absolute, self.base_directory)).as_posix()
            except ValueError:
                # no common root (different drives), keep the absolute path
                pass
        clip.source = SourceReference(source=text)

    def source_media_changed(self, clip: AudioClip) -> None:
        """Signal that the clip's media reference changed so caches can refresh."""

        clip.media_revision += 1
        self.touch()

"""Rewrite audio-clip media references between absolute and relative form.

The pass visits every audio clip in document order. A clip whose descriptor
cannot be mapped to a file is counted and reported, and the pass moves on.
Each outcome is published as an event so callers decide how to render it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Union

from project.models import AudioClip, PathMode, ProjectDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceUpdated:
    clip_id: str
    clip_name: str
    before: str
    after: str


@dataclass(frozen=True)
class SourceUnchanged:
    clip_id: str
    clip_name: str
    source: str


@dataclass(frozen=True)
class SourceFailed:
    """The clip's descriptor could not be resolved to a file."""

    clip_id: str
    clip_name: str
    source: str


SourceEvent = Union[SourceUpdated, SourceUnchanged, SourceFailed]


@dataclass
class NormalizationResult:
    """Aggregate counts plus the ordered events of one normalization pass."""

    mode: PathMode
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    events: List[SourceEvent] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.updated + self.unchanged + self.failed

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

    def record(self, event: SourceEvent) -> None:
        if isinstance(event, SourceUpdated):
            self.updated += 1
        elif isinstance(event, SourceUnchanged):
            self.unchanged += 1
        else:
            self.failed += 1
        self.events.append(event)


def log_event(event: SourceEvent, *, verbose: bool = False) -> None:
    """Render an event through the module logger."""

    level = logging.INFO if verbose else logging.DEBUG
    if isinstance(event, SourceUpdated):
        logger.log(level, "Updated %r to %r", event.before, event.after)
    elif isinstance(event, SourceUnchanged):
        logger.log(level, "Unchanged path: %s", event.source)
    else:
        logger.error(
            "Failed to find and update source clip: %s source=%r",
            event.clip_name,
            event.source,
        )


def normalize_sources(
    document: ProjectDocument,
    mode: PathMode,
    verbose: bool = False,
    *,
    on_event: Callable[[SourceEvent], None] | None = None,
) -> NormalizationResult:
    """Point every audio clip directly at its file using ``mode``.

    Relative paths are computed from the document's own location. A file
    that is missing on disk can still be referenced; only descriptors that
    do not resolve at all count as failures.
    """

    result = NormalizationResult(mode=mode)
    logger.log(
        logging.INFO if verbose else logging.DEBUG,
        "Updating audio clip sources to %s file paths",
        mode.value,
    )

    for track in document.tracks:
        for clip in document.iter_clips(track):
            if not isinstance(clip, AudioClip):
                continue
            event = _normalize_clip(document, clip, mode)
            result.record(event)
            log_event(event, verbose=verbose)
            if on_event is not None:
                on_event(event)

    if result.failed:
        logger.warning(
            "Not all source clips could be identified (%d failed). Check that every "
            "project-item id is registered with the document and that the document "
            "location is set when sources are relative.",
            result.failed,
        )
    return result


def _normalize_clip(document: ProjectDocument, clip: AudioClip, mode: PathMode) -> SourceEvent:
    file = document.resolve_source_file(clip)
    original = clip.source.source
    if file is None:
        return SourceFailed(clip_id=clip.id, clip_name=clip.name, source=original)

    document.set_source_reference(clip, file, mode)
    updated = clip.source.source
    if updated == original:
        return SourceUnchanged(clip_id=clip.id, clip_name=clip.name, source=updated)

    document.source_media_changed(clip)
    return SourceUpdated(clip_id=clip.id, clip_name=clip.name, before=original, after=updated)

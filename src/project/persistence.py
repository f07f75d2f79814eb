"""Persistence helpers for reading and writing project documents."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .models import ProjectDocument


class DocumentError(Exception):
    """Base error for document persistence failures."""


class DocumentNotFoundError(DocumentError):
    """Raised when a requested document file does not exist."""


class DocumentIntegrityError(DocumentError):
    """Raised when a payload's track, clip and plugin references disagree."""


class DocumentSerializer:
    """Convert documents to JSON-ready dicts and back, checking arena links on the way in.

    Clips and plugins live in id-keyed maps, so a hand-edited or truncated
    payload can validate field by field while a track lists an id that is
    missing or owned by another track. :meth:`from_dict` rejects those.
    """

    @staticmethod
    def to_dict(document: ProjectDocument) -> Dict[str, Any]:
        return document.model_dump(mode="json")

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> ProjectDocument:
        """Rehydrate a document, raising :class:`DocumentIntegrityError` on dangling links."""

        document = ProjectDocument.model_validate(payload)
        problems = DocumentSerializer.integrity_problems(document)
        if problems:
            raise DocumentIntegrityError("; ".join(problems))
        return document

    @staticmethod
    def integrity_problems(document: ProjectDocument) -> List[str]:
        problems: List[str] = []
        seen_tracks = set()
        for track in document.tracks:
            if track.id in seen_tracks:
                problems.append(f"duplicate track id {track.id}")
            seen_tracks.add(track.id)
            for kind, ids, entities in (
                ("clip", track.clip_ids, document.clips),
                ("plugin", track.plugin_ids, document.plugins),
            ):
                for entity_id in ids:
                    entity = entities.get(entity_id)
                    if entity is None:
                        problems.append(f"track {track.name!r} lists missing {kind} {entity_id}")
                    elif entity.track_id != track.id:
                        problems.append(
                            f"{kind} {entity_id} listed on track {track.name!r} belongs to {entity.track_id}"
                        )
        for kind, entities in (("clip", document.clips), ("plugin", document.plugins)):
            for entity_id, entity in entities.items():
                if entity.id != entity_id:
                    problems.append(f"{kind} keyed {entity_id} has id {entity.id}")
                if entity.track_id not in seen_tracks:
                    problems.append(f"{kind} {entity_id} points at unknown track {entity.track_id}")
        return problems


class DocumentFileAdapter:
    """Filesystem adapter that writes documents as JSON files."""

    def save(self, document: ProjectDocument, destination: Path) -> Path:
        """Write the document to ``destination`` and return the path."""

        destination.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(DocumentSerializer.to_dict(document), indent=2)
        destination.write_text(data, encoding="utf-8")
        return destination

    def load(self, source: Path) -> ProjectDocument:
        """Load the document stored at ``source`` and remember its location."""

        if not source.exists():
            raise DocumentNotFoundError(f"Document not found at {source}")
        payload = json.loads(source.read_text(encoding="utf-8"))
        document = DocumentSerializer.from_dict(payload)
        document.file_path = source
        return document

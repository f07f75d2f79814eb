"""Known-plugin catalog and the factory for engine-native plugins."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Sequence

from pydantic import BaseModel, Field

from .models import ExternalPlugin, InternalPlugin

INTERNAL_PLUGIN_MARKER = "tracktion"
"""Plugin type token that restricts matching to engine-native plugins."""

INTERNAL_PLUGIN_MARKERS = frozenset({INTERNAL_PLUGIN_MARKER, "internal"})

BUILTIN_PLUGIN_TYPES: Sequence[str] = (
    # mixing and routing
    "volume",
    "level",
    "vca",
    "text",
    "rack",
    "insert",
    "freezePoint",
    "auxsend",
    "auxreturn",
    # effects and instruments
    "chorus",
    "compressor",
    "delay",
    "4bandEq",
    "4osc",
    "lowpass",
    "midiModifier",
    "midiPatchBay",
    "patchbay",
    "phaser",
    "pitchShift",
    "reverb",
    "sampler",
)


class PluginDescription(BaseModel):
    """Installable hosted plugin known to the engine."""

    name: str
    plugin_format: str = Field(..., description="Hosting format such as VST, VST3, AudioUnit")
    manufacturer: str | None = None


class PluginCatalog:
    """Read-only, ordered list of known plugin descriptions."""

    def __init__(self, descriptions: Iterable[PluginDescription] = ()) -> None:
        self._descriptions: tuple[PluginDescription, ...] = tuple(descriptions)

    @classmethod
    def from_payload(cls, payload: Sequence[Mapping[str, object]]) -> PluginCatalog:
        return cls(PluginDescription.model_validate(entry) for entry in payload)

    @classmethod
    def from_file(cls, path: Path) -> PluginCatalog:
        """Load a JSON list of ``{"name", "plugin_format"}`` objects."""

        payload = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_payload(payload)

    def __iter__(self) -> Iterator[PluginDescription]:
        return iter(self._descriptions)

    def __len__(self) -> int:
        return len(self._descriptions)

    def find(self, name: str, plugin_format: str = "") -> PluginDescription | None:
        """Return the first description named ``name``, optionally of ``plugin_format``.

        Both comparisons ignore case.
        """

        wanted_name = name.lower()
        wanted_format = plugin_format.lower()
        for description in self._descriptions:
            if description.name.lower() != wanted_name:
                continue
            if wanted_format and description.plugin_format.lower() != wanted_format:
                continue
            return description
        return None

    def contains(self, plugin: ExternalPlugin) -> bool:
        return self.find(plugin.name, plugin.plugin_format) is not None

    def instantiate(self, description: PluginDescription, track_id: str) -> ExternalPlugin:
        return ExternalPlugin(
            track_id=track_id,
            name=description.name,
            plugin_format=description.plugin_format,
        )


class InternalPluginFactory:
    """Create engine-native plugins from their type strings."""

    def __init__(self, plugin_types: Iterable[str] = BUILTIN_PLUGIN_TYPES) -> None:
        self._types: dict[str, str] = {}
        for plugin_type in plugin_types:
            self.register(plugin_type)

    def register(self, plugin_type: str) -> None:
        """Make ``plugin_type`` creatable, e.g. a project-specific plugin."""

        self._types[plugin_type.lower()] = plugin_type

    @property
    def plugin_types(self) -> List[str]:
        return list(self._types.values())

    def create(self, plugin_type: str, track_id: str) -> InternalPlugin | None:
        """Return a new plugin of ``plugin_type`` (any case) or ``None`` if unknown."""

        canonical = self._types.get(plugin_type.lower())
        if canonical is None:
            return None
        return InternalPlugin(track_id=track_id, plugin_type=canonical)

"""Project document package exposing models, the plugin catalog, and persistence."""
from .catalog import (
    BUILTIN_PLUGIN_TYPES,
    INTERNAL_PLUGIN_MARKER,
    INTERNAL_PLUGIN_MARKERS,
    InternalPluginFactory,
    PluginCatalog,
    PluginDescription,
)
from .models import (
    APPEND,
    AudioClip,
    DocumentMetadata,
    ExternalPlugin,
    InternalPlugin,
    MidiClip,
    MidiNote,
    PathMode,
    ProjectDocument,
    SourceReference,
    Track,
)
from .persistence import (
    DocumentError,
    DocumentFileAdapter,
    DocumentIntegrityError,
    DocumentNotFoundError,
    DocumentSerializer,
)

__all__ = [
    "APPEND",
    "AudioClip",
    "BUILTIN_PLUGIN_TYPES",
    "DocumentError",
    "DocumentFileAdapter",
    "DocumentIntegrityError",
    "DocumentMetadata",
    "DocumentNotFoundError",
    "DocumentSerializer",
    "ExternalPlugin",
    "INTERNAL_PLUGIN_MARKER",
    "INTERNAL_PLUGIN_MARKERS",
    "InternalPlugin",
    "InternalPluginFactory",
    "MidiClip",
    "MidiNote",
    "PathMode",
    "PluginCatalog",
    "PluginDescription",
    "ProjectDocument",
    "SourceReference",
    "Track",
]

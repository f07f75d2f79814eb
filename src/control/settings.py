"""Session configuration loaded from keyword arguments or the environment."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class SessionSettings(BaseModel):
    """Defaults applied by :class:`control.session.EditSession` and the dispatcher."""

    default_track_name: str = Field("Fluid Track", min_length=1)
    default_clip_name: str = Field("Fluid Clip", min_length=1)
    default_document_name: str = Field("session.json", min_length=1)
    plugin_catalog_path: Path | None = None
    max_plugins_per_track: int = Field(16, gt=0)
    verbose: bool = False

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> SessionSettings:
        """Build settings from ``TRACKSCRIPT_*`` variables.

        ``TRACKSCRIPT_DEFAULT_TRACK``
            Track used as the command target until another one is selected.
        ``TRACKSCRIPT_DEFAULT_CLIP``
            Clip name used by ``/insert`` when none is given.
        ``TRACKSCRIPT_DOCUMENT_NAME``
            File name for documents created without a location.
        ``TRACKSCRIPT_PLUGIN_CATALOG``
            JSON file listing known hosted plugins.
        ``TRACKSCRIPT_MAX_PLUGINS``
            Plugin chain capacity for new documents.
        ``TRACKSCRIPT_VERBOSE``
            ``1``/``true``/``yes``/``on`` logs every source rewrite at info level.

        Unset variables keep the field defaults.
        """

        environment = os.environ if env is None else env
        values: dict[str, object] = {}
        mapping = {
            "TRACKSCRIPT_DEFAULT_TRACK": "default_track_name",
            "TRACKSCRIPT_DEFAULT_CLIP": "default_clip_name",
            "TRACKSCRIPT_DOCUMENT_NAME": "default_document_name",
            "TRACKSCRIPT_PLUGIN_CATALOG": "plugin_catalog_path",
            "TRACKSCRIPT_MAX_PLUGINS": "max_plugins_per_track",
        }
        for variable, field_name in mapping.items():
            value = environment.get(variable)
            if value:
                values[field_name] = value
        verbose = environment.get("TRACKSCRIPT_VERBOSE")
        if verbose is not None:
            values["verbose"] = verbose.strip().lower() in _TRUTHY
        return cls.model_validate(values)

from pathlib import Path

import pytest

from control.settings import SessionSettings


def test_defaults():
    settings = SessionSettings()
    assert settings.default_track_name == "Fluid Track"
    assert settings.default_clip_name == "Fluid Clip"
    assert settings.plugin_catalog_path is None
    assert settings.verbose is False


def test_from_environment_reads_prefixed_variables():
    settings = SessionSettings.from_environment(
        {
            "TRACKSCRIPT_DEFAULT_TRACK": "Keys",
            "TRACKSCRIPT_DEFAULT_CLIP": "Riff",
            "TRACKSCRIPT_PLUGIN_CATALOG": "/opt/plugins.json",
            "TRACKSCRIPT_MAX_PLUGINS": "8",
            "TRACKSCRIPT_VERBOSE": "Yes",
        }
    )
    assert settings.default_track_name == "Keys"
    assert settings.default_clip_name == "Riff"
    assert settings.plugin_catalog_path == Path("/opt/plugins.json")
    assert settings.max_plugins_per_track == 8
    assert settings.verbose is True


def test_from_environment_ignores_empty_values():
    settings = SessionSettings.from_environment({"TRACKSCRIPT_DEFAULT_TRACK": ""})
    assert settings.default_track_name == "Fluid Track"


def test_invalid_capacity_rejected():
    with pytest.raises(ValueError):
        SessionSettings.from_environment({"TRACKSCRIPT_MAX_PLUGINS": "0"})

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from project.catalog import InternalPluginFactory, PluginCatalog, PluginDescription  # noqa: E402
from project.models import ProjectDocument  # noqa: E402


@pytest.fixture()
def catalog() -> PluginCatalog:
    return PluginCatalog(
        [
            PluginDescription(name="Zebra2", plugin_format="VST"),
            PluginDescription(name="Podolski", plugin_format="VST"),
            PluginDescription(name="Podolski", plugin_format="VST3"),
            PluginDescription(name="TAL-Chorus-LX", plugin_format="AudioUnit"),
        ]
    )


@pytest.fixture()
def factory() -> InternalPluginFactory:
    return InternalPluginFactory()


@pytest.fixture()
def example_document(tmp_path: Path) -> ProjectDocument:
    """Document saved at ``tmp_path/edits/song.json`` with absolute audio sources."""

    document = ProjectDocument(file_path=tmp_path / "edits" / "song.json")
    document.project_items = {"4412/1001": str(tmp_path / "library" / "kick.wav")}
    drums = document.insert_track("drums")
    document.insert_audio_clip(drums, "kick", str(tmp_path / "media" / "kick.wav"))
    document.insert_audio_clip(drums, "snare", str(tmp_path / "media" / "snare.wav"))
    document.insert_midi_clip(drums, "fill")
    vox = document.insert_track("vox")
    document.insert_audio_clip(vox, "lead", str(tmp_path / "edits" / "audio" / "lead.wav"))
    return document

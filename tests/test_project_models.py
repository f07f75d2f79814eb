from pathlib import Path

import pytest

from project.models import (
    APPEND,
    AudioClip,
    InternalPlugin,
    MidiClip,
    MidiNote,
    PathMode,
    ProjectDocument,
    SourceReference,
)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("absolute", PathMode.ABSOLUTE),
        ("Abs", PathMode.ABSOLUTE),
        ("a", PathMode.ABSOLUTE),
        ("relative", PathMode.RELATIVE),
        ("", PathMode.RELATIVE),
        (None, PathMode.RELATIVE),
        ("yes", PathMode.RELATIVE),
    ],
)
def test_path_mode_from_token(token, expected):
    assert PathMode.from_token(token) is expected


def test_source_reference_mode_detection():
    assert SourceReference(source="/media/kick.wav").mode is PathMode.ABSOLUTE
    assert SourceReference(source="../media/kick.wav").mode is PathMode.RELATIVE
    assert SourceReference(source="4412/1001").mode is None
    assert SourceReference(source="4412/1001").is_project_item
    assert SourceReference().mode is None


@pytest.mark.parametrize("bad_pitch", [-1, 128])
def test_midi_note_pitch_bounds(bad_pitch):
    with pytest.raises(ValueError):
        MidiNote(pitch=bad_pitch, start_beat=0.0)


def test_insert_entities_touch_document():
    document = ProjectDocument()
    before = document.metadata.updated_at
    track = document.insert_track("bass")
    clip = document.insert_midi_clip(track, "riff")

    assert track.clip_ids == [clip.id]
    assert clip.track_id == track.id
    assert clip.kind == "midi"
    assert list(document.iter_clips(track)) == [clip]
    assert document.metadata.updated_at >= before


def test_insert_plugin_respects_position_and_capacity():
    document = ProjectDocument(max_plugins_per_track=3)
    track = document.insert_track("bass")
    first = InternalPlugin(track_id=track.id, plugin_type="volume")
    second = InternalPlugin(track_id=track.id, plugin_type="level")
    third = InternalPlugin(track_id=track.id, plugin_type="reverb")
    document.insert_plugin(track, first)
    document.insert_plugin(track, second, APPEND)
    document.insert_plugin(track, third, 0)

    assert document.plugin_chain(track) == [third, first, second]
    assert document.plugin_index(first) == 1
    assert not document.can_insert_plugin(track)
    with pytest.raises(ValueError):
        document.insert_plugin(track, InternalPlugin(track_id=track.id, plugin_type="delay"))


def test_resolve_source_file_handles_every_descriptor(tmp_path: Path):
    document = ProjectDocument(file_path=tmp_path / "song.json")
    document.project_items["1/2"] = str(tmp_path / "lib" / "hat.wav")
    track = document.insert_track("drums")
    absolute = document.insert_audio_clip(track, "a", str(tmp_path / "x" / ".." / "kick.wav"))
    relative = document.insert_audio_clip(track, "r", "media/snare.wav")
    item = document.insert_audio_clip(track, "i", "1/2")
    unmapped = document.insert_audio_clip(track, "u", "9/9")
    empty = document.insert_audio_clip(track, "e", "")

    assert document.resolve_source_file(absolute) == tmp_path / "kick.wav"
    assert document.resolve_source_file(relative) == tmp_path / "media" / "snare.wav"
    assert document.resolve_source_file(item) == tmp_path / "lib" / "hat.wav"
    assert document.resolve_source_file(unmapped) is None
    assert document.resolve_source_file(empty) is None


def test_set_source_reference_switches_modes(tmp_path: Path):
    document = ProjectDocument(file_path=tmp_path / "edits" / "song.json")
    track = document.insert_track("drums")
    clip = document.insert_audio_clip(track, "kick", "")
    target = tmp_path / "media" / "kick.wav"

    document.set_source_reference(clip, target, PathMode.RELATIVE)
    assert clip.source.source == "../media/kick.wav"

    document.set_source_reference(clip, target, PathMode.ABSOLUTE)
    assert clip.source.source == target.as_posix()


def test_source_media_changed_bumps_revision():
    document = ProjectDocument()
    track = document.insert_track("drums")
    clip = document.insert_audio_clip(track, "kick", "/media/kick.wav")
    document.source_media_changed(clip)
    document.source_media_changed(clip)
    assert clip.media_revision == 2


def test_clip_union_discriminates_on_kind():
    document = ProjectDocument.model_validate(
        {
            "tracks": [{"id": "t1", "name": "drums", "clip_ids": ["c1", "c2"]}],
            "clips": {
                "c1": {"id": "c1", "track_id": "t1", "name": "kick", "kind": "audio",
                       "source": {"source": "/media/kick.wav"}},
                "c2": {"id": "c2", "track_id": "t1", "name": "fill", "kind": "midi"},
            },
        }
    )
    assert isinstance(document.clips["c1"], AudioClip)
    assert isinstance(document.clips["c2"], MidiClip)

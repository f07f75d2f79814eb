from pathlib import Path

from project.models import AudioClip, PathMode, ProjectDocument
from editing.normalizer import (
    SourceFailed,
    SourceUnchanged,
    SourceUpdated,
    normalize_sources,
)


def _audio_sources(document: ProjectDocument) -> dict[str, str]:
    return {
        clip.name: clip.source.source
        for clip in document.clips.values()
        if isinstance(clip, AudioClip)
    }


def test_relative_pass_rewrites_every_absolute_source(example_document: ProjectDocument):
    result = normalize_sources(example_document, PathMode.RELATIVE)

    assert (result.updated, result.unchanged, result.failed) == (3, 0, 0)
    assert _audio_sources(example_document) == {
        "kick": "../media/kick.wav",
        "snare": "../media/snare.wav",
        "lead": "audio/lead.wav",
    }
    assert all(isinstance(event, SourceUpdated) for event in result.events)
    assert result.events[0].before.endswith("media/kick.wav")


def test_second_pass_in_same_mode_changes_nothing(example_document: ProjectDocument):
    normalize_sources(example_document, PathMode.RELATIVE)
    revisions = {clip.id: clip.media_revision for clip in example_document.clips.values()
                 if isinstance(clip, AudioClip)}

    again = normalize_sources(example_document, PathMode.RELATIVE)
    assert again.updated == 0
    assert again.unchanged == 3
    assert all(isinstance(event, SourceUnchanged) for event in again.events)
    assert revisions == {clip.id: clip.media_revision for clip in example_document.clips.values()
                         if isinstance(clip, AudioClip)}


def test_round_trip_restores_absolute_text(example_document: ProjectDocument):
    original = _audio_sources(example_document)
    normalize_sources(example_document, PathMode.RELATIVE)
    normalize_sources(example_document, PathMode.ABSOLUTE)
    assert _audio_sources(example_document) == original


def test_partial_failure_continues_the_pass(example_document: ProjectDocument, caplog):
    drums = example_document.tracks[0]
    example_document.insert_audio_clip(drums, "missing-item", "7777/1")
    example_document.insert_audio_clip(drums, "empty", "")
    example_document.insert_audio_clip(drums, "library", "4412/1001")

    with caplog.at_level("ERROR", logger="editing.normalizer"):
        result = normalize_sources(example_document, PathMode.ABSOLUTE)

    assert result.failed == 2
    assert result.updated + result.unchanged == 6 - 2
    assert not result.succeeded
    failed = [event for event in result.events if isinstance(event, SourceFailed)]
    assert [event.clip_name for event in failed] == ["missing-item", "empty"]
    assert failed[0].source == "7777/1"
    assert "missing-item" in caplog.text
    assert example_document.clips[failed[0].clip_id].source.source == "7777/1"


def test_project_item_becomes_direct_reference(example_document: ProjectDocument, tmp_path: Path):
    drums = example_document.tracks[0]
    clip = example_document.insert_audio_clip(drums, "library", "4412/1001")

    normalize_sources(example_document, PathMode.ABSOLUTE)
    assert clip.source.source == (tmp_path / "library" / "kick.wav").as_posix()
    assert clip.media_revision == 1


def test_missing_file_on_disk_is_not_a_failure(example_document: ProjectDocument):
    assert not any(Path(source).exists() for source in _audio_sources(example_document).values())
    result = normalize_sources(example_document, PathMode.RELATIVE)
    assert result.failed == 0


def test_events_stream_to_callback_in_document_order(example_document: ProjectDocument):
    seen = []
    result = normalize_sources(example_document, PathMode.RELATIVE, on_event=seen.append)
    assert seen == result.events
    assert [event.clip_name for event in seen] == ["kick", "snare", "lead"]


def test_midi_clips_are_ignored(example_document: ProjectDocument):
    result = normalize_sources(example_document, PathMode.RELATIVE)
    assert result.total == 3
    assert "fill" not in [event.clip_name for event in result.events]


def test_verbose_logs_updates_at_info(example_document: ProjectDocument, caplog):
    with caplog.at_level("INFO", logger="editing.normalizer"):
        normalize_sources(example_document, PathMode.RELATIVE, verbose=True)
    assert "Updated" in caplog.text
    caplog.clear()
    with caplog.at_level("INFO", logger="editing.normalizer"):
        normalize_sources(example_document, PathMode.RELATIVE, verbose=False)
    assert "Unchanged path" not in caplog.text

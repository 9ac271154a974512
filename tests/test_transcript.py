import pytest
from pydantic import ValidationError

from models.interview import TranscriptEntry
from services.transcript import format_transcript


def test_format_transcript_one_line_per_entry_in_order(transcript):
    text = format_transcript(transcript)

    lines = text.splitlines()
    assert lines == [
        "- interviewer: Tell me about yourself.",
        "- candidate: I build React apps.",
    ]


def test_format_transcript_keeps_duplicates():
    entry = TranscriptEntry(role="candidate", content="Yes.")

    assert format_transcript([entry, entry]) == "- candidate: Yes.\n- candidate: Yes.\n"


def test_format_transcript_empty_is_empty_string():
    assert format_transcript([]) == ""


def test_transcript_entry_maps_voice_agent_roles():
    assert TranscriptEntry(role="assistant", content="Hi").role == "interviewer"
    assert TranscriptEntry(role="user", content="Hello").role == "candidate"


def test_transcript_entry_rejects_unknown_role():
    with pytest.raises(ValidationError):
        TranscriptEntry(role="moderator", content="Hi")


def test_format_transcript_folds_line_breaks_inside_a_turn():
    entries = [
        TranscriptEntry(role="candidate", content="First point.\nSecond point.\r\n\r\n  Third."),
        TranscriptEntry(role="interviewer", content="Thanks."),
    ]

    text = format_transcript(entries)

    assert text.splitlines() == [
        "- candidate: First point. Second point. Third.",
        "- interviewer: Thanks.",
    ]

import re
from typing import Iterable

from models.interview import TranscriptEntry

LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


def format_transcript(transcript: Iterable[TranscriptEntry]) -> str:
    """
    Flatten speaker turns into `- <role>: <content>` lines, in order.
    Line breaks inside a turn are folded into single spaces so every turn stays on one line.
    Empty input gives an empty string.
    """
    return "".join(
        f"- {entry.role}: {LINE_BREAKS.sub(' ', entry.content)}\n" for entry in transcript
    )

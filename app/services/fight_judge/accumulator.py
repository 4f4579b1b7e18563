"""Accumulates a plain-text judgment stream into a transcript and a winner."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from app.core.config import WINNER_LABELS

WINNER_PATTERN = re.compile(r"winner:\s+(\w+).*", re.IGNORECASE | re.ASCII)
REASON_PATTERN = re.compile(r"reason:\s*(.*)", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class Judgment:
    transcript: str = ""
    winner: str = ""

    @property
    def reason(self) -> str:
        """The part of the transcript meant for display."""
        match = REASON_PATTERN.search(self.transcript)
        return match.group(1).strip() if match else self.transcript


def extract_winner(transcript: str) -> str:
    """Return the label after ``winner:`` lower-cased, or "" if there is none.

    Best effort only: anything other than whitespace between the marker and
    the label, or a word that is not one of the opponent labels, leaves the
    winner unresolved.
    """
    match = WINNER_PATTERN.search(transcript)
    if match is None:
        return ""
    winner = match.group(1).lower()
    return winner if winner in WINNER_LABELS else ""


def accumulate(
    chunks: Iterable[bytes],
    on_text: Callable[[str], None] | None = None,
) -> Judgment:
    """Concatenate every chunk until the transport ends, then resolve the winner."""
    text_decoder = codecs.getincrementaldecoder("utf-8")()
    parts: list[str] = []

    for chunk in chunks:
        text = text_decoder.decode(chunk)
        if text:
            parts.append(text)
            if on_text is not None:
                on_text(text)

    tail = text_decoder.decode(b"", final=True)
    if tail:
        parts.append(tail)
        if on_text is not None:
            on_text(tail)

    transcript = "".join(parts)
    return Judgment(transcript=transcript, winner=extract_winner(transcript))

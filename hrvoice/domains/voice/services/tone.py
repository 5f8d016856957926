"""Heuristic tone detection for transcripts."""

from typing import Protocol

from hrvoice.domains.voice.models import Tone


class ToneDetector(Protocol):
    def detect(self, text: str) -> Tone | None: ...


class KeywordToneDetector:
    """Punctuation and keyword rules, first match wins. Keywords are case-sensitive.

    ``uncertain`` has no keyword rule; it can only come from another detector.
    """

    EXCITED_WORDS = ("great", "amazing")
    FRUSTRATED_PHRASES = ("not working", "won't")

    def detect(self, text: str) -> Tone | None:
        if not text:
            return None

        if "!" in text and any(w in text for w in self.EXCITED_WORDS):
            return Tone.EXCITED
        if "?" in text:
            return Tone.QUESTIONING
        if any(p in text for p in self.FRUSTRATED_PHRASES):
            return Tone.FRUSTRATED
        return None

"""Tests for keyword tone detection."""

import pytest

from hrvoice.domains.voice.models import Tone
from hrvoice.domains.voice.services.tone import KeywordToneDetector


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("This is amazing! I got the promotion!", Tone.EXCITED),
        ("That went great!", Tone.EXCITED),
        ("Great news!", None),
        ("AMAZING!", None),
        ("It WON'T start", None),
        ("The app is Not Working", None),
        ("How do I prepare for my review?", Tone.QUESTIONING),
        ("Why won't this system recognize my achievements?", Tone.QUESTIONING),
        ("My login is not working", Tone.FRUSTRATED),
        ("They won't return my calls", Tone.FRUSTRATED),
        ("Amazing work today", None),
        ("I'm not sure how to approach my manager about a raise.", None),
        ("", None),
    ],
)
def test_keyword_rules(text, expected):
    assert KeywordToneDetector().detect(text) is expected

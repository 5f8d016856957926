"""Tests for assistant mode prompts."""

import pytest

from hrvoice.prompts.assistant_modes import (
    DEFAULT_PROMPT,
    MODE_PROMPTS,
    VOICE_ADAPTATION_SUFFIX,
    build_voice_system_prompt,
    get_system_prompt_for_mode,
    personalize,
)


@pytest.mark.parametrize("mode", sorted(MODE_PROMPTS))
def test_known_modes(mode):
    assert get_system_prompt_for_mode(mode) == MODE_PROMPTS[mode]


def test_unknown_mode_uses_generic_prompt():
    assert get_system_prompt_for_mode("astrology") == DEFAULT_PROMPT
    assert DEFAULT_PROMPT.startswith("You are an AI HR assistant.")


def test_voice_prompt_uses_session_prompt_when_present():
    prompt = build_voice_system_prompt("resume-coach", "Be a pirate.")
    assert prompt == f"Be a pirate. {VOICE_ADAPTATION_SUFFIX}"


def test_voice_prompt_falls_back_to_mode_prompt():
    prompt = build_voice_system_prompt("benefits-advisor")
    assert prompt.startswith(MODE_PROMPTS["benefits-advisor"])
    assert prompt.endswith(VOICE_ADAPTATION_SUFFIX)


def test_personalize():
    assert personalize("Base.", None) == "Base."
    assert "Address the user as Sam" in personalize("Base.", "Sam")

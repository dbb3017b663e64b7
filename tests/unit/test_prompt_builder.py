"""Tests for chillhouse.api.prompt_builder — style-keyed prompt compilation.

Tests cover:
- Every recognised style yields base + newline + that style's fragment.
- Missing, blank and unknown styles fall back to the generic fragment.
- Style keys are matched after trimming and lower-casing.
- The base instruction can be overridden.
"""

from __future__ import annotations

import pytest

from chillhouse.api.prompt_builder import (
    DEFAULT_BASE_PROMPT,
    GENERIC_FRAGMENT,
    STYLE_FRAGMENTS,
    available_styles,
    build_prompt,
    normalise_style,
    style_fragment,
)


class TestBuildPromptKnownStyles:
    """Recognised styles pick their own fragment."""

    @pytest.mark.parametrize("style", sorted(STYLE_FRAGMENTS))
    def test_known_style_uses_its_fragment(self, style):
        """The prompt is the base sentence followed by exactly the style fragment."""
        assert build_prompt(style) == f"{DEFAULT_BASE_PROMPT}\n{STYLE_FRAGMENTS[style]}"

    def test_style_lookup_ignores_case_and_whitespace(self):
        """'  Beach ' should resolve to the 'beach' fragment."""
        assert build_prompt("  Beach ") == build_prompt("beach")

    def test_fragments_are_distinct(self):
        """No two styles should share a fragment, and none equals the fallback."""
        fragments = list(STYLE_FRAGMENTS.values())
        assert len(set(fragments)) == len(fragments)
        assert GENERIC_FRAGMENT not in fragments


class TestBuildPromptFallback:
    """Missing or unknown styles fall back to the generic fragment."""

    @pytest.mark.parametrize("style", [None, "", "   ", "vaporwave", "BEACHY"])
    def test_fallback_fragment(self, style):
        assert build_prompt(style) == f"{DEFAULT_BASE_PROMPT}\n{GENERIC_FRAGMENT}"

    def test_style_fragment_fallback(self):
        assert style_fragment("does-not-exist") == GENERIC_FRAGMENT


class TestDefaultBase:
    def test_describes_character(self):
        assert DEFAULT_BASE_PROMPT.startswith(
            "A highly detailed transformation of [character] into the Chillhouse meme style:"
        )

    def test_ends_with_no_text_instruction(self):
        assert DEFAULT_BASE_PROMPT.endswith(
            "high contrast, vibrant background optional, no text."
        )


class TestBaseOverride:
    """The base instruction is replaceable through configuration."""

    def test_override_replaces_base(self):
        prompt = build_prompt("neon", base_prompt="A cat in a hat.")
        assert prompt == f"A cat in a hat.\n{STYLE_FRAGMENTS['neon']}"

    def test_blank_override_uses_default(self):
        assert build_prompt("neon", base_prompt="  ") == build_prompt("neon")

    def test_override_is_stripped(self):
        prompt = build_prompt(None, base_prompt="  Custom base.\n")
        assert prompt.startswith("Custom base.\n")

    def test_single_line_break_separator(self):
        """Base and fragment are joined by exactly one newline."""
        prompt = build_prompt("pixel", base_prompt="Base.")
        assert prompt.split("\n") == ["Base.", STYLE_FRAGMENTS["pixel"]]


class TestHelpers:
    def test_normalise_style(self):
        assert normalise_style(None) is None
        assert normalise_style("  ") is None
        assert normalise_style(" Cozy ") == "cozy"

    def test_available_styles_matches_table(self):
        assert available_styles() == list(STYLE_FRAGMENTS)

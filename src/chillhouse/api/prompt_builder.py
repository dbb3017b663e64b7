"""Style-keyed prompt compilation for the Chillhouse relay.

Every edit request sent upstream carries a two-part prompt:

    [Base instruction]
    [Style fragment]

The base instruction describes the Chillhouse character itself and can be
replaced at deploy time through the ``SYSTEM_PROMPT`` setting.  The style
fragment biases the generated image toward a visual theme picked by the
caller.  Unknown or missing styles use a generic fragment, so prompt
compilation never fails.

Usage
-----
::

    compiled = build_prompt("beach")
    compiled = build_prompt(None, base_prompt=config.system_prompt)
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fixed prompt sections.
# ---------------------------------------------------------------------------

DEFAULT_BASE_PROMPT = (
    "A highly detailed transformation of [character] into the Chillhouse meme style: "
    "an anthropomorphic cartoon house with a relaxed, chill expression, bulbous nose, "
    "simple eyes sometimes with glasses, house-shaped body with a sloped roof and chimney, "
    "wearing a casual gray sweater, blue jeans with hands casually in pockets, and black "
    "sneakers, standing in a laid-back pose, simple flat colors, meme art style, high "
    "contrast, vibrant background optional, no text."
)

GENERIC_FRAGMENT = (
    "Keep the original subject recognisable. Plain, softly lit background with a vibrant "
    "accent colour."
)

STYLE_FRAGMENTS: dict[str, str] = {
    "classic": (
        "Classic Chillhouse look: off-white backdrop, muted pastel palette, thick clean "
        "outlines like the original meme."
    ),
    "beach": (
        "Summer beach vibe: sunglasses on, palm trees and turquoise waves behind, warm golden "
        "afternoon light."
    ),
    "cozy": (
        "Cozy winter evening: snow on the roof, smoke curling from the chimney, warm orange "
        "window glow, mug of cocoa in hand."
    ),
    "neon": (
        "Retro synthwave night: neon pink and cyan rim lighting, grid horizon, glowing "
        "windows."
    ),
    "pixel": (
        "Chunky 16-bit pixel art rendition with a limited palette and crisp hard edges."
    ),
    "anime": (
        "Soft cel-shaded anime illustration, expressive eyes, pastel sky with drifting "
        "clouds."
    ),
}


def normalise_style(style: str | None) -> str | None:
    """Return the lookup key for *style*, or ``None`` when it is blank."""
    if style is None:
        return None
    key = style.strip().lower()
    return key or None


def style_fragment(style: str | None) -> str:
    """Return the fragment for *style*, falling back to :data:`GENERIC_FRAGMENT`."""
    key = normalise_style(style)
    if key is None:
        return GENERIC_FRAGMENT
    return STYLE_FRAGMENTS.get(key, GENERIC_FRAGMENT)


def available_styles() -> list[str]:
    """Return the recognised style keys in declaration order."""
    return list(STYLE_FRAGMENTS)


def build_prompt(style: str | None, *, base_prompt: str | None = None) -> str:
    """Compile the full edit prompt for a style selector.

    Args:
        style: Caller-supplied style key.  ``None``, blank, or unknown values
            select the generic fragment.
        base_prompt: Override for the base instruction (the ``SYSTEM_PROMPT``
            setting).  ``None`` or blank uses :data:`DEFAULT_BASE_PROMPT`.

    Returns:
        The base instruction and the style fragment joined by a single newline.
    """
    base = base_prompt.strip() if base_prompt and base_prompt.strip() else DEFAULT_BASE_PROMPT
    return f"{base}\n{style_fragment(style)}"

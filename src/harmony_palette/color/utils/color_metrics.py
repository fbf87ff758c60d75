"""
color_metrics.py
================

Does: Normalize RGB triples to a canonical hex key and compute the contrast and
      lightness heuristics used to curate palettes (WCAG relative luminance,
      contrast ratio, YIQ perceived brightness, light/dark classification).
Used By: color.selection (dedupe, background pick, light filter, duplicate gate).
Returns: Hex keys (str), luminance/brightness/contrast (float), classification (bool).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

from webcolors import rgb_to_hex

# Public surface
__all__ = [
    "RGB",
    "WHITE",
    "BLACK",
    "as_rgb",
    "LIGHT_BRIGHTNESS_THRESHOLD",
    "normalize_color",
    "relative_luminance",
    "contrast_ratio",
    "perceived_brightness",
    "is_light",
    "is_dark",
]
__docformat__ = "google"

logger = logging.getLogger(__name__)

# ── Types & constants ─────────────────────────────────────────────────────────
RGB = tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)

# Brightness is on a 0-255 scale; 128 is the first value above 50%.
LIGHT_BRIGHTNESS_THRESHOLD = 128


def as_rgb(color: Sequence[int]) -> RGB:
    """Does: Coerce a list or tuple triple to a plain (r, g, b) int tuple."""
    r, g, b = color
    return int(r), int(g), int(b)


# =============================================================================
# 1) NORMALIZATION
# =============================================================================

def normalize_color(color: Sequence[int]) -> str:
    """Does: Map an RGB triple to its uppercase '#RRGGBB' key (sole equality test)."""
    return rgb_to_hex(as_rgb(color)).upper()


# =============================================================================
# 2) CONTRAST
# =============================================================================

def _srgb_to_linear(v: float) -> float:
    v = v / 255.0
    return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4


@lru_cache(maxsize=4096)
def _luminance(rgb: RGB) -> float:
    r, g, b = (_srgb_to_linear(float(c)) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def relative_luminance(color: Sequence[int]) -> float:
    """Does: Compute WCAG relative luminance in [0, 1]."""
    return _luminance(as_rgb(color))


def contrast_ratio(color1: Sequence[int], color2: Sequence[int]) -> float:
    """Does: Compute the WCAG contrast ratio (L_lighter + 0.05) / (L_darker + 0.05).

    Args:
        color1: First RGB triple.
        color2: Second RGB triple (order does not matter).

    Returns:
        A float in [1, 21].
    """
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


# =============================================================================
# 3) LIGHTNESS
# =============================================================================

def perceived_brightness(color: Sequence[int]) -> float:
    """Does: YIQ perceived brightness (299R + 587G + 114B) / 1000, on 0-255."""
    r, g, b = as_rgb(color)
    return (r * 299 + g * 587 + b * 114) / 1000


def is_light(color: Sequence[int]) -> bool:
    """Does: Classify as light when perceived lightness is above the midpoint."""
    return perceived_brightness(color) >= LIGHT_BRIGHTNESS_THRESHOLD


def is_dark(color: Sequence[int]) -> bool:
    return not is_light(color)

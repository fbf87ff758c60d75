"""
utils package.
=============

Does: Provide the color primitives (hex normalization, contrast, lightness)
      shared by the selection helpers.
"""

from .color_metrics import (
    BLACK,
    LIGHT_BRIGHTNESS_THRESHOLD,
    RGB,
    WHITE,
    as_rgb,
    contrast_ratio,
    is_dark,
    is_light,
    normalize_color,
    perceived_brightness,
    relative_luminance,
)

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

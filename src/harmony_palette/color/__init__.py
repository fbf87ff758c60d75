"""
color.
=====

Does: Aggregate the color-domain logic: primitives (normalization, contrast,
      lightness) and the selection helpers built on top of them.
Used By: palette.assembler, tests.
"""

from .selection import (
    dedupe_colors,
    filter_light_colors,
    has_duplicate_colors,
    select_background_color,
)
from .utils import (
    RGB,
    WHITE,
    contrast_ratio,
    is_light,
    normalize_color,
)

__all__ = [
    # primitives
    "RGB",
    "WHITE",
    "normalize_color",
    "contrast_ratio",
    "is_light",
    # selection
    "dedupe_colors",
    "select_background_color",
    "filter_light_colors",
    "has_duplicate_colors",
]

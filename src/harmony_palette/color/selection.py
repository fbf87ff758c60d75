"""
selection.py.
============

Does: Pure helpers that turn a raw upstream palette into palette candidates:
      dedupe by hex key, pick the background with the best contrast against
      white, keep light colors, and detect duplicates in a candidate set.
Used By: palette.assembler (one pass per attempt).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from harmony_palette.color.utils import (
    RGB,
    WHITE,
    as_rgb,
    contrast_ratio,
    is_light,
    normalize_color,
)

__all__ = [
    "dedupe_colors",
    "select_background_color",
    "filter_light_colors",
    "has_duplicate_colors",
]


def dedupe_colors(colors: Iterable[Sequence[int]]) -> list[RGB]:
    """Does: Drop later colors sharing a hex key with an earlier one.
    Args: colors: ordered RGB triples (lists or tuples).
    Returns: First occurrences, original relative order kept.
    """
    seen: set[str] = set()
    unique: list[RGB] = []
    for color in colors:
        key = normalize_color(color)
        if key in seen:
            continue
        seen.add(key)
        unique.append(as_rgb(color))
    return unique


def select_background_color(colors: Sequence[Sequence[int]], reference: RGB = WHITE) -> RGB:
    """Does: Pick the color with the highest contrast ratio against `reference`.
    Args: colors: non-empty RGB sequence; reference: defaults to white.
    Returns: The first color reaching the maximum (strict '>' scan).
    Raises: ValueError on empty input.
    """
    if not colors:
        raise ValueError("select_background_color() needs at least one color")

    best = as_rgb(colors[0])
    best_contrast = 0.0
    for color in colors:
        contrast = contrast_ratio(color, reference)
        if contrast > best_contrast:
            best_contrast = contrast
            best = as_rgb(color)
    return best


def filter_light_colors(colors: Iterable[Sequence[int]]) -> list[RGB]:
    """Does: Keep only colors classified as light, order preserved (may be empty)."""
    return [as_rgb(c) for c in colors if is_light(c)]


def has_duplicate_colors(colors: Sequence[Sequence[int]]) -> bool:
    """Does: True if any two colors normalize to the same hex key."""
    keys = [normalize_color(c) for c in colors]
    return len(set(keys)) != len(keys)

"""
palette
=======

Does: Expose the palette record, the tagged result type and the retrying
      assembler.
"""

from __future__ import annotations

from .assembler import (
    ACCENT_TIERS,
    assemble_palette,
    evaluate_candidates,
    fetch_color_palette,
)
from .types import FailureReason, Palette, PaletteResult

__all__ = [
    "Palette",
    "PaletteResult",
    "FailureReason",
    "ACCENT_TIERS",
    "evaluate_candidates",
    "assemble_palette",
    "fetch_color_palette",
]

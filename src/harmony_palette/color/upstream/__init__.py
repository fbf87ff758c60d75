"""
upstream
========

Does: Expose the Colormind client used as the random-palette provider.
Example:
    client = ColormindClient(); colors = client.fetch_colors()
"""

from __future__ import annotations

from .colormind_client import (
    ColormindClient,
    build_palette_payload,
    parse_palette_payload,
)

__all__ = [
    "ColormindClient",
    "build_palette_payload",
    "parse_palette_payload",
]

__docformat__ = "google"

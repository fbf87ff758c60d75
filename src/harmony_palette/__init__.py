"""
harmony_palette
===============

Does: Root package for the curated palette service (color heuristics, upstream
      client, retry orchestration and the HTTP boundary).
Used by: `python -m harmony_palette`, the `harmony-palette` script and tests.
"""

__all__: list[str] = []
__version__ = "1.0.0"
__docformat__ = "google"

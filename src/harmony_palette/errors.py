"""
errors.py.
=========

Does: Define the error taxonomy shared by the upstream client, the palette
      result type and the HTTP boundary.
Used by: colormind_client (raises UpstreamFetchError), PaletteResult.unwrap().
"""

from __future__ import annotations

__all__ = [
    "HarmonyPaletteError",
    "UpstreamFetchError",
    "PaletteExhaustedError",
]


class HarmonyPaletteError(Exception):
    """Base class for every error raised by this package."""


class UpstreamFetchError(HarmonyPaletteError):
    """Upstream palette call failed (network, status, JSON or payload shape)."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PaletteExhaustedError(HarmonyPaletteError):
    """No acceptance tier matched within the attempt budget."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Not enough unique and lighter colors after {attempts} attempt(s)."
        )
        self.attempts = attempts

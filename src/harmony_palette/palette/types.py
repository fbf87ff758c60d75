"""
types.py.

Does: Define the palette record returned to clients and the explicit result
type the assembler returns instead of raising to signal exhaustion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from harmony_palette.color.utils import RGB, normalize_color
from harmony_palette.errors import PaletteExhaustedError, UpstreamFetchError

__all__ = ["Palette", "PaletteResult", "FailureReason", "ACCENT_FIELDS"]

# Serialized name for each optional field, in fill order.
ACCENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("secondary_color", "secondaryColor"),
    ("accent_color_1", "accentColor1"),
    ("accent_color_2", "accentColor2"),
)


@dataclass(frozen=True)
class Palette:
    """A main color plus 0-3 accents, filled strictly in order and all distinct."""

    main_color: RGB
    secondary_color: RGB | None = None
    accent_color_1: RGB | None = None
    accent_color_2: RGB | None = None

    def __post_init__(self) -> None:
        present = [getattr(self, name) is not None for name, _ in ACCENT_FIELDS]
        # once a field is absent, every later one must be absent too
        if any(later and not earlier for earlier, later in zip(present, present[1:])):
            raise ValueError(f"Palette accents must be filled in order: {self!r}")

        keys = [normalize_color(c) for c in self.colors]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Palette contains duplicate colors: {keys}")

    @classmethod
    def from_colors(cls, main: RGB, accents: list[RGB]) -> Palette:
        if len(accents) > len(ACCENT_FIELDS):
            raise ValueError(f"At most {len(ACCENT_FIELDS)} accents, got {len(accents)}")
        kwargs = {name: color for (name, _), color in zip(ACCENT_FIELDS, accents)}
        return cls(main_color=main, **kwargs)

    @property
    def colors(self) -> list[RGB]:
        """Populated colors, main first."""
        out = [self.main_color]
        for name, _ in ACCENT_FIELDS:
            value = getattr(self, name)
            if value is None:
                break
            out.append(value)
        return out

    def to_dict(self) -> dict[str, list[int]]:
        """JSON shape: camelCase keys, [r, g, b] lists, absent accents omitted."""
        out = {"mainColor": list(self.main_color)}
        for name, key in ACCENT_FIELDS:
            value = getattr(self, name)
            if value is None:
                break
            out[key] = list(value)
        return out


class FailureReason(str, Enum):
    EXHAUSTED = "exhausted"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class PaletteResult:
    """Does: Tagged outcome of one assembly run.

    Exactly one of `palette` / `reason` is set. `attempts` counts the fetches
    made, and `error` keeps the upstream failure when the reason is
    UPSTREAM_ERROR.
    """

    palette: Palette | None = None
    reason: FailureReason | None = None
    attempts: int = 0
    error: UpstreamFetchError | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if (self.palette is None) == (self.reason is None):
            raise ValueError("PaletteResult needs exactly one of palette or reason")

    @classmethod
    def accepted(cls, palette: Palette, attempts: int) -> PaletteResult:
        return cls(palette=palette, attempts=attempts)

    @classmethod
    def exhausted(cls, attempts: int) -> PaletteResult:
        return cls(reason=FailureReason.EXHAUSTED, attempts=attempts)

    @classmethod
    def upstream_error(cls, error: UpstreamFetchError, attempts: int) -> PaletteResult:
        return cls(reason=FailureReason.UPSTREAM_ERROR, attempts=attempts, error=error)

    @property
    def ok(self) -> bool:
        return self.palette is not None

    def unwrap(self) -> Palette:
        """Return the palette or raise the error matching the failure reason."""
        if self.palette is not None:
            return self.palette
        if self.reason is FailureReason.UPSTREAM_ERROR and self.error is not None:
            raise self.error
        if self.reason is FailureReason.UPSTREAM_ERROR:
            raise UpstreamFetchError("Upstream palette provider failed")
        raise PaletteExhaustedError(self.attempts)

"""
assembler.py
============

Does: Turn random upstream palettes into a curated palette: per attempt fetch,
      dedupe, pick the background, keep light candidates, then accept the
      largest duplicate-free tier (3, 2 or 1 accents). Retries until a tier is
      accepted or the attempt budget is spent.
Returns:
  - evaluate_candidates(colors) -> Palette | None
  - await assemble_palette(fetch, ...) -> PaletteResult
  - await fetch_color_palette(config) -> PaletteResult
Used by: api.app (GET /api/colors).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from harmony_palette.color import (
    RGB,
    dedupe_colors,
    filter_light_colors,
    has_duplicate_colors,
    select_background_color,
)
from harmony_palette.color.upstream import ColormindClient
from harmony_palette.config import MAX_ATTEMPTS, ServiceConfig
from harmony_palette.errors import UpstreamFetchError
from harmony_palette.palette.types import Palette, PaletteResult
from harmony_palette.utils.log import debug

logger = logging.getLogger(__name__)

__all__ = [
    "FetchPalette",
    "ACCENT_TIERS",
    "evaluate_candidates",
    "assemble_palette",
    "fetch_color_palette",
]

FetchPalette = Callable[[], Awaitable[Sequence[Sequence[int]]]]

# Accent counts tried per attempt, most preferred first.
ACCENT_TIERS: tuple[int, ...] = (3, 2, 1)


def evaluate_candidates(colors: Sequence[Sequence[int]]) -> Palette | None:
    """Does: Run one evaluation pass over a fetched candidate set.
    Args: colors: non-empty upstream palette.
    Returns: The accepted Palette, or None when every tier is rejected.
    """
    unique = dedupe_colors(colors)
    main = select_background_color(unique)
    # main is deliberately not removed here; it may come back as a light candidate
    light = filter_light_colors(unique)

    for size in ACCENT_TIERS:
        accents = light[:size]
        if len(accents) < size:
            continue
        if not has_duplicate_colors([main, *accents]):
            return Palette.from_colors(main, accents)
    return None


async def _fetch_once(fetch: FetchPalette, timeout: float | None) -> list[RGB]:
    try:
        if timeout is None:
            colors = await fetch()
        else:
            colors = await asyncio.wait_for(fetch(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise UpstreamFetchError(f"Upstream fetch timed out after {timeout}s") from e

    if not colors:
        raise UpstreamFetchError("Upstream returned an empty palette")
    return [tuple(c) for c in colors]  # type: ignore[misc]


async def assemble_palette(
    fetch: FetchPalette,
    *,
    max_attempts: int = MAX_ATTEMPTS,
    attempt_timeout: float | None = None,
    retry_on_fetch_error: bool = False,
) -> PaletteResult:
    """Does: Bounded fetch-and-evaluate loop; never raises to report exhaustion.

    Args:
        fetch: Coroutine factory returning one upstream palette per call.
        max_attempts: Fetch budget (no fetch happens after it is spent).
        attempt_timeout: Optional per-fetch timeout in seconds; a timeout is a
            fetch failure. Only for fetches that stop when cancelled; a
            thread-backed fetch must enforce its own timeout.
        retry_on_fetch_error: False aborts the whole request on the first fetch
            failure; True spends one attempt and keeps going.

    Returns:
        PaletteResult tagged accepted, EXHAUSTED or UPSTREAM_ERROR.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    last_error: UpstreamFetchError | None = None
    for attempt in range(1, max_attempts + 1):
        debug(f"attempt {attempt}/{max_attempts}: fetching")
        try:
            colors = await _fetch_once(fetch, attempt_timeout)
        except UpstreamFetchError as e:
            last_error = e
            if not retry_on_fetch_error:
                logger.warning("Upstream fetch failed on attempt %d, aborting: %s", attempt, e)
                return PaletteResult.upstream_error(e, attempts=attempt)
            logger.warning("Upstream fetch failed on attempt %d, retrying: %s", attempt, e)
            continue

        last_error = None
        debug(f"attempt {attempt}/{max_attempts}: evaluating {colors}")
        palette = evaluate_candidates(colors)
        if palette is not None:
            debug(f"attempt {attempt}/{max_attempts}: accepted {palette.to_dict()}")
            return PaletteResult.accepted(palette, attempts=attempt)
        debug(f"attempt {attempt}/{max_attempts}: rejected")

    if last_error is not None:
        return PaletteResult.upstream_error(last_error, attempts=max_attempts)
    debug(f"exhausted after {max_attempts} attempt(s)", level="WARNING")
    return PaletteResult.exhausted(attempts=max_attempts)


async def fetch_color_palette(config: ServiceConfig) -> PaletteResult:
    """Does: Assemble a palette from Colormind using the service config.

    The client runs in a worker thread that cannot be cancelled, so the
    per-attempt bound is the requests (connect, read) timeout rather than
    an outer wait_for; each attempt ends before the next one starts.
    """
    client = ColormindClient.from_config(config)
    return await assemble_palette(
        client.afetch_colors,
        max_attempts=config.max_attempts,
        retry_on_fetch_error=config.retry_on_fetch_error,
    )

"""
colormind_client.py.
===================

Does: Build the Colormind payload, POST it, validate the returned `result`
      palette and expose a coroutine wrapper so each fetch suspends only the
      calling request.
Returns: Lists of RGB tuples, or raises UpstreamFetchError.
Used by: palette.assembler (as the per-attempt fetch callable).
"""

from __future__ import annotations

# ── Imports & Typing ─────────────────────────────────────────────────────────
import asyncio
import logging
from typing import Any

import requests  # type: ignore[import-untyped]

from harmony_palette.color.utils import RGB
from harmony_palette.config import (
    COLORMIND_API_URL,
    COLORMIND_MODEL,
    COLORMIND_TIMEOUT,
    ServiceConfig,
)
from harmony_palette.errors import UpstreamFetchError
from harmony_palette.utils.log import debug

# ── Logger ───────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
_BODY_PREVIEW = 500

# Single session for connection reuse
_session = requests.Session()

__all__ = [
    "ColormindClient",
    "build_palette_payload",
    "parse_palette_payload",
]


# ── Payload & parsing ────────────────────────────────────────────────────────
def build_palette_payload(model: str = COLORMIND_MODEL) -> dict:
    """Does: Build the JSON body Colormind expects for a random palette."""
    return {"model": model}


def _coerce_channel(value: Any) -> int | None:
    # bool is an int subclass; JSON true/false is never a channel
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if 0 <= value <= 255 else None


def parse_palette_payload(data: Any) -> list[RGB]:
    """Does: Validate a decoded Colormind reply and extract its RGB triples.
    Args: data: decoded JSON body.
    Returns: Non-empty list of (r, g, b) tuples, upstream order kept.
    Raises: UpstreamFetchError when the shape deviates in any way.
    """
    if not isinstance(data, dict) or "result" not in data:
        raise UpstreamFetchError(f"Missing 'result' in upstream reply: {str(data)[:_BODY_PREVIEW]}")

    result = data["result"]
    if not isinstance(result, list) or not result:
        raise UpstreamFetchError(f"Upstream 'result' is not a non-empty list: {result!r}")

    colors: list[RGB] = []
    for idx, item in enumerate(result):
        if not isinstance(item, (list, tuple)) or len(item) != 3:
            raise UpstreamFetchError(f"Upstream color #{idx} is not an RGB triple: {item!r}")
        channels = [_coerce_channel(v) for v in item]
        if any(c is None for c in channels):
            raise UpstreamFetchError(f"Upstream color #{idx} has invalid channels: {item!r}")
        r, g, b = channels
        colors.append((r, g, b))  # type: ignore[arg-type]
    return colors


# ── Client ───────────────────────────────────────────────────────────────────
class ColormindClient:
    """Does: Minimal Colormind client returning one random palette per call.
    Args: url: endpoint; model: palette model; timeout: seconds for connect and for read.
    """

    def __init__(
        self,
        url: str = COLORMIND_API_URL,
        model: str = COLORMIND_MODEL,
        timeout: float = COLORMIND_TIMEOUT,
    ):
        self.url = url
        self.model = model
        self.timeout = timeout

    @property
    def request_timeout(self) -> tuple[float, float]:
        """(connect, read) pair handed to requests; expiry raises inside the call."""
        return (self.timeout, self.timeout)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> ColormindClient:
        return cls(
            url=config.upstream_url,
            model=config.upstream_model,
            timeout=config.upstream_timeout,
        )

    def fetch_colors(self) -> list[RGB]:
        """Does: POST the payload and return the validated palette.
        Returns: List of RGB tuples.
        Raises: UpstreamFetchError on network error, non-2xx status, bad JSON or bad shape.
        """
        try:
            resp = _session.post(
                self.url,
                headers=_HEADERS,
                json=build_palette_payload(self.model),
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("[UPSTREAM] POST %s failed: %s", self.url, e)
            raise UpstreamFetchError(f"Upstream request failed: {e}") from e

        body = resp.text[:_BODY_PREVIEW] if resp.text else None
        if not 200 <= resp.status_code < 300:
            logger.warning("[UPSTREAM] status=%s body=%s", resp.status_code, body)
            raise UpstreamFetchError(
                f"Upstream returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("[UPSTREAM] invalid JSON: %s", body)
            raise UpstreamFetchError(
                f"Invalid JSON from upstream: {e}", status_code=resp.status_code, body=body
            ) from e

        try:
            colors = parse_palette_payload(data)
        except UpstreamFetchError as e:
            e.status_code = resp.status_code
            e.body = body
            logger.warning("[UPSTREAM] unexpected payload: %s", e)
            raise

        debug(f"upstream returned {len(colors)} color(s): {colors}", topic="upstream")
        return colors

    async def afetch_colors(self) -> list[RGB]:
        """Does: Run fetch_colors() in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.fetch_colors)

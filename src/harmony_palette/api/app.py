"""
app.py.
======

Does: HTTP boundary of the service. Builds the FastAPI app around an explicit
      ServiceConfig, gates browser origins, exposes GET /api/colors and maps
      assembler failures to a static 500.
Used by: harmony_palette.__main__ (uvicorn), tests (TestClient).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from harmony_palette import __version__
from harmony_palette.config import ServiceConfig
from harmony_palette.palette import Palette, PaletteResult, fetch_color_palette

logger = logging.getLogger(__name__)

__all__ = ["create_app", "PaletteResponse", "ERROR_MESSAGE", "CORS_REJECT_MESSAGE"]

ERROR_MESSAGE = "Error fetching colors"
CORS_REJECT_MESSAGE = "Not allowed by CORS"

PaletteProvider = Callable[[ServiceConfig], Awaitable[PaletteResult]]


# Response model
class PaletteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    main_color: list[int] = Field(alias="mainColor")
    secondary_color: list[int] | None = Field(default=None, alias="secondaryColor")
    accent_color_1: list[int] | None = Field(default=None, alias="accentColor1")
    accent_color_2: list[int] | None = Field(default=None, alias="accentColor2")

    @classmethod
    def from_palette(cls, palette: Palette) -> PaletteResponse:
        return cls.model_validate(palette.to_dict())


def _origin_allowed(origin: str | None, allowed: tuple[str, ...]) -> bool:
    # no Origin header: same-origin or non-browser caller
    return not origin or origin in allowed


def create_app(
    config: ServiceConfig | None = None,
    palette_provider: PaletteProvider | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Service settings; read from the environment when omitted.
        palette_provider: Coroutine producing a PaletteResult from the config.
            Defaults to fetch_color_palette (Colormind).
    """
    config = config or ServiceConfig.from_env()
    provider = palette_provider or fetch_color_palette

    app = FastAPI(
        title="Harmony Palette",
        description="Curated UI palettes derived from Colormind",
        version=__version__,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # Registered after CORSMiddleware so it runs first and also rejects preflights.
    @app.middleware("http")
    async def origin_gate(request: Request, call_next):
        origin = request.headers.get("origin")
        if not _origin_allowed(origin, config.allowed_origins):
            logger.warning("Rejected request from origin %r to %s", origin, request.url.path)
            return PlainTextResponse(CORS_REJECT_MESSAGE, status_code=403)
        return await call_next(request)

    @app.get(
        "/api/colors",
        response_model=PaletteResponse,
        response_model_exclude_none=True,
        responses={500: {"description": ERROR_MESSAGE, "content": {"text/plain": {}}}},
    )
    async def get_colors():
        try:
            result = await provider(config)
        except Exception:
            logger.exception("Error fetching colors from Colormind API")
            return PlainTextResponse(ERROR_MESSAGE, status_code=500)

        if not result.ok:
            logger.error(
                "Error fetching colors from Colormind API: reason=%s attempts=%d error=%s",
                result.reason.value if result.reason else None,
                result.attempts,
                result.error,
            )
            return PlainTextResponse(ERROR_MESSAGE, status_code=500)

        return PaletteResponse.from_palette(result.unwrap())

    return app

"""
__main__.py.

Does: Process entry point. Loads ServiceConfig from the environment, configures
logging, builds the app and serves it with uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from harmony_palette.api import create_app
from harmony_palette.config import ServiceConfig

logger = logging.getLogger("harmony_palette")


def main() -> None:
    config = ServiceConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = create_app(config)
    logger.info("Server running on port %s", config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()

"""
api
===

Does: Expose the FastAPI app factory for the palette service.
"""

from .app import create_app

__all__ = ["create_app"]

"""
utils package.
=============

Does: Shared helpers (topic-filtered debug logging) used across the service.
"""

from .log import debug, reload_topics

__all__ = ["debug", "reload_topics"]

__docformat__ = "google"

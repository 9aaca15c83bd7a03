"""
TubeVault - YouTube catalog cache and channel review layer

Caches quota-limited YouTube Data API searches in SQLite, enriches search
stubs with batch detail lookups, classifies videos for safe playback and
guards LLM channel reviews behind a durable cache.
"""

__version__ = "0.1.0"
__author__ = "TubeVault Team"

from .core import StatisticsCollector

__all__ = [
    "StatisticsCollector",
]

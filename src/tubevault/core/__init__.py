"""
Core components for TubeVault.
"""

from .statistics import StatisticsCollector

__all__ = ["StatisticsCollector"]

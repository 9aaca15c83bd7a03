"""TubeVault Shared Module.

This package contains shared constants, error handling and logging used across TubeVault.
"""

__all__ = ["constants", "errors", "logging"]

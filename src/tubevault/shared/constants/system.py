"""
System Configuration Constants

Application metadata, time units and default file locations.
"""

# Base time units (milliseconds, matching the epoch-ms timestamps in the cache)
BASE_MILLISECOND = 1
BASE_SECOND_MS = 1000 * BASE_MILLISECOND
BASE_MINUTE_MS = 60 * BASE_SECOND_MS
BASE_HOUR_MS = 60 * BASE_MINUTE_MS


class Application:
    """Application metadata constants."""

    NAME = "TubeVault"
    VERSION = "0.1.0"


class FileSystem:
    """File system related constants."""

    HOME_DIR = ".tubevault"
    CONFIG_FILE = "config.toml"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "WARNING"

"""Configuration constants.

Values here are not user-configurable. For configurable values, see models.py.
"""

DEFAULT_INCLUDE_PATTERN = r'#include\s+"([^"]+)"'
"""Quoted includes only. Angle-bracket system includes stay ordinary text."""

MAX_DEPTH_LIMIT = 256
"""Hard cap for resolve.max_depth. Resolve and flatten recurse once per nesting level."""

CONFIG_DIR_NAME = ".unfurl"
"""Per-project config directory, looked up from the root file upward."""

CONFIG_FILE_NAME = "config.yaml"

ENV_PREFIX = "UNFURL__"

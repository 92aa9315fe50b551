"""
Constants for cdmark.

These constants are used by various modules for sensible defaults.
Several are also available via the config system.
"""

# Persisted line format: kind|name|path
FIELD_DELIMITER = "|"
ESCAPE_CHAR = "\\"
FIELD_COUNT = 3

# Kind tags as written to disk
KIND_NORMAL_TAG = "0"
KIND_BOUND_TAG = "1"

# Appended to the kind tag on lines whose fields use backslash escapes
ESCAPED_MARKER = "e"

# Files
DEFAULT_BOOKMARK_FILE = "~/.dir_bookmarks"
USER_CONFIG_DIR = "~/.config/cdmark"
USER_CONFIG_NAME = "config.toml"
LOCAL_CONFIG_NAMES = ("cdmark.toml", ".cdmarkrc")

# Environment
ENV_PREFIX = "CDMARK_"

# Display
PATH_FORMATS = ("absolute", "relative")
SUPPORTED_SHELLS = ("bash", "zsh")

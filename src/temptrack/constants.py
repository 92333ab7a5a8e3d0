"""Centralized constants for temptrack."""

import os

# Default name prefixes per resource type
DIR_PREFIX = "d-"
FILE_PREFIX = "f-"
STREAM_PREFIX = "s-"

# Permissions
DIR_MODE = 0o700
FILE_MODE = 0o600

# Exclusive create + truncate + read-write
RDWR_EXCL = os.O_CREAT | os.O_TRUNC | os.O_RDWR | os.O_EXCL | getattr(os, "O_BINARY", 0)

# Removal
DEFAULT_MAX_BUSY_TRIES = 6
BUSY_RETRY_DELAY = 0.1  # seconds, multiplied by the attempt number

# Random component of generated names
RANDOM_NAME_SPACE = 0x100000000

# Environment variables
ENV_DIR = "TEMPTRACK_DIR"
ENV_TRACK = "TEMPTRACK_TRACK"
ENV_MAX_BUSY_TRIES = "TEMPTRACK_MAX_BUSY_TRIES"
ENV_HANDLE_SIGTERM = "TEMPTRACK_HANDLE_SIGTERM"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_HANDLER = "console"  # console or file
DEFAULT_LOG_FILE = "temptrack.log"

"""Constants used across the shedoc package."""

from __future__ import annotations

import re

from .config import ShedocConfig

DEFAULT_CONFIG = ShedocConfig()

# Line shapes
SHEBANG_PATTERN = re.compile(r"^#!(.+)$")
META_INLINE_PATTERN = re.compile(r"^#\?/(\w+)\s+(.+)$", re.ASCII)
META_OPEN_PATTERN = re.compile(r"^#\?/(\w+)\s*$", re.ASCII)
BLOCK_OPEN_PATTERN = re.compile(r"^#@/(\w*)\s*(.*)$", re.ASCII)
CONTINUATION_PATTERN = re.compile(r"^ # ?(.*)$")
BLOCK_CLOSE_PATTERN = re.compile(r"^ ##\s*$")
FUNCTION_KEYWORD_PATTERN = re.compile(r"^\s*function\s+(\w[\w-]*)", re.ASCII)
FUNCTION_PAREN_PATTERN = re.compile(r"^\s*(\w[\w-]*)\s*\(\)\s*\{?", re.ASCII)

# Output defaults
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAN_SECTION = "1"
UNKNOWN_MAN_NAME = "UNKNOWN"
STDIN_SOURCE = "<stdin>"
STDIN_ARGUMENT = "-"
SUPPORTED_SHELLS = ("bash", "zsh", "fish")

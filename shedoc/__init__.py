"""
shedoc: documentation parser for shell scripts.

Shedoc comments extend the shebang with two sigils: ``#?/`` for file
metadata and ``#@/`` for command, subcommand, and function documentation.
This package can be used both as a CLI tool and as a library.

CLI Usage:
    shedoc deploy.sh
    shedoc --to man deploy.sh -o deploy.1

Library Usage:
    import sys
    from shedoc import get_formatter, parse_file, register_default_formatters

    document = parse_file("deploy.sh")
    register_default_formatters()
    get_formatter("help")(sys.stdout, document)
"""

from .exceptions import (
    ConfigError,
    ParseFileError,
    RenderError,
    ShedocError,
    TagError,
    UnknownFormatError,
    ValueNotationError,
)
from .models import (
    Block,
    Deprecated,
    Document,
    Env,
    Exit,
    Flag,
    Meta,
    Operand,
    Option,
    ParseWarning,
    Reads,
    Sets,
    Stderr,
    Stdin,
    Stdout,
    Value,
    Visibility,
    Writes,
)
from .parser import parse, parse_file, parse_lines, parse_reader, parse_text
from .registry import (
    get_formatter,
    register_default_formatters,
    register_formatter,
    registered_formats,
)
from .tags import parse_tag
from .value import parse_value

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse",
    "parse_file",
    "parse_reader",
    "parse_lines",
    "parse_text",
    "parse_tag",
    "parse_value",
    # Formatters
    "get_formatter",
    "register_formatter",
    "register_default_formatters",
    "registered_formats",
    # Data models
    "Document",
    "Meta",
    "Block",
    "Visibility",
    "Value",
    "Flag",
    "Option",
    "Operand",
    "Env",
    "Reads",
    "Stdin",
    "Exit",
    "Stdout",
    "Stderr",
    "Sets",
    "Writes",
    "Deprecated",
    "ParseWarning",
    # Exceptions
    "ShedocError",
    "ParseFileError",
    "ValueNotationError",
    "TagError",
    "RenderError",
    "UnknownFormatError",
    "ConfigError",
    # Version
    "__version__",
]

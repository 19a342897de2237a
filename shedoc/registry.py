"""Output format registry.

Formatters are plain callables writing a rendered `Document` to a text
stream. The registry is filled once, by `register_default_formatters`, before
the first lookup and is only read afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TextIO

from .exceptions import UnknownFormatError
from .models import Document

Formatter = Callable[[TextIO, Document], None]

_FORMATTERS: dict[str, Formatter] = {}


def register_formatter(name: str, formatter: Formatter) -> None:
    """Register `formatter` under the format `name`, replacing any previous one."""
    _FORMATTERS[name] = formatter


def get_formatter(name: str) -> Formatter:
    """Look up the formatter registered under `name`.

    Raises:
        UnknownFormatError: If nothing is registered under `name`.

    Examples:
        get_formatter("json")(sys.stdout, document)
    """
    try:
        return _FORMATTERS[name]
    except KeyError:
        raise UnknownFormatError(name, registered_formats()) from None


def registered_formats() -> list[str]:
    """Return the registered format names in sorted order."""
    return sorted(_FORMATTERS)


def default_formatters() -> list[tuple[str, Formatter]]:
    """Return the built-in ``(name, formatter)`` pairs."""
    from .completions import format_bash_completion, format_fish_completion, format_zsh_completion
    from .helptext import format_help
    from .json_output import format_json
    from .manpage import format_man_page

    return [
        ("json", format_json),
        ("help", format_help),
        ("man", format_man_page),
        ("completion:bash", format_bash_completion),
        ("completion:zsh", format_zsh_completion),
        ("completion:fish", format_fish_completion),
    ]


def register_default_formatters() -> None:
    """Register every built-in formatter. Safe to call more than once."""
    for name, formatter in default_formatters():
        register_formatter(name, formatter)

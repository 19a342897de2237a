"""troff man page output."""

from __future__ import annotations

import datetime
from typing import TextIO

from .constants import DEFAULT_MAN_SECTION, UNKNOWN_MAN_NAME
from .helptext import first_line, format_flag_label, format_option_label
from .models import Block, Document

DEPRECATED_FALLBACK = "This command is deprecated."


def troff_escape(text: str) -> str:
    """Escape backslashes and hyphens for troff.

    Examples:
        troff_escape("--dry-run")  # "\\-\\-dry\\-run"
    """
    return text.replace("\\", "\\\\").replace("-", "\\-")


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _write_text(stream: TextIO, text: str) -> None:
    stream.write(troff_escape(text) + "\n")


def _write_term(stream: TextIO, term: str, description: str = "") -> None:
    stream.write(f".TP\n.B {troff_escape(term)}\n")
    if description:
        _write_text(stream, description)


def _write_block_flags(stream: TextIO, block: Block, nested: bool = False) -> None:
    labels = [(format_flag_label(flag.short, flag.long), flag.description) for flag in block.flags]
    labels += [
        (format_option_label(option.short, option.long, option.value), option.description)
        for option in block.options
    ]
    for label, description in labels:
        if nested:
            stream.write(".RS\n")
        _write_term(stream, label, description)
        if nested:
            stream.write(".RE\n")


def format_man_page(
    stream: TextIO, document: Document, date: datetime.date | None = None
) -> None:
    """Write `document` as a troff man page.

    Args:
        stream: Destination stream.
        document: Parsed document.
        date: Date shown in the ``.TH`` header; defaults to today.
    """
    meta = document.meta
    section = meta.section or DEFAULT_MAN_SECTION
    name = meta.name or UNKNOWN_MAN_NAME
    date = date or datetime.date.today()

    stream.write(
        f".TH {troff_escape(name.upper())} {section} "
        f"{_quote(date.isoformat())} {_quote(meta.version or '')}\n"
    )

    stream.write(".SH NAME\n")
    if meta.description:
        stream.write(f"{troff_escape(name)} \\- {troff_escape(first_line(meta.description))}\n")
    else:
        _write_text(stream, name)

    if meta.synopsis:
        stream.write(".SH SYNOPSIS\n")
        stream.write(f".B {troff_escape(meta.synopsis)}\n")

    if meta.description:
        stream.write(".SH DESCRIPTION\n")
        _write_text(stream, meta.description)

    command = document.command
    subcommands = document.subcommands

    if command is not None and (command.flags or command.options):
        stream.write(".SH OPTIONS\n")
        _write_block_flags(stream, command)

    if subcommands:
        stream.write(".SH COMMANDS\n")
        for sub in subcommands:
            stream.write(f".TP\n.B {troff_escape(sub.name or '')}\n")
            if sub.deprecated is not None:
                message = sub.deprecated.message or DEPRECATED_FALLBACK
                stream.write(f"[deprecated] {troff_escape(message)}\n")
            elif sub.description:
                _write_text(stream, sub.description)
            _write_block_flags(stream, sub, nested=True)

    if command is None:
        _write_meta_sections(stream, document)
        return

    if command.env:
        stream.write(".SH ENVIRONMENT\n")
        for env in command.env:
            _write_term(stream, env.name, env.description)

    files = [(entry.path, entry.description) for entry in [*command.reads, *command.writes]]
    if files:
        stream.write(".SH FILES\n")
        for path, description in files:
            _write_term(stream, path, description)

    if command.exit:
        stream.write(".SH EXIT STATUS\n")
        for exit in command.exit:
            _write_term(stream, exit.code, exit.description)

    _write_meta_sections(stream, document)


def _write_meta_sections(stream: TextIO, document: Document) -> None:
    meta = document.meta
    if meta.examples:
        stream.write(".SH EXAMPLES\n")
        for line in meta.examples.split("\n"):
            stream.write(".PP\n")
            stream.write(f".B {troff_escape(line)}\n")

    if meta.author:
        stream.write(".SH AUTHOR\n")
        _write_text(stream, meta.author)

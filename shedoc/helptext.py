"""``--help`` style text output."""

from __future__ import annotations

from typing import TextIO

from .models import Block, Document, Flag, Option, Value

LABEL_WIDTH = 24
DEPRECATED_PREFIX = "[deprecated] "


def first_line(text: str | None) -> str:
    """Return the first line of a possibly multi-line string."""
    if not text:
        return ""
    return text.split("\n", 1)[0]


def format_flag_label(short: str | None, long: str | None) -> str:
    """Build the label for a flag, indenting long-only flags to align with short ones.

    Examples:
        format_flag_label("-v", "--verbose")  # "-v, --verbose"
        format_flag_label(None, "--dry-run")  # "    --dry-run"
    """
    if short and long:
        return f"{short}, {long}"
    if short:
        return short
    if long:
        return f"    {long}"
    return ""


def format_option_label(short: str | None, long: str | None, value: Value) -> str:
    label = format_flag_label(short, long)
    if not label:
        return value.notation()
    return f"{label} {value.notation()}"


def subcommand_summary(block: Block) -> str:
    """One-line description of a subcommand, marking deprecated ones."""
    description = first_line(block.description)
    if block.deprecated is None:
        return description
    return DEPRECATED_PREFIX + (description or block.deprecated.message)


def _write_table(stream: TextIO, rows: list[tuple[str, str]]) -> None:
    width = max(len(key) for key, _ in rows)
    for key, description in rows:
        if description:
            stream.write(f"  {key:<{width}}  {description}\n")
        else:
            stream.write(f"  {key}\n")


def _write_labels(stream: TextIO, entries: list[Flag | Option]) -> None:
    for entry in entries:
        if isinstance(entry, Option):
            label = format_option_label(entry.short, entry.long, entry.value)
        else:
            label = format_flag_label(entry.short, entry.long)
        if entry.description:
            stream.write(f"  {label:<{LABEL_WIDTH}}{entry.description}\n")
        else:
            stream.write(f"  {label}\n")


def format_help(stream: TextIO, document: Document) -> None:
    """Write `document` as ``--help`` text.

    Sections, each only when it has content: a ``name - brief`` header,
    ``Usage:``, ``Commands:``, ``Options:``, ``Environment:`` and
    ``Exit Codes:``. Options, environment and exit codes come from the
    command block.
    """
    meta = document.meta
    if meta.name:
        if meta.description:
            stream.write(f"{meta.name} - {first_line(meta.description)}\n")
        else:
            stream.write(f"{meta.name}\n")
        stream.write("\n")

    if meta.synopsis:
        stream.write("Usage:\n")
        stream.write(f"  {meta.synopsis}\n")
        stream.write("\n")

    subcommands = document.subcommands
    if subcommands:
        stream.write("Commands:\n")
        _write_table(stream, [(sub.name or "", subcommand_summary(sub)) for sub in subcommands])
        stream.write("\n")

    command = document.command
    if command is None:
        return

    if command.flags or command.options:
        stream.write("Options:\n")
        _write_labels(stream, [*command.flags, *command.options])
        stream.write("\n")

    if command.env:
        stream.write("Environment:\n")
        _write_table(stream, [(env.name, first_line(env.description)) for env in command.env])
        stream.write("\n")

    if command.exit:
        stream.write("Exit Codes:\n")
        _write_table(stream, [(exit.code, exit.description) for exit in command.exit])
        stream.write("\n")

"""Parsers for ``@tag`` lines inside documentation blocks."""

from __future__ import annotations

from collections.abc import Callable

from .exceptions import TagError, ValueNotationError
from .models import (
    Block,
    Deprecated,
    Env,
    Exit,
    Flag,
    Operand,
    Option,
    Reads,
    Sets,
    Stderr,
    Stdin,
    Stdout,
    TagRecord,
    Writes,
)
from .value import parse_value

FLAG_SEPARATOR = "|"


def split_first_token(text: str) -> tuple[str, str]:
    """Split text into its first whitespace-delimited token and the rest.

    Examples:
        split_first_token("  VAR  the variable")  # ("VAR", " the variable")
    """
    text = text.strip()
    for index, character in enumerate(text):
        if character in " \t":
            return text[:index], text[index + 1 :]
    return text, ""


def consume_flags(text: str) -> tuple[str | None, str | None, str]:
    """Consume flag spellings from the start of `text`.

    Spellings starting with ``--`` are long, those starting with ``-`` short.
    Spellings are separated by ``|``. Consumption stops at the first token
    that is neither, so stray flag-like text without a separator ends up in
    the remainder.

    Returns:
        tuple[str | None, str | None, str]: Short spelling, long spelling and
            the remaining text.

    Examples:
        consume_flags("-v | --verbose Be chatty")  # ("-v", "--verbose", "Be chatty")
    """
    short = long = None
    text = text.strip()

    while text:
        if text.startswith("--"):
            long, text = split_first_token(text)
        elif text.startswith("-"):
            short, text = split_first_token(text)
        else:
            break
        text = text.strip()

        if not text.startswith(FLAG_SEPARATOR):
            break
        text = text[len(FLAG_SEPARATOR) :].strip()

    return short, long, text


def parse_flag(text: str, line: int) -> Flag:
    short, long, rest = consume_flags(text)
    if short is None and long is None:
        raise TagError("@flag requires at least one flag name")
    return Flag(short=short, long=long, description=rest.strip(), line=line)


def parse_option(text: str, line: int) -> Option:
    """Parse ``[-s | --long] <value> description``; the flag spellings are optional."""
    if not text.strip():
        raise TagError("@option requires at least one flag name and a value")

    short, long, rest = consume_flags(text)

    notation, description = split_first_token(rest)
    if not notation:
        raise TagError("@option requires a value notation (e.g., <value> or [value])")
    try:
        value = parse_value(notation)
    except ValueNotationError as error:
        raise TagError(f"@option value: {error}") from error

    return Option(value=value, short=short, long=long, description=description.strip(), line=line)


def parse_operand(text: str, line: int) -> Operand:
    notation, description = split_first_token(text)
    if not notation:
        raise TagError("@operand requires a value notation")
    try:
        value = parse_value(notation)
    except ValueNotationError as error:
        raise TagError(f"@operand value: {error}") from error

    return Operand(value=value, description=description.strip(), line=line)


def _require_token(tag: str, text: str, requirement: str) -> tuple[str, str]:
    token, description = split_first_token(text)
    if not token:
        raise TagError(f"@{tag} requires {requirement}")
    return token, description.strip()


def parse_env(text: str, line: int) -> Env:
    name, description = _require_token("env", text, "a variable name")
    return Env(name=name, description=description, line=line)


def parse_sets(text: str, line: int) -> Sets:
    name, description = _require_token("sets", text, "a variable name")
    return Sets(name=name, description=description, line=line)


def parse_reads(text: str, line: int) -> Reads:
    path, description = _require_token("reads", text, "a path")
    return Reads(path=path, description=description, line=line)


def parse_writes(text: str, line: int) -> Writes:
    path, description = _require_token("writes", text, "a path")
    return Writes(path=path, description=description, line=line)


def parse_exit(text: str, line: int) -> Exit:
    code, description = _require_token("exit", text, "an exit code")
    return Exit(code=code, description=description, line=line)


def parse_stdin(text: str, line: int) -> Stdin:
    return Stdin(description=text.strip(), line=line)


def parse_stdout(text: str, line: int) -> Stdout:
    return Stdout(description=text.strip(), line=line)


def parse_stderr(text: str, line: int) -> Stderr:
    return Stderr(description=text.strip(), line=line)


def parse_deprecated(text: str, line: int) -> Deprecated:
    return Deprecated(message=text.strip(), line=line)


TAG_PARSERS: dict[str, Callable[[str, int], TagRecord]] = {
    "flag": parse_flag,
    "option": parse_option,
    "operand": parse_operand,
    "env": parse_env,
    "reads": parse_reads,
    "stdin": parse_stdin,
    "exit": parse_exit,
    "stdout": parse_stdout,
    "stderr": parse_stderr,
    "sets": parse_sets,
    "writes": parse_writes,
    "deprecated": parse_deprecated,
}

# Block attribute per record type; list attributes append, the rest overwrite.
BLOCK_FIELDS: dict[type, str] = {
    Flag: "flags",
    Option: "options",
    Operand: "operands",
    Env: "env",
    Reads: "reads",
    Stdin: "stdin",
    Exit: "exit",
    Stdout: "stdout",
    Stderr: "stderr",
    Sets: "sets",
    Writes: "writes",
    Deprecated: "deprecated",
}


def parse_tag(name: str, text: str, line: int) -> TagRecord:
    """Parse the text following ``@name`` into a tag record.

    Args:
        name: Tag name without the leading ``@``.
        text: Remainder of the tag line.
        line: One-based source line number stored on the record.

    Returns:
        TagRecord: The parsed record.

    Raises:
        TagError: If the tag is unknown or its text is malformed.

    Examples:
        parse_tag("flag", "-v | --verbose Enable verbose output", 12)
    """
    parser = TAG_PARSERS.get(name)
    if parser is None:
        raise TagError(f"unknown tag @{name}")
    return parser(text, line)


def split_tag(content: str) -> tuple[str, str] | None:
    """Split a continuation line into tag name and text when it is a tag line.

    Returns:
        tuple[str, str] | None: Tag name and trimmed text, or None when the
            content does not start with ``@``.

    Examples:
        split_tag("  @exit 0  Success")  # ("exit", "0  Success")
    """
    trimmed = content.strip()
    if not trimmed.startswith("@"):
        return None
    rest = trimmed[1:]
    for index, character in enumerate(rest):
        if character in " \t":
            return rest[:index], rest[index + 1 :].strip()
    return rest, ""


def attach_tag(block: Block, record: TagRecord) -> None:
    """Store a finished tag record on its block field."""
    field_name = BLOCK_FIELDS[type(record)]
    current = getattr(block, field_name)
    if isinstance(current, list):
        current.append(record)
    else:
        setattr(block, field_name, record)

"""Shedoc comment parsing.

The parser is a line-oriented state machine with three states: outside any
block (`TopState`), inside a multi-line ``#?/`` metadata value
(`MetaBlockState`) and inside a ``#@/`` documentation block
(`DocBlockState`). A line that does not fit the current block finalizes it
and is then replayed against the top-level rules.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .constants import (
    BLOCK_CLOSE_PATTERN,
    BLOCK_OPEN_PATTERN,
    CONTINUATION_PATTERN,
    FUNCTION_KEYWORD_PATTERN,
    FUNCTION_PAREN_PATTERN,
    META_INLINE_PATTERN,
    META_OPEN_PATTERN,
    SHEBANG_PATTERN,
)
from .exceptions import ParseFileError, TagError
from .filesystem import safe_read
from .models import (
    META_FIELDS,
    Block,
    DocBlockState,
    Document,
    MetaBlockState,
    ParserState,
    TopState,
    Visibility,
)
from .tags import attach_tag, parse_tag, split_tag

logger = logging.getLogger(__name__)


def parse_header(keyword: str, extra: str) -> tuple[Visibility, str | None]:
    """Interpret the visibility keyword and trailing text of a ``#@/`` line.

    Only subcommand blocks keep the trailing text, as their name. An empty or
    unrecognized keyword yields a public block.

    Examples:
        parse_header("subcommand", "push")  # (Visibility.SUBCOMMAND, "push")
        parse_header("helper", "")  # (Visibility.PUBLIC, None)
    """
    if keyword == "subcommand":
        return Visibility.SUBCOMMAND, extra or None
    if keyword == "command":
        return Visibility.COMMAND, None
    if keyword == "private":
        return Visibility.PRIVATE, None
    return Visibility.PUBLIC, None


def match_function(line: str) -> str | None:
    """Return the function name declared on `line`, if any.

    Examples:
        match_function("cmd_push() {")  # "cmd_push"
        match_function("function deploy")  # "deploy"
    """
    match = FUNCTION_KEYWORD_PATTERN.match(line)
    if match is None:
        match = FUNCTION_PAREN_PATTERN.match(line)
    return match.group(1) if match else None


def _warn(document: Document, line_number: int, message: str) -> None:
    logger.debug("line %d: %s", line_number, message)
    document.warn(line_number, message)


def _set_meta(document: Document, tag: str, value: str, line_number: int) -> None:
    if tag not in META_FIELDS:
        _warn(document, line_number, f"unknown shedoc tag: #?/{tag}")
        return
    setattr(document.meta, tag, value)


def _bind_function(document: Document, name: str) -> None:
    if document.blocks and document.blocks[-1].function_name is None:
        document.blocks[-1].function_name = name


def _finalize_tag(state: DocBlockState) -> None:
    """Attach the pending tag, with its continuation text, to the block."""
    if state.pending is not None:
        if state.continuation:
            state.pending.extend(" ".join(state.continuation))
        attach_tag(state.block, state.pending)
    state.pending = None
    state.continuation = []


def finalize(state: ParserState, document: Document, line_number: int) -> TopState:
    """Close whatever accumulation `state` holds and return to the top level.

    Args:
        state: Current parser state.
        document: Document receiving finalized metadata and blocks.
        line_number: Line at which the accumulation ends, used for warnings.

    Returns:
        TopState: The top-level state.
    """
    if isinstance(state, MetaBlockState):
        _set_meta(document, state.tag, "\n".join(state.lines), line_number)
    elif isinstance(state, DocBlockState):
        _finalize_tag(state)
        if state.description_lines:
            state.block.description = "\n".join(state.description_lines)
        document.blocks.append(state.block)
    return TopState()


def handle_top(line: str, line_number: int, document: Document) -> ParserState:
    """Apply the top-level rules to `line`.

    Returns:
        ParserState: The state to use for the next line.
    """
    match = SHEBANG_PATTERN.match(line)
    if match:
        document.shebang = match.group(1).strip()
        return TopState()

    match = META_INLINE_PATTERN.match(line)
    if match:
        _set_meta(document, match.group(1), match.group(2).strip(), line_number)
        return TopState()

    match = META_OPEN_PATTERN.match(line)
    if match:
        return MetaBlockState(tag=match.group(1))

    match = BLOCK_OPEN_PATTERN.match(line)
    if match:
        visibility, name = parse_header(match.group(1), match.group(2).strip())
        return DocBlockState(block=Block(visibility=visibility, name=name, line=line_number))

    name = match_function(line)
    if name:
        _bind_function(document, name)
    return TopState()


def handle_meta_block(
    state: MetaBlockState, line: str, line_number: int, document: Document
) -> ParserState:
    """Accumulate a multi-line metadata value.

    Returns:
        ParserState: `state` while the value continues, otherwise the state
            produced by the top-level rules.
    """
    if BLOCK_CLOSE_PATTERN.match(line):
        return finalize(state, document, line_number)

    match = CONTINUATION_PATTERN.match(line)
    if match:
        state.lines.append(match.group(1))
        return state

    # Interrupted: close the value and replay the line at the top level.
    finalize(state, document, line_number)
    return handle_top(line, line_number, document)


def handle_doc_block(
    state: DocBlockState, line: str, line_number: int, document: Document
) -> ParserState:
    """Accumulate a documentation block.

    Returns:
        ParserState: `state` while the block continues, otherwise the state
            produced by the top-level rules.
    """
    if BLOCK_CLOSE_PATTERN.match(line):
        return finalize(state, document, line_number)

    match = CONTINUATION_PATTERN.match(line)
    if match is None:
        # Interrupted: close the block and replay the line at the top level.
        finalize(state, document, line_number)
        return handle_top(line, line_number, document)

    content = match.group(1)

    tag = split_tag(content)
    if tag is not None:
        _finalize_tag(state)
        state.in_tags = True
        name, text = tag
        try:
            state.pending = parse_tag(name, text, line_number)
        except TagError as error:
            _warn(document, line_number, str(error))
        return state

    if content == "":
        _finalize_tag(state)
    elif state.pending is not None:
        if content.strip():
            state.continuation.append(content.strip())
    elif not state.in_tags:
        state.description_lines.append(content)
    return state


def step(state: ParserState, line: str, line_number: int, document: Document) -> ParserState:
    """Feed a single line (without its line ending) to the state machine."""
    if isinstance(state, MetaBlockState):
        return handle_meta_block(state, line, line_number, document)
    if isinstance(state, DocBlockState):
        return handle_doc_block(state, line, line_number, document)
    return handle_top(line, line_number, document)


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_lines(lines: Iterable[str]) -> Document:
    """Parse shedoc comments from an iterable of lines.

    Unterminated blocks at the end of input are finalized as if they had
    been closed. Malformed documentation never raises; each problem is
    recorded as a warning on the returned document.

    Args:
        lines: Source lines, with or without line endings.

    Returns:
        Document: The parsed document.

    Examples:
        parse_lines(["#!/bin/bash", "#?/name greet"]).meta.name  # "greet"
    """
    document = Document()
    state: ParserState = TopState()
    line_number = 0

    for line_number, line in enumerate(lines, start=1):
        state = step(state, _strip_line_ending(line), line_number, document)

    finalize(state, document, line_number)
    return document


def parse_reader(stream: Iterable[str]) -> Document:
    """Parse shedoc comments from an open text stream.

    The caller owns the stream and is responsible for closing it.
    """
    return parse_lines(stream)


def parse_text(content: str) -> Document:
    """Parse shedoc comments from a string."""
    return parse_lines(io.StringIO(content))


def parse_file(filepath: str | os.PathLike[str]) -> Document:
    """Parse shedoc comments from a shell script on disk.

    Args:
        filepath: Path to the script.

    Returns:
        Document: The parsed document with `path` set to `filepath`.

    Raises:
        ParseFileError: If the file cannot be opened, read, or decoded.

    Examples:
        document = parse_file("deploy.sh")
    """
    try:
        with safe_read(Path(filepath)) as stream:
            document = parse_reader(stream)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    document.path = os.fspath(filepath)
    logger.debug(
        "parsed %s: %d blocks, %d warnings",
        document.path,
        len(document.blocks),
        len(document.warnings),
    )
    return document


parse = parse_file

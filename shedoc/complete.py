"""Dynamic completion: candidates for a command line typed so far, and shell setup snippets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constants import SUPPORTED_SHELLS
from .exceptions import RenderError
from .helptext import first_line
from .models import Block, Document


@dataclass
class Candidate:
    """A completion word and its description.

    Attributes:
        word: Text offered to the shell.
        description: Short help shown by shells that support it (fish).
    """

    word: str
    description: str = ""


def flag_candidates(block: Block) -> list[Candidate]:
    """Return candidates for every flag and option spelling of `block`."""
    candidates = []
    for entry in [*block.flags, *block.options]:
        if entry.short:
            candidates.append(Candidate(entry.short, entry.description))
        if entry.long:
            candidates.append(Candidate(entry.long, entry.description))
    return candidates


def is_value_option(word: str, *blocks: Block | None) -> bool:
    """Check whether `word` names an option that expects a value in any of `blocks`."""
    for block in blocks:
        if block is None:
            continue
        for option in block.options:
            if word in (option.short, option.long):
                return True
    return False


def completion_candidates(document: Document, comp_line: str, comp_point: int) -> list[Candidate]:
    """Determine completions for the command line typed so far.

    Args:
        document: Parsed script documentation.
        comp_line: Full command line, as in ``COMP_LINE``.
        comp_point: Cursor offset into `comp_line`, as in ``COMP_POINT``.

    Returns:
        list[Candidate]: Matching candidates; empty when nothing applies,
            including right after an option that expects a value.

    Examples:
        completion_candidates(document, "deploy pu", 9)  # [Candidate("push", ...)]
    """
    if comp_point < len(comp_line):
        comp_line = comp_line[:comp_point]

    words = comp_line.split()
    ends_with_space = comp_line.endswith(" ")

    current = ""
    if not ends_with_space:
        if len(words) == 1:
            # Only the command name, partially typed.
            return []
        if len(words) > 1:
            current = words.pop()

    # words[0] is the command name itself.
    words = words[1:]

    command = document.command
    subcommands = document.subcommands
    if command is None and not subcommands:
        return []

    matched = None
    for word in words:
        matched = next((sub for sub in subcommands if sub.name == word), None)
        if matched is not None:
            break

    if words and is_value_option(words[-1], command, matched):
        return []

    candidates: list[Candidate] = []
    if matched is not None:
        candidates.extend(flag_candidates(matched))
    else:
        for sub in subcommands:
            description = first_line(sub.description)
            if sub.deprecated is not None:
                description = "[deprecated] " + sub.deprecated.message
            candidates.append(Candidate(sub.name or "", description))
    if command is not None:
        candidates.extend(flag_candidates(command))

    if current:
        return [candidate for candidate in candidates if candidate.word.startswith(current)]
    return candidates


def format_candidates(candidates: list[Candidate], shell: str) -> str:
    """Render candidates for the shell: ``word<TAB>description`` for fish, bare words otherwise."""
    lines = []
    for candidate in candidates:
        if shell == "fish":
            description = candidate.description.replace("\t", " ")
            lines.append(f"{candidate.word}\t{description}")
        else:
            lines.append(candidate.word)
    return "".join(f"{line}\n" for line in lines)


def command_name(document: Document, script_path: Path) -> str:
    """Name the command after ``#?/name``, falling back to the script's file stem."""
    return document.meta.name or script_path.stem


def setup_script(document: Document, script_path: Path, shell: str) -> str:
    """Build the snippet that registers dynamic completion with a shell.

    Args:
        document: Parsed script documentation.
        script_path: Path to the script; made absolute in the snippet.
        shell: One of ``bash``, ``zsh`` or ``fish``.

    Returns:
        str: Shell code to evaluate once in the user's shell.

    Raises:
        RenderError: If `shell` is not supported.
    """
    if shell not in SUPPORTED_SHELLS:
        raise RenderError(
            f"unsupported shell: {shell!r} (supported: {', '.join(SUPPORTED_SHELLS)})"
        )

    absolute = script_path.absolute()
    name = command_name(document, script_path)

    if shell == "bash":
        return f'complete -C "shedoc complete {absolute}" {name}\n'

    if shell == "zsh":
        function_name = "_" + name.replace("-", "_") + "_shedoc"
        return (
            f"{function_name}() {{\n"
            "  local COMP_LINE COMP_POINT\n"
            '  COMP_LINE="${words[*]}"\n'
            "  COMP_POINT=${#COMP_LINE}\n"
            "  local completions\n"
            f'  completions=($(COMP_LINE="$COMP_LINE" COMP_POINT="$COMP_POINT" '
            f"shedoc complete {absolute}))\n"
            "  compadd -a completions\n"
            "}\n"
            f"compdef {function_name} {name}\n"
        )

    return (
        f"complete -c {name} -a '(COMP_LINE=(commandline) COMP_POINT=(commandline -C) "
        f"shedoc complete --shell fish {absolute})'\n"
    )

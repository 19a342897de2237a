"""Static shell completion scripts for bash, zsh, and fish."""

from __future__ import annotations

from typing import TextIO

from .exceptions import RenderError
from .helptext import subcommand_summary
from .models import Block, Document


def _require_name(document: Document) -> str:
    if not document.meta.name:
        raise RenderError("completion generation requires #?/name")
    return document.meta.name


def collect_flags(block: Block | None) -> list[str]:
    """Return every flag and option spelling of `block`, short before long.

    Examples:
        collect_flags(block)  # ["-v", "--verbose", "-c", "--config"]
    """
    if block is None:
        return []
    words = []
    for entry in [*block.flags, *block.options]:
        if entry.short:
            words.append(entry.short)
        if entry.long:
            words.append(entry.long)
    return words


def format_bash_completion(stream: TextIO, document: Document) -> None:
    """Write a bash completion function registered with ``complete -F``.

    Raises:
        RenderError: If the document has no ``#?/name``.
    """
    name = _require_name(document)
    function_name = name.replace("-", "_")
    subcommands = document.subcommands
    global_flags = collect_flags(document.command)

    stream.write(f"# bash completion for {name}\n")
    stream.write(f"_{function_name}() {{\n")
    stream.write("  local cur prev words cword\n")
    stream.write("  _init_completion || return\n")
    stream.write("\n")

    if subcommands:
        sub_names = [sub.name or "" for sub in subcommands]
        stream.write(f'  local commands="{" ".join(sub_names)}"\n')
        stream.write("\n")

        stream.write("  # Complete subcommand-specific flags\n")
        stream.write("  local i cmd\n")
        stream.write("  for ((i=1; i < cword; i++)); do\n")
        stream.write('    case "${words[i]}" in\n')
        for sub in subcommands:
            sub_flags = collect_flags(sub)
            if sub_flags:
                stream.write(f"      {sub.name})\n")
                stream.write(
                    f'        COMPREPLY=($(compgen -W "{" ".join(sub_flags)}" -- "$cur"))\n'
                )
                stream.write("        return\n")
                stream.write("        ;;\n")
        stream.write("    esac\n")
        stream.write("  done\n")
        stream.write("\n")

        words = " ".join([*sub_names, *global_flags])
        stream.write(f'  COMPREPLY=($(compgen -W "{words}" -- "$cur"))\n')
    elif global_flags:
        stream.write(f'  COMPREPLY=($(compgen -W "{" ".join(global_flags)}" -- "$cur"))\n')

    stream.write("}\n\n")
    stream.write(f"complete -F _{function_name} {name}\n")


def _zsh_escape(text: str) -> str:
    return text.replace("'", "'\\''")


def zsh_arguments(block: Block | None) -> list[str]:
    """Build ``_arguments`` specs for the flags and options of `block`.

    Examples:
        zsh_arguments(block)  # ["'(-v --verbose)'{-v,--verbose}'[Verbose]'"]
    """
    if block is None:
        return []
    specs = []
    entries = [(flag, "") for flag in block.flags]
    entries += [(option, f":{option.value.name}:") for option in block.options]
    for entry, value_spec in entries:
        description = _zsh_escape(entry.description)
        if entry.short and entry.long:
            specs.append(
                f"'({entry.short} {entry.long})'{{{entry.short},{entry.long}}}"
                f"'[{description}]{value_spec}'"
            )
        elif entry.long or entry.short:
            specs.append(f"'{entry.long or entry.short}[{description}]{value_spec}'")
    return specs


def _write_continued(stream: TextIO, lines: list[str], indent: str) -> None:
    for index, line in enumerate(lines):
        suffix = " \\" if index < len(lines) - 1 else ""
        stream.write(f"{indent}{line}{suffix}\n")


def format_zsh_completion(stream: TextIO, document: Document) -> None:
    """Write a zsh ``#compdef`` completion function.

    Raises:
        RenderError: If the document has no ``#?/name``.
    """
    name = _require_name(document)
    subcommands = document.subcommands
    command = document.command

    stream.write(f"#compdef {name}\n\n")
    stream.write(f"_{name}() {{\n")

    if not subcommands:
        specs = zsh_arguments(command)
        if specs:
            stream.write("  _arguments -s \\\n")
            _write_continued(stream, specs, "    ")
        else:
            stream.write("  _arguments -s\n")
        stream.write("}\n\n")
        stream.write(f"_{name}\n")
        return

    stream.write("  local -a global_args\n")
    stream.write("  global_args=(\n")
    for spec in zsh_arguments(command):
        stream.write(f"    {spec}\n")
    stream.write("    '1:command:->commands'\n")
    stream.write("    '*::arg:->args'\n")
    stream.write("  )\n\n")

    stream.write("  _arguments -s $global_args\n\n")
    stream.write("  case $state in\n")
    stream.write("    commands)\n")
    stream.write("      local -a commands\n")
    stream.write("      commands=(\n")
    for sub in subcommands:
        stream.write(f"        '{sub.name}:{_zsh_escape(subcommand_summary(sub))}'\n")
    stream.write("      )\n")
    stream.write("      _describe 'command' commands\n")
    stream.write("      ;;\n")

    stream.write("    args)\n")
    stream.write("      case $words[1] in\n")
    for sub in subcommands:
        specs = zsh_arguments(sub)
        if specs:
            stream.write(f"        {sub.name})\n")
            stream.write("          _arguments -s \\\n")
            _write_continued(stream, specs, "            ")
            stream.write("          ;;\n")
    stream.write("      esac\n")
    stream.write("      ;;\n")
    stream.write("  esac\n")

    stream.write("}\n\n")
    stream.write(f"_{name}\n")


def fish_escape(text: str) -> str:
    """Escape single quotes for a single-quoted fish string."""
    return text.replace("'", "\\'")


def _write_fish_entries(
    stream: TextIO, command_name: str, block: Block, condition: str | None
) -> None:
    entries = [(flag, False) for flag in block.flags]
    entries += [(option, True) for option in block.options]
    for entry, takes_value in entries:
        if not entry.short and not entry.long:
            continue
        parts = [f"complete -c {command_name}"]
        if condition:
            parts.append(f"-n '{condition}'")
        if entry.short:
            parts.append(f"-s {entry.short[1:]}")
        if entry.long:
            parts.append(f"-l {entry.long[2:]}")
        if takes_value:
            parts.append("-r")
        if entry.description:
            parts.append(f"-d '{fish_escape(entry.description)}'")
        stream.write(" ".join(parts) + "\n")


def format_fish_completion(stream: TextIO, document: Document) -> None:
    """Write fish ``complete`` commands.

    Raises:
        RenderError: If the document has no ``#?/name``.
    """
    name = _require_name(document)
    subcommands = document.subcommands
    command = document.command

    stream.write(f"# fish completion for {name}\n\n")

    if command is not None:
        condition = "__fish_use_subcommand" if subcommands else None
        _write_fish_entries(stream, name, command, condition)

    if subcommands:
        stream.write("\n")
        stream.write("# Subcommands\n")
        for sub in subcommands:
            line = f"complete -c {name} -n '__fish_use_subcommand' -a {sub.name}"
            summary = subcommand_summary(sub)
            if summary:
                line += f" -d '{fish_escape(summary)}'"
            stream.write(line + "\n")

        for sub in subcommands:
            if not sub.flags and not sub.options:
                continue
            stream.write("\n")
            stream.write(f"# {sub.name} subcommand\n")
            _write_fish_entries(stream, name, sub, f"__fish_seen_subcommand_from {sub.name}")

    stream.write("\n")

"""
Parses shedoc documentation from shell scripts and renders it as JSON, help
text, man pages, or shell completion scripts.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path

import click
from .complete import completion_candidates, format_candidates, setup_script
from .config import ConfigError, build_config
from .constants import STDIN_ARGUMENT, STDIN_SOURCE, SUPPORTED_SHELLS
from .exceptions import ParseFileError, RenderError, UnknownFormatError
from .filesystem import enforce_file_size, get_max_file_size, write_output
from .json_output import format_json_line
from .models import META_FIELDS, Document
from .parser import parse_file, parse_reader
from .registry import get_formatter, register_default_formatters

__all__ = ["cli"]

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "render"


class DefaultCommandGroup(click.Group):
    """Group that falls back to `DEFAULT_COMMAND` when no subcommand is named.

    This keeps ``shedoc deploy.sh`` working next to ``shedoc complete deploy.sh``.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        passthrough = {"--version", *self.get_help_option_names(ctx)}
        if not args or (args[0] not in self.commands and args[0] not in passthrough):
            args = [DEFAULT_COMMAND, *args]
        return super().parse_args(ctx, args)


@click.group(cls=DefaultCommandGroup)
@click.version_option(package_name="shedoc")
def cli():
    """Parse and output shell script documentation."""
    register_default_formatters()


def _parse_inputs(files: tuple[str, ...], max_file_size: int) -> list[Document]:
    documents = []
    for argument in files:
        if argument == STDIN_ARGUMENT:
            with click.open_file(STDIN_ARGUMENT) as stream:
                documents.append(parse_reader(stream))
            continue

        try:
            enforce_file_size(Path(argument), max_file_size)
            documents.append(parse_file(argument))
        except (IOError, ParseFileError) as error:
            raise click.ClickException(f"failed to parse {argument}: {error}") from error
    return documents


def _report_warnings(documents: list[Document]) -> None:
    for document in documents:
        source = document.path or STDIN_SOURCE
        for warning in document.warnings:
            click.echo(f"{source}:{warning.line}: warning: {warning.message}", err=True)


def _extract_meta(documents: list[Document], tag: str) -> str:
    if tag not in META_FIELDS:
        raise click.BadParameter(f"unknown tag: {tag!r}", param_hint="'--get'")
    values = [getattr(document.meta, tag) for document in documents]
    return "".join(f"{value}\n" for value in values if value)


def _render(documents: list[Document], format_name: str) -> str:
    if format_name != "json" and len(documents) > 1:
        raise click.ClickException(
            f"format {format_name!r} supports a single file; got {len(documents)}"
        )

    try:
        formatter = get_formatter(format_name)
    except UnknownFormatError as error:
        raise click.BadParameter(str(error), param_hint="'--to'") from error

    buffer = io.StringIO()
    try:
        if len(documents) == 1:
            formatter(buffer, documents[0])
        else:
            for document in documents:
                format_json_line(buffer, document)
    except RenderError as error:
        raise click.ClickException(str(error)) from error
    return buffer.getvalue()


@cli.command(DEFAULT_COMMAND)
@click.option(
    "-t",
    "--to",
    "to_format",
    help="Output format (json, help, man, completion:bash, completion:zsh, completion:fish)",
)
@click.option("-g", "--get", "get_tag", help="Extract a single #?/ tag value")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write output to a file instead of stdout",
)
@click.option("-w", "--warnings", "include_warnings", is_flag=True, help="Include warnings in output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress warnings on stderr")
@click.argument("files", nargs=-1, required=True)
def render(
    files: tuple[str, ...],
    to_format: str | None = None,
    get_tag: str | None = None,
    output: Path | None = None,
    include_warnings: bool = False,
    quiet: bool = False,
):
    """
    Parse FILES (``-`` for stdin) and write their documentation.

    Args:
        files: Shell scripts to parse; ``-`` reads standard input.
        to_format: Output format name; defaults to the configured format.
        get_tag: Metadata tag whose value is printed instead of a rendering.
        output: Optional file receiving the output.
        include_warnings: Keep parse warnings in the rendered output.
        quiet: Do not report parse warnings on stderr.

    Raises:
        click.UsageError: If ``--to`` and ``--get`` are combined.
        click.BadParameter: If the format, tag, or configuration is invalid.
        click.ClickException: If a file cannot be parsed or rendered, or the
            output cannot be written.

    Examples:
        shedoc --to man deploy.sh -o deploy.1
    """
    if to_format is not None and get_tag is not None:
        raise click.UsageError("--to and --get are mutually exclusive")

    try:
        config = build_config(
            Path.cwd(),
            format=to_format,
            warnings=include_warnings or None,
            quiet=quiet or None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    documents = _parse_inputs(files, max_file_size)

    if not config.quiet:
        _report_warnings(documents)

    if not config.warnings:
        for document in documents:
            document.warnings = []

    if get_tag is not None:
        text = _extract_meta(documents, get_tag)
    else:
        text = _render(documents, config.format)

    if output is None:
        click.echo(text, nl=False)
        return

    try:
        write_output(output, text)
    except IOError as error:
        raise click.ClickException(str(error)) from error


@cli.command("complete")
@click.option(
    "--shell",
    type=click.Choice(["bash", "fish"]),
    help="Output format for handler mode  [default: bash]",
)
@click.option(
    "--setup",
    type=click.Choice(list(SUPPORTED_SHELLS)),
    help="Output shell registration code",
)
@click.argument("script", type=click.Path(dir_okay=False, path_type=Path))
def complete(script: Path, shell: str | None = None, setup: str | None = None):
    """
    Dynamic shell completion for shedoc-annotated scripts.

    \b
    Handler mode (invoked at tab-press time by the shell):
        shedoc complete deploy.sh
        shedoc complete --shell fish deploy.sh

    \b
    Setup mode (run once to configure your shell):
        shedoc complete --setup bash deploy.sh
    """
    if shell is not None and setup is not None:
        raise click.UsageError("--shell and --setup are mutually exclusive")

    if setup is not None:
        try:
            document = parse_file(script)
        except ParseFileError as error:
            raise click.ClickException(f"failed to parse {script}: {error}") from error
        click.echo(setup_script(document, script, setup), nl=False)
        return

    comp_line = os.environ.get("COMP_LINE", "")
    if not comp_line:
        return

    comp_point = len(comp_line)
    try:
        comp_point = int(os.environ.get("COMP_POINT", comp_point))
    except ValueError:
        logger.debug("ignoring malformed COMP_POINT")

    try:
        document = parse_file(script)
    except ParseFileError as error:
        # Errors would be inserted into the user's command line; stay silent.
        logger.debug("completion skipped: %s", error)
        return

    candidates = completion_candidates(document, comp_line, comp_point)
    click.echo(format_candidates(candidates, shell or "bash"), nl=False)


if __name__ == "__main__":
    cli()

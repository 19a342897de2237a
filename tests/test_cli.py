from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from shedoc.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_json_by_default(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = data_dir / "standalone.sh"

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["path"] == str(target)
    assert data["meta"] == {"name": "greet", "version": "1.0.0"}
    assert data["blocks"][0]["visibility"] == "command"


def test_cli_json_for_multiple_files_is_one_line_each(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(
        cli, [str(data_dir / "standalone.sh"), str(data_dir / "library.sh")]
    )

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert [json.loads(line)["meta"]["name"] for line in lines] == ["greet", "string-utils"]


def test_cli_get_extracts_metadata(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(
        cli, ["--get", "version", str(data_dir / "comprehensive.sh"), str(data_dir / "library.sh")]
    )

    assert result.exit_code == 0
    assert result.stdout == "2.1.0\n1.0.0\n"


def test_cli_get_skips_missing_values(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-g", "author", str(data_dir / "library.sh")])

    assert result.exit_code == 0
    assert result.stdout == ""


def test_cli_get_rejects_unknown_tag(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--get", "colour", str(data_dir / "library.sh")])

    assert result.exit_code == 2
    assert "unknown tag: 'colour'" in result.output


def test_cli_to_and_get_are_mutually_exclusive(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(
        cli, ["--to", "help", "--get", "name", str(data_dir / "library.sh")]
    )

    assert result.exit_code == 2
    assert "--to and --get are mutually exclusive" in result.output


def test_cli_renders_help(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--to", "help", str(data_dir / "comprehensive.sh")])

    assert result.exit_code == 0
    assert result.stdout.startswith("deploy - A deployment tool")
    assert "Commands:\n  push      Deploys" in result.stdout


def test_cli_renders_man_page(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-t", "man", str(data_dir / "comprehensive.sh")])

    assert result.exit_code == 0
    assert result.stdout.startswith(".TH DEPLOY 1 ")


def test_cli_renders_completions(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = str(data_dir / "comprehensive.sh")

    bash = cli_runner.invoke(cli, ["--to", "completion:bash", target])
    zsh = cli_runner.invoke(cli, ["--to", "completion:zsh", target])
    fish = cli_runner.invoke(cli, ["--to", "completion:fish", target])

    assert bash.stdout.endswith("complete -F _deploy deploy\n")
    assert zsh.stdout.startswith("#compdef deploy\n")
    assert fish.stdout.startswith("# fish completion for deploy\n")


def test_cli_completion_requires_name(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "anon.sh",
        """
        #@/command
         # @flag -v Verbose
        """,
    )

    result = cli_runner.invoke(cli, ["--to", "completion:zsh", str(target)])

    assert result.exit_code == 1
    assert "completion generation requires #?/name" in result.output


def test_cli_rejects_unknown_format(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--to", "yaml", str(data_dir / "library.sh")])

    assert result.exit_code == 2
    assert "unknown format: 'yaml'" in result.output
    assert "completion:bash" in result.output


def test_cli_rejects_multiple_files_for_single_file_formats(
    cli_runner, data_dir, tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(
        cli, ["--to", "help", str(data_dir / "standalone.sh"), str(data_dir / "library.sh")]
    )

    assert result.exit_code == 1
    assert "format 'help' supports a single file; got 2" in result.output


def test_cli_reports_missing_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path / "missing.sh")])

    assert result.exit_code == 1
    assert "failed to parse" in result.output


def test_cli_requires_a_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [])

    assert result.exit_code == 2


def test_cli_enforces_max_file_size(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SHEDOC_MAX_FILE_SIZE", "16")

    result = cli_runner.invoke(cli, [str(data_dir / "comprehensive.sh")])

    assert result.exit_code == 1
    assert "exceeds the maximum allowed size of 16 bytes" in result.output


def test_cli_reports_warnings_on_stderr(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = str(data_dir / "edge_cases.sh")

    result = cli_runner.invoke(cli, [target])

    assert result.exit_code == 0
    assert f"{target}:3: warning: unknown shedoc tag: #?/colour\n" in result.stderr
    assert f"{target}:12: warning: unknown tag @bogus\n" in result.stderr
    assert "warnings" not in json.loads(result.stdout)


def test_cli_includes_warnings_in_output(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-w", "-q", str(data_dir / "edge_cases.sh")])

    assert result.exit_code == 0
    assert result.stderr == ""
    warnings = json.loads(result.stdout)["warnings"]
    assert [warning["line"] for warning in warnings] == [3, 9, 10, 11, 12]


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_cli_reads_stdin(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-"], input="#!/bin/sh\n#?/name piped\n#?/nope x\n")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert "path" not in data
    assert data["meta"] == {"name": "piped"}
    assert "<stdin>:3: warning: unknown shedoc tag: #?/nope\n" in result.stderr


def test_cli_writes_output_file(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "deploy.1"

    result = cli_runner.invoke(
        cli, ["--to", "man", "-o", str(output), str(data_dir / "comprehensive.sh")]
    )

    assert result.exit_code == 0
    assert result.stdout == ""
    assert output.read_text(encoding="utf-8").startswith(".TH DEPLOY 1 ")


def test_cli_reads_config_from_pyproject(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.shedoc]
        format = "help"
        quiet = true
        """,
    )

    result = cli_runner.invoke(cli, [str(data_dir / "edge_cases.sh")])

    assert result.exit_code == 0
    assert result.stdout.startswith("edge-cases - Exercises malformed")
    assert result.stderr == ""


def test_cli_flags_override_config(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.shedoc]
        format = "help"
        """,
    )

    result = cli_runner.invoke(cli, ["--to", "json", str(data_dir / "library.sh")])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["meta"]["name"] == "string-utils"


def test_cli_rejects_invalid_config(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.shedoc]
        colour = "blue"
        """,
    )

    result = cli_runner.invoke(cli, [str(data_dir / "library.sh")])

    assert result.exit_code == 2
    assert "Invalid `[tool.shedoc]` settings" in result.output


def test_cli_render_command_can_be_named(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["render", "-g", "name", str(data_dir / "library.sh")])

    assert result.exit_code == 0
    assert result.stdout == "string-utils\n"


def test_cli_help_lists_commands(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "complete" in result.stdout
    assert "render" in result.stdout


def test_complete_setup(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = data_dir / "comprehensive.sh"

    result = cli_runner.invoke(cli, ["complete", "--setup", "bash", str(target)])

    assert result.exit_code == 0
    assert result.stdout == f'complete -C "shedoc complete {target.absolute()}" deploy\n'


def test_complete_handler_mode(cli_runner, data_dir, monkeypatch):
    monkeypatch.setenv("COMP_LINE", "deploy pu")
    monkeypatch.setenv("COMP_POINT", "9")

    result = cli_runner.invoke(cli, ["complete", str(data_dir / "comprehensive.sh")])

    assert result.exit_code == 0
    assert result.stdout == "push\n"


def test_complete_handler_mode_for_fish(cli_runner, data_dir, monkeypatch):
    monkeypatch.setenv("COMP_LINE", "deploy push --d")
    monkeypatch.delenv("COMP_POINT", raising=False)

    result = cli_runner.invoke(
        cli, ["complete", "--shell", "fish", str(data_dir / "comprehensive.sh")]
    )

    assert result.exit_code == 0
    assert result.stdout == "--dry-run\tPreview changes without deploying\n"


def test_complete_handler_without_comp_line_is_silent(cli_runner, data_dir, monkeypatch):
    monkeypatch.delenv("COMP_LINE", raising=False)

    result = cli_runner.invoke(cli, ["complete", str(data_dir / "comprehensive.sh")])

    assert result.exit_code == 0
    assert result.output == ""


def test_complete_handler_ignores_unreadable_script(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("COMP_LINE", "deploy ")

    result = cli_runner.invoke(cli, ["complete", str(tmp_path / "missing.sh")])

    assert result.exit_code == 0
    assert result.output == ""


def test_complete_shell_and_setup_are_mutually_exclusive(cli_runner, data_dir):
    result = cli_runner.invoke(
        cli, ["complete", "--shell", "fish", "--setup", "fish", str(data_dir / "library.sh")]
    )

    assert result.exit_code == 2
    assert "--shell and --setup are mutually exclusive" in result.output


def test_complete_rejects_unsupported_setup_shell(cli_runner, data_dir):
    result = cli_runner.invoke(cli, ["complete", "--setup", "tcsh", str(data_dir / "library.sh")])

    assert result.exit_code == 2

from __future__ import annotations

import pytest
from click.testing import CliRunner

from denox import __version__
from denox.cli import cli


@pytest.fixture
def workspace_file(write_workspace):
    return write_workspace(
        "scripts:\n"
        "  start:\n"
        "    file: main.ts\n"
        "    allow: [net]\n"
        "  lint:\n"
        "    command: eslint .\n"
    )


def _invoke(*args: str, env: dict | None = None):
    return CliRunner().invoke(cli, ["--no-update-check", *args], env=env)


def test_run_passes_trailing_args_through(workspace_file, fake_popen) -> None:
    fake_popen.returncode = 4

    result = _invoke("--workspace", str(workspace_file), "run", "start", "--port", "8080")

    assert result.exit_code == 4
    assert fake_popen.last.cmd == ["deno", "run", "--allow-net", "main.ts", "--port", "8080"]


def test_options_after_script_name_are_not_parsed_by_denox(workspace_file, fake_popen) -> None:
    result = _invoke("--workspace", str(workspace_file), "run", "start", "--help", "-v")

    assert result.exit_code == 0
    assert fake_popen.last.cmd[-2:] == ["--help", "-v"]


def test_command_script(workspace_file, fake_popen) -> None:
    result = _invoke("--workspace", str(workspace_file), "run", "lint")

    assert result.exit_code == 0
    assert fake_popen.last.cmd == "eslint ."


def test_runtime_option_and_env_var(workspace_file, fake_popen) -> None:
    _invoke("--workspace", str(workspace_file), "--runtime", "deno-canary", "run", "start")
    assert fake_popen.last.cmd[0] == "deno-canary"

    _invoke("--workspace", str(workspace_file), "run", "start", env={"DENOX_RUNTIME": "/usr/local/bin/deno"})
    assert fake_popen.last.cmd[0] == "/usr/local/bin/deno"


def test_workspace_env_var(workspace_file, fake_popen) -> None:
    result = _invoke("run", "lint", env={"DENOX_WORKSPACE": str(workspace_file)})
    assert result.exit_code == 0
    assert fake_popen.last.cmd == "eslint ."


def test_missing_script_exits_non_zero(workspace_file, fake_popen) -> None:
    result = _invoke("--workspace", str(workspace_file), "run", "missing")

    assert result.exit_code == 1
    assert "Script 'missing' not found" in result.output
    assert fake_popen.calls == []


def test_missing_workspace_file_exits_non_zero(tmp_path, fake_popen) -> None:
    result = _invoke("--workspace", str(tmp_path / "absent.yml"), "run", "start")

    assert result.exit_code == 1
    assert "Workspace file not found" in result.output


def test_debug_flag_prints_exec_line(workspace_file, fake_popen) -> None:
    result = _invoke("--debug", "--workspace", str(workspace_file), "run", "start")

    assert result.exit_code == 0
    assert "[DEBUG] exec:" in result.output


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output

# runner.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence

from . import GITHUB_REPO_NAME, __version__
from .errors import DenoxError, ScriptNotFoundError
from .launcher import DEFAULT_RUNTIME
from .model import WorkspaceDefinition
from .router import dispatch
from .ui.console import get_console
from .upgrade import upgrade_version_message
from .workspace import load_workspace

EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def run_script(
    script_name: str,
    args: Sequence[str] = (),
    *,
    workspace: WorkspaceDefinition,
    env: Optional[Dict[str, str]] = None,
    runtime: str = DEFAULT_RUNTIME,
) -> int:
    """
    Run one script from a loaded workspace and return the child's exit code.

    Raises:
        ScriptNotFoundError: no script with that name
        DenoxError: invalid script entry, missing executable, ...
    """
    script = workspace.scripts.get(script_name)
    if script is None:
        raise ScriptNotFoundError(script_name, available=workspace.script_names())

    return dispatch(
        script_name,
        script,
        workspace.globals,
        list(args),
        env=dict(env or {}),
        runtime=runtime,
    )


def run(
    script_name: str,
    args: Sequence[str] = (),
    *,
    workspace_path: str | Path | None = None,
    cwd: str | Path = ".",
    runtime: str = DEFAULT_RUNTIME,
    check_updates: bool = True,
) -> int:
    """
    Load the workspace, run ``script_name`` and report any failure.

    This is the single place errors are caught. It never exits the process;
    the caller decides what to do with the returned exit code.

    Returns:
        The child's exit code, 1 on any reported error, 130 on Ctrl+C
    """
    console = get_console()

    try:
        workspace = load_workspace(workspace_path, cwd=cwd)
        console.print_debug(f"Loaded workspace {workspace.path} ({len(workspace.scripts)} script(s))")

        code = run_script(script_name, args, workspace=workspace, env={}, runtime=runtime)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        return EXIT_INTERRUPTED
    except PermissionError as e:
        console.print_error(
            "Permission denied",
            str(e),
            suggestion=(
                "Make sure the runtime or command is executable, or reinstall it "
                "with the correct permissions (e.g. chmod +x)."
            ),
        )
        return EXIT_ERROR
    except DenoxError as e:
        console.print_error(e.title, str(e), details=e.details, suggestion=e.suggestion)
        return EXIT_ERROR
    except Exception as e:
        console.print_exception(e)
        return EXIT_ERROR

    if check_updates:
        _check_for_updates()
    return code


def _check_for_updates() -> None:
    # Advisory only: nothing raised here may change the script's exit code.
    try:
        upgrade_version_message(__version__, GITHUB_REPO_NAME)
    except (KeyboardInterrupt, Exception) as e:
        get_console().print_debug(f"Upgrade check failed: {e!r}")

# launcher.py
from __future__ import annotations

import os
import shlex
import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

from .errors import ExecutableNotFoundError
from .model import CLIArgument
from .ui.console import get_console

DEFAULT_RUNTIME = "deno"
RUN_SUBCOMMAND = "run"
SHELL_COMMAND_NOT_FOUND = 127

TOOL_HINTS = {
    "deno": "Install Deno (https://deno.land) or fix PATH.",
    "node": "Install Node.js or fix PATH.",
    "bun": "Install Bun (https://bun.sh) or fix PATH.",
}

# Forwarded to the child while it runs. SIGINT is not in here: the terminal
# already delivers it to the whole foreground process group.
_FORWARDED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


# ----------------------------------------------------------------------
# Argument vectors
# ----------------------------------------------------------------------

def file_argv(
    file: str,
    options: Sequence[CLIArgument],
    args: Sequence[str],
    *,
    runtime: str = DEFAULT_RUNTIME,
) -> List[str]:
    """[runtime, "run", *options, file, *args]"""
    return [runtime, RUN_SUBCOMMAND, *options, file, *args]


def command_argv(command: str, args: Sequence[str]) -> List[str]:
    """[command, *args]; the command string is kept exactly as written."""
    return [command, *args]


def _shell_line(argv: Sequence[str]) -> str:
    # The command itself is shell syntax, only passthrough args get quoted.
    command, *args = argv
    return " ".join([command, *(shlex.quote(a) for a in args)])


def _child_env(env: Optional[Dict[str, str]]) -> Dict[str, str]:
    child = os.environ.copy()
    child.update(env or {})
    return child


def _exit_code(returncode: int) -> int:
    # Popen reports "killed by signal N" as -N; shells report 128 + N.
    if returncode < 0:
        return 128 - returncode
    return returncode


@contextmanager
def _forward_signals(proc: subprocess.Popen) -> Iterator[None]:
    """Forward termination signals to the child and ignore SIGINT while it runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _forward(signum, frame):
        if proc.poll() is None:
            get_console().print_debug(f"Forwarding signal {signum} to pid {proc.pid}")
            proc.send_signal(signum)

    previous = {}
    for sig in _FORWARDED_SIGNALS:
        previous[sig] = signal.signal(sig, _forward)
    previous[signal.SIGINT] = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _spawn(argv: List[str], env: Optional[Dict[str, str]], *, shell: bool) -> int:
    console = get_console()
    console.print_debug(f"exec: {argv!r} (shell={shell})")

    if shell:
        proc = subprocess.Popen(_shell_line(argv), shell=True, env=_child_env(env))
    else:
        try:
            proc = subprocess.Popen(argv, env=_child_env(env))
        except FileNotFoundError as e:
            executable = argv[0]
            raise ExecutableNotFoundError(
                executable=executable,
                hint=TOOL_HINTS.get(os.path.basename(executable)),
            ) from e

    with _forward_signals(proc):
        returncode = proc.wait()

    code = _exit_code(returncode)
    console.print_debug(f"exit: {code}")
    return code


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------

def launch_file(
    file: str,
    options: Sequence[CLIArgument],
    args: Sequence[str],
    *,
    env: Optional[Dict[str, str]] = None,
    runtime: str = DEFAULT_RUNTIME,
) -> int:
    """
    Run a source file with the runtime and wait for it.

    Args:
        file: Script file passed to ``<runtime> run``
        options: Resolved runtime flags (placed before the file)
        args: Passthrough arguments (placed after the file)
        env: Variables layered over the inherited environment
        runtime: Runtime executable name or path

    Returns:
        The child's exit code

    Raises:
        ExecutableNotFoundError: the runtime is not on PATH
        PermissionError: the runtime is not executable
    """
    return _spawn(file_argv(file, options, args, runtime=runtime), env, shell=False)


def launch_command(
    command: str,
    args: Sequence[str],
    *,
    env: Optional[Dict[str, str]] = None,
) -> int:
    """
    Run a raw command string through the shell and wait for it.

    A missing executable is reported by the shell itself (exit 127), not
    as ExecutableNotFoundError; with --debug a hint is printed as well.
    """
    code = _spawn(command_argv(command, args), env, shell=True)
    if code == SHELL_COMMAND_NOT_FOUND:
        _hint_command_not_found(command)
    return code


def _hint_command_not_found(command: str) -> None:
    words = command.split()
    executable = os.path.basename(words[0]) if words else command
    hint = TOOL_HINTS.get(executable, "Check that the command is installed and on PATH.")
    get_console().print_debug(f"Shell exited with 127, '{executable}' was probably not found. {hint}")

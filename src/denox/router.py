# router.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .errors import InvalidScriptEntryError, WorkspaceFileAndCommandSpecified, WorkspaceMissingFileOrCommand
from .launcher import DEFAULT_RUNTIME, launch_command, launch_file
from .model import WorkspaceOptions, WorkspaceScript, WorkspaceScriptCommand, WorkspaceScriptFile
from .options import normalize_options, resolve_options


def classify(script_name: str, entry: Any) -> WorkspaceScript:
    """
    Turn a raw script entry into exactly one script variant.

    ``file`` and ``command`` are checked by value: an empty string counts
    as absent, any other non-string value is rejected.

    Raises:
        InvalidScriptEntryError: ``file`` or ``command`` is not a string
        WorkspaceFileAndCommandSpecified: both are set
        WorkspaceMissingFileOrCommand: neither is set
        InvalidOptionError: a file script carries a bad option
    """
    if isinstance(entry, (WorkspaceScriptFile, WorkspaceScriptCommand)):
        return entry
    if not isinstance(entry, Mapping):
        raise WorkspaceMissingFileOrCommand(script_name)

    for key in ("file", "command"):
        value = entry.get(key)
        if value is not None and not isinstance(value, str):
            raise InvalidScriptEntryError(script_name, key, value)

    file = entry.get("file")
    command = entry.get("command")

    if file and command:
        raise WorkspaceFileAndCommandSpecified(script_name)
    if file:
        return WorkspaceScriptFile(
            file=file,
            options=normalize_options(entry, where=f"script '{script_name}'"),
        )
    if command:
        return WorkspaceScriptCommand(command=command)
    raise WorkspaceMissingFileOrCommand(script_name)


def dispatch(
    script_name: str,
    script: Union[WorkspaceScript, Mapping[str, Any]],
    global_options: Optional[WorkspaceOptions],
    args: Sequence[str],
    *,
    env: Optional[Dict[str, str]] = None,
    runtime: str = DEFAULT_RUNTIME,
) -> int:
    """Route a script to the file or command launcher and return its exit code."""
    script = classify(script_name, script)

    if isinstance(script, WorkspaceScriptFile):
        options = resolve_options(global_options, script.options)
        return launch_file(script.file, options, args, env=env, runtime=runtime)

    return launch_command(script.command, args, env=env)

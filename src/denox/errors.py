# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional


class DenoxError(Exception):
    """Base class for every error denox reports to the user."""

    title = "denox error"

    @property
    def suggestion(self) -> Optional[str]:
        return None

    @property
    def details(self) -> List[str]:
        return []


@dataclass
class WorkspaceLoadError(DenoxError):
    """The workspace file is missing, unreadable or malformed."""
    path: Optional[Path]
    message: str
    detail_lines: List[str] = field(default_factory=list)
    hint: Optional[str] = None

    title = "Could not load workspace"

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"

    @property
    def suggestion(self) -> Optional[str]:
        return self.hint

    @property
    def details(self) -> List[str]:
        return list(self.detail_lines)


@dataclass
class InvalidOptionError(DenoxError):
    """An option in the workspace is unknown or has a value of the wrong type."""
    where: str
    option: str
    message: str

    title = "Invalid option"

    def __str__(self) -> str:
        return f"{self.where}: option '{self.option}' {self.message}"


@dataclass
class ScriptNotFoundError(DenoxError):
    script_name: str
    available: List[str] = field(default_factory=list)

    title = "Script not found"

    def __str__(self) -> str:
        return f"Script '{self.script_name}' not found in workspace"

    @property
    def details(self) -> List[str]:
        if not self.available:
            return []
        return ["Available scripts:", *(f"  {name}" for name in self.available)]


@dataclass
class WorkspaceFileAndCommandSpecified(DenoxError):
    script_name: str

    title = "Invalid script"

    def __str__(self) -> str:
        return f"Script '{self.script_name}' specifies both 'file' and 'command'"

    @property
    def suggestion(self) -> Optional[str]:
        return "Keep exactly one of 'file' or 'command' in the script entry."


@dataclass
class WorkspaceMissingFileOrCommand(DenoxError):
    script_name: str

    title = "Invalid script"

    def __str__(self) -> str:
        return f"Script '{self.script_name}' must specify either 'file' or 'command'"

    @property
    def suggestion(self) -> Optional[str]:
        return "Add a 'file' to run with the runtime, or a 'command' to run in the shell."


@dataclass
class InvalidScriptEntryError(DenoxError):
    """A script's 'file' or 'command' is not a string."""
    script_name: str
    key: str
    value: Any = None

    title = "Invalid script"

    def __str__(self) -> str:
        return f"Script '{self.script_name}': '{self.key}' must be a string, got {type(self.value).__name__}"

    @property
    def suggestion(self) -> Optional[str]:
        if self.key == "command":
            return "Write the command as a single string, e.g. command: \"deno lint\"."
        return "Write the file as a single path, e.g. file: main.ts."


@dataclass
class ExecutableNotFoundError(DenoxError):
    """The executable for a script could not be found on PATH."""
    executable: str
    hint: Optional[str] = None

    title = "Executable not found"

    def __str__(self) -> str:
        return f"Could not find executable: {self.executable}"

    @property
    def suggestion(self) -> Optional[str]:
        return self.hint

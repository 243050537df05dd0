__version__ = "1.0.0"
GITHUB_REPO_NAME = "BentoumiTech/denox"

from .errors import (  # noqa: E402
    DenoxError,
    ExecutableNotFoundError,
    InvalidOptionError,
    InvalidScriptEntryError,
    ScriptNotFoundError,
    WorkspaceFileAndCommandSpecified,
    WorkspaceLoadError,
    WorkspaceMissingFileOrCommand,
)
from .model import WorkspaceDefinition, WorkspaceScriptCommand, WorkspaceScriptFile  # noqa: E402
from .options import resolve_options  # noqa: E402
from .runner import run, run_script  # noqa: E402
from .workspace import load_workspace  # noqa: E402

__all__ = [
    "__version__",
    "DenoxError",
    "ExecutableNotFoundError",
    "InvalidOptionError",
    "InvalidScriptEntryError",
    "ScriptNotFoundError",
    "WorkspaceFileAndCommandSpecified",
    "WorkspaceLoadError",
    "WorkspaceMissingFileOrCommand",
    "WorkspaceDefinition",
    "WorkspaceScriptCommand",
    "WorkspaceScriptFile",
    "resolve_options",
    "run",
    "run_script",
    "load_workspace",
]

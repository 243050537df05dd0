# workspace.py
"""
Workspace file discovery and loading.

A workspace file lives in the project root and is named one of
``WORKSPACE_FILE_NAMES``. YAML and JSON are both accepted::

    globals:
      allow: [read]
    scripts:
      start:
        file: main.ts
        allow: [net]
      lint:
        command: deno lint
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import WorkspaceLoadError
from .model import WorkspaceDefinition, WorkspaceScript
from .options import normalize_options
from .router import classify

WORKSPACE_FILE_NAMES = (
    "deno-workspace.yml",
    "deno-workspace.yaml",
    "deno-workspace.json",
)


class WorkspaceDocument(BaseModel):
    """Top-level shape of a workspace file. Script entries are classified separately."""

    model_config = ConfigDict(extra="forbid")

    scripts: Dict[str, Any]
    globals: Optional[Dict[str, Any]] = None


def find_workspace_files(cwd: str | Path = ".") -> List[Path]:
    root = Path(cwd)
    return [root / name for name in WORKSPACE_FILE_NAMES if (root / name).is_file()]


def discover_workspace(path: str | Path | None = None, cwd: str | Path = ".") -> Path:
    """
    Resolve the workspace file to load.

    Args:
        path: Explicit workspace file (from --workspace), if any
        cwd: Directory searched when no path is given

    Raises:
        WorkspaceLoadError: no file, or more than one candidate file
    """
    if path:
        workspace_path = Path(path).expanduser()
        if not workspace_path.is_file():
            raise WorkspaceLoadError(
                path=workspace_path,
                message="Workspace file not found",
                hint="Check the --workspace path or the DENOX_WORKSPACE variable.",
            )
        return workspace_path

    found = find_workspace_files(cwd)

    if not found:
        raise WorkspaceLoadError(
            path=None,
            message=f"No workspace file found in {Path(cwd).resolve()}",
            detail_lines=["Looked for:", *(f"  {name}" for name in WORKSPACE_FILE_NAMES)],
            hint="Create a deno-workspace.yml, or point to one with --workspace.",
        )

    if len(found) > 1:
        raise WorkspaceLoadError(
            path=None,
            message="Multiple workspace files found",
            detail_lines=[f"  {p.name}" for p in found],
            hint=f"Specify which one to use:\n  denox --workspace {found[0].name} run <script>",
        )

    return found[0]


def _parse(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise WorkspaceLoadError(path=path, message="Could not read workspace file", detail_lines=[str(e)]) from e

    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise WorkspaceLoadError(path=path, message="Workspace file is not valid", detail_lines=[str(e)]) from e


def parse_workspace(data: Any, path: Optional[Path] = None) -> WorkspaceDefinition:
    """
    Build a ``WorkspaceDefinition`` from an already parsed document.

    Every script entry is classified here, so malformed entries fail at
    load time rather than when the script is dispatched.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WorkspaceLoadError(path=path, message="Workspace file must contain a mapping")

    try:
        doc = WorkspaceDocument.model_validate(data)
    except ValidationError as e:
        lines = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise WorkspaceLoadError(path=path, message="Workspace file has an invalid structure", detail_lines=lines) from e

    scripts: Dict[str, WorkspaceScript] = {
        str(name): classify(str(name), entry) for name, entry in doc.scripts.items()
    }
    return WorkspaceDefinition(
        scripts=scripts,
        globals=normalize_options(doc.globals, where="globals"),
        path=path,
    )


def load_workspace(path: str | Path | None = None, cwd: str | Path = ".") -> WorkspaceDefinition:
    """Discover, read and parse the workspace file."""
    workspace_path = discover_workspace(path, cwd)
    return parse_workspace(_parse(workspace_path), workspace_path)

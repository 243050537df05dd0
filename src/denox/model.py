# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

# Option name -> option value, e.g. {"allow": ["net"], "import_map": "map.json"}
WorkspaceOptions = Mapping[str, Any]

CLIArgument = str


def _frozen(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(options or {}))


@dataclass(frozen=True)
class WorkspaceScriptFile:
    """A script that runs a source file with the runtime."""
    file: str
    options: WorkspaceOptions = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _frozen(self.options))


@dataclass(frozen=True)
class WorkspaceScriptCommand:
    """A script that runs a literal shell command. Options never apply."""
    command: str


WorkspaceScript = Union[WorkspaceScriptFile, WorkspaceScriptCommand]


@dataclass(frozen=True)
class WorkspaceDefinition:
    """
    Parsed workspace: named scripts + global options.

    Loaded once per invocation and treated as read-only afterwards.
    """
    scripts: Mapping[str, WorkspaceScript]
    globals: WorkspaceOptions = field(default_factory=dict)
    path: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "scripts", MappingProxyType(dict(self.scripts)))
        object.__setattr__(self, "globals", _frozen(self.globals))

    def script_names(self) -> list[str]:
        return sorted(self.scripts)


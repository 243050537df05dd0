"""Shared test fixtures: a recording stand-in for subprocess.Popen and workspace files.

No test starts a real process or touches the network. ``fake_popen``
records every spawn and returns a configurable exit code; the autouse
``no_network`` fixture makes the upgrade check fail fast unless a test
replaces it.
"""

from __future__ import annotations

import urllib.error
from pathlib import Path

import pytest

from denox.ui.console import Console, set_console


class FakeProcess:
    """Minimal Popen double: records how it was started and exits with ``returncode``."""

    def __init__(self, recorder: "PopenRecorder", cmd, **kwargs) -> None:
        self.cmd = cmd
        self.shell = kwargs.get("shell", False)
        self.env = kwargs.get("env")
        self.pid = 4242
        self._returncode = recorder.returncode
        self.returncode = None
        self.signals: list[int] = []

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        self.returncode = self._returncode
        return self.returncode

    def send_signal(self, signum: int) -> None:
        self.signals.append(signum)


class PopenRecorder:
    def __init__(self) -> None:
        self.calls: list[FakeProcess] = []
        self.returncode = 0
        self.raise_on_spawn: BaseException | None = None

    def __call__(self, cmd, **kwargs) -> FakeProcess:
        if self.raise_on_spawn is not None:
            raise self.raise_on_spawn
        proc = FakeProcess(self, cmd, **kwargs)
        self.calls.append(proc)
        return proc

    @property
    def last(self) -> FakeProcess:
        assert self.calls, "no process was spawned"
        return self.calls[-1]


@pytest.fixture
def fake_popen(monkeypatch: pytest.MonkeyPatch) -> PopenRecorder:
    recorder = PopenRecorder()
    monkeypatch.setattr("denox.launcher.subprocess.Popen", recorder)
    return recorder


@pytest.fixture(autouse=True)
def fresh_console():
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture(autouse=True)
def no_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def _offline(*args, **kwargs):
        raise urllib.error.URLError("network disabled in tests")

    monkeypatch.setattr("denox.upgrade.urllib.request.urlopen", _offline)


@pytest.fixture
def write_workspace(tmp_path: Path):
    """Write a workspace file into tmp_path and return its path."""

    def _write(content: str, name: str = "deno-workspace.yml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write

"""Shared fixtures for kolyn tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from kolyn.external import ToolResult


def write_skill(
    directory: Path,
    filename: str,
    frontmatter: dict[str, object] | None = None,
    body: str = "# Skill\n\nReference notes.\n",
) -> Path:
    """Write a skill file; ``frontmatter=None`` produces a plain markdown doc."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    if frontmatter is None:
        path.write_text(body)
    else:
        path.write_text(f"---\n{yaml.safe_dump(frontmatter, sort_keys=False)}---\n\n{body}")
    return path


class FakeTool:
    """ExternalTool stand-in: records calls and replays queued results."""

    def __init__(self, results: list[ToolResult] | None = None) -> None:
        self.results = list(results or [])
        self.calls: list[dict[str, object]] = []

    def run(self, args, *, cwd=None, interactive=False) -> ToolResult:
        self.calls.append({"args": list(args), "cwd": cwd, "interactive": interactive})
        if self.results:
            return self.results.pop(0)
        return ToolResult()


@pytest.fixture(autouse=True)
def kolyn_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Every test gets its own empty ~/.kolyn and English messages."""
    home = tmp_path / "kolyn-home"
    home.mkdir()
    monkeypatch.setenv("KOLYN_HOME", str(home))
    monkeypatch.delenv("KOLYN_LANG", raising=False)
    return home


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "my-app"
    root.mkdir()
    return root


@pytest.fixture
def fake_tool() -> FakeTool:
    return FakeTool()

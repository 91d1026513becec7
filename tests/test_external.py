"""Tests for external.py: subprocess wrapping."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from kolyn.external import SubprocessTool, ToolError, ToolResult


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
    result = MagicMock(spec=subprocess.CompletedProcess)
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


class TestToolResult:
    def test_ok_and_output(self):
        result = ToolResult(stdout="a\n", stderr="b\n", returncode=1)
        assert not result.ok
        assert result.output == "a\nb"


class TestSubprocessTool:
    def test_captures_output(self):
        with patch("kolyn.external.subprocess.run", return_value=_completed("hi", "", 0)) as run:
            result = SubprocessTool(timeout=5).run(["git", "status"], cwd="/repo")
        assert result == ToolResult(stdout="hi", stderr="", returncode=0)
        kwargs = run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] == 5
        assert kwargs["cwd"] == "/repo"

    def test_interactive_inherits_stdio(self):
        with patch("kolyn.external.subprocess.run", return_value=_completed(returncode=3)) as run:
            result = SubprocessTool().run(["vim", "x.md"], interactive=True)
        assert result.returncode == 3
        assert "capture_output" not in run.call_args.kwargs

    def test_missing_binary(self):
        with patch("kolyn.external.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(ToolError, match="docker binary not found"):
                SubprocessTool().run(["docker", "ps"])

    def test_timeout(self):
        err = subprocess.TimeoutExpired(cmd=["git", "clone"], timeout=1)
        with patch("kolyn.external.subprocess.run", side_effect=err):
            with pytest.raises(ToolError, match="timed out"):
                SubprocessTool(timeout=1).run(["git", "clone", "u"])

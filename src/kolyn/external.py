"""Subprocess wrapper for git, docker, and editor invocations.

Every external call goes through an ``ExternalTool``; tests substitute a fake
that records ``run()`` arguments and returns canned ``ToolResult`` values.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300


class ToolError(Exception):
    """Raised when an external binary is missing or does not finish in time."""


@dataclass(frozen=True)
class ToolResult:
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return (self.stdout + self.stderr).strip()


class ExternalTool(Protocol):
    def run(
        self,
        args: list[str],
        *,
        cwd: str | Path | None = None,
        interactive: bool = False,
    ) -> ToolResult: ...


class SubprocessTool:
    """Runs commands with ``subprocess.run``.

    In interactive mode stdin/stdout/stderr are inherited so editors, sudo and
    ``docker compose`` progress output work; the returned result then only
    carries the exit code.
    """

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    def run(
        self,
        args: list[str],
        *,
        cwd: str | Path | None = None,
        interactive: bool = False,
    ) -> ToolResult:
        logger.debug(f"Running {' '.join(args)} (cwd={cwd})")
        try:
            if interactive:
                proc = subprocess.run(args, cwd=cwd, check=False)
                return ToolResult(returncode=proc.returncode)
            proc = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                cwd=cwd,
                check=False,
            )
        except FileNotFoundError:
            raise ToolError(f"{args[0]} binary not found")
        except subprocess.TimeoutExpired:
            raise ToolError(f"{' '.join(args[:2])} timed out")
        return ToolResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)

"""Project type detection heuristics."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class ProjectType(StrEnum):
    NEXTJS = "nextjs"
    GO = "go"
    PYTHON = "python"
    NODE = "node"
    GENERIC = "generic"


_NEXT_CONFIGS = ("next.config.ts", "next.config.js", "next.config.mjs")
_PYTHON_MARKERS = ("requirements.txt", "pyproject.toml")


def detect_project_type(root: Path) -> ProjectType:
    """First match wins: Next.js before plain Node, since both have package.json."""
    if any((root / name).exists() for name in _NEXT_CONFIGS):
        return ProjectType.NEXTJS
    if (root / "go.mod").exists():
        return ProjectType.GO
    if any((root / name).exists() for name in _PYTHON_MARKERS):
        return ProjectType.PYTHON
    if (root / "package.json").exists():
        return ProjectType.NODE
    return ProjectType.GENERIC

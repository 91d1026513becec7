"""Tests for bootstrap/detector.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from kolyn.bootstrap.detector import ProjectType, detect_project_type


class TestDetectProjectType:
    @pytest.mark.parametrize(
        ("marker", "expected"),
        [
            ("next.config.mjs", ProjectType.NEXTJS),
            ("next.config.ts", ProjectType.NEXTJS),
            ("go.mod", ProjectType.GO),
            ("pyproject.toml", ProjectType.PYTHON),
            ("requirements.txt", ProjectType.PYTHON),
            ("package.json", ProjectType.NODE),
        ],
    )
    def test_markers(self, project: Path, marker: str, expected: ProjectType):
        (project / marker).write_text("")
        assert detect_project_type(project) == expected

    def test_nextjs_wins_over_node(self, project: Path):
        (project / "package.json").write_text("{}")
        (project / "next.config.js").write_text("")
        assert detect_project_type(project) == ProjectType.NEXTJS

    def test_generic_fallback(self, project: Path):
        assert detect_project_type(project) == ProjectType.GENERIC
        assert detect_project_type(project) == "generic"

"""Tests for the CLI entry point."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import write_skill

from kolyn import __version__
from kolyn.cli import build_parser, main


class TestParser:
    def test_init_flags(self):
        args = build_parser().parse_args(
            ["init", "--skill", "a", "--skill", "b", "--auto", "--capability", "ui", "--type", "go"]
        )
        assert args.skills == ["a", "b"]
        assert args.auto is True
        assert args.capabilities == ["ui"]
        assert args.project_type == "go"

    def test_services_down_volumes(self):
        args = build_parser().parse_args(["services", "down", "redis", "--volumes"])
        assert (args.services_action, args.name, args.volumes) == ("down", "redis", True)

    def test_scaffold_flags(self):
        args = build_parser().parse_args(["scaffold", "nextjs-app", "--audit", "--fix"])
        assert (args.skill, args.audit, args.fix, args.name) == ("nextjs-app", True, True, None)


class TestMain:
    def test_no_command_prints_help(self, capsys):
        with patch("sys.argv", ["kolyn"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_version_command(self, capsys):
        with patch("sys.argv", ["kolyn", "version"]):
            main()
        assert capsys.readouterr().out.strip() == f"kolyn {__version__}"

    def test_version_flag(self, capsys):
        with patch("sys.argv", ["kolyn", "-V"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_init_then_check(self, kolyn_home: Path, project: Path, monkeypatch, capsys):
        write_skill(
            kolyn_home / "skills",
            "ts.md",
            {"name": "ts", "check": {"files_exist": ["tsconfig.json"]}},
        )
        monkeypatch.chdir(project)
        with patch("sys.argv", ["kolyn", "init", "--skill", "ts"]):
            main()
        assert (project / "Agent.md").exists()

        with patch("sys.argv", ["kolyn", "check"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1

        (project / "tsconfig.json").write_text("{}")
        with patch("sys.argv", ["kolyn", "check"]):
            main()
        assert "Summary: 1 checks, 1 passed, 0 warnings" in capsys.readouterr().out

    def test_check_language_from_env(self, project: Path, monkeypatch, capsys):
        monkeypatch.setenv("KOLYN_LANG", "es")
        monkeypatch.chdir(project)
        with patch("sys.argv", ["kolyn", "check"]):
            main()
        assert "No se encontró Agent.md" in capsys.readouterr().err

    def test_config_init_and_show(self, kolyn_home: Path, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO())
        argv = ["kolyn", "config", "init", "--language", "es", "--source", "https://x/a.git"]
        with patch("sys.argv", argv):
            main()
        data = json.loads((kolyn_home / "config.json").read_text())
        assert data == {"language": "es", "skills_sources": ["https://x/a.git"]}
        assert "Configuración global creada" in capsys.readouterr().out

        with patch("sys.argv", ["kolyn", "config", "show"]):
            main()
        assert '"language": "es"' in capsys.readouterr().out

    def test_skills_new_via_cli(self, kolyn_home: Path):
        with patch("sys.argv", ["kolyn", "skills", "new", "forms"]):
            main()
        assert (kolyn_home / "skills" / "forms.md").exists()

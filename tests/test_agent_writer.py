"""Tests for bootstrap/writer.py: Agent.md rendering and in-place regeneration."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from kolyn.bootstrap.context import parse_agent_context
from kolyn.bootstrap.writer import (
    GENERAL_RULES,
    generate_agent_md,
    render_rules_section,
    render_skills_section,
    skill_link,
    update_sections,
)
from kolyn.skills.models import Skill

TODAY = date(2026, 3, 1)


def _skill(
    root: Path, name: str, category: str = "root", rules: list[str] | None = None
) -> Skill:
    sub = root / ".kolyn" / "skills"
    if category != "root":
        sub = sub / category
    return Skill(
        name=name, category=category, path=str(sub / f"{name}.md"), agent_rules=rules or []
    )


class TestSkillLink:
    def test_inside_project_is_relative(self, project: Path):
        skill = _skill(project, "zod")
        assert skill_link(skill, project) == "./.kolyn/skills/zod.md"

    def test_outside_project_is_absolute(self, project: Path, tmp_path: Path):
        skill = Skill(name="x", path=str(tmp_path / "lib" / "x.md"))
        assert skill_link(skill, project) == (tmp_path / "lib" / "x.md").as_posix()


class TestRenderSections:
    def test_skills_sorted_by_name(self, project: Path):
        section = render_skills_section(
            [_skill(project, "zod"), _skill(project, "auth", "backend")], project
        )
        lines = [ln for ln in section.splitlines() if ln.startswith("- [")]
        assert lines == [
            "- [auth (backend)](./.kolyn/skills/backend/auth.md)",
            "- [zod (root)](./.kolyn/skills/zod.md)",
        ]

    def test_no_skills(self, project: Path):
        assert "No skills selected" in render_skills_section([], project)

    def test_rule_numbering_is_continuous(self, project: Path):
        skills = [
            _skill(project, "b", rules=["B1"]),
            _skill(project, "a", rules=["A1", "A2"]),
            _skill(project, "c"),
        ]
        section = render_rules_section(skills)
        assert "#### From a:\n1. A1\n2. A2\n" in section
        assert "#### From b:\n3. B1\n" in section
        assert "From c" not in section
        assert f"4. {GENERAL_RULES[0]}" in section
        assert f"6. {GENERAL_RULES[2]}" in section


class TestGenerateAgentMd:
    def test_fresh_file(self, project: Path):
        skills = [_skill(project, "zod", rules=["Validate input"])]
        path = generate_agent_md(project, "nextjs", skills, version="1.2.3", today=TODAY)
        text = path.read_text()
        assert text.startswith("# Agent Context - my-app\n")
        assert "Kolyn Version: 1.2.3" in text
        assert "Generated: 2026-03-01" in text
        assert "Project Type: nextjs" in text
        assert "Type: NEXTJS" in text
        assert "1. Validate input" in text

    def test_round_trips_through_parser(self, project: Path):
        skills = [_skill(project, "zod"), _skill(project, "shadcn", "frontend")]
        path = generate_agent_md(project, "node", skills, version="1", today=TODAY)
        ctx = parse_agent_context(path.read_text())
        assert ctx.project_type == "node"
        assert ctx.skill_paths == [
            "./.kolyn/skills/frontend/shadcn.md",
            "./.kolyn/skills/zod.md",
        ]

    def test_regeneration_is_idempotent(self, project: Path):
        skills = [_skill(project, "zod", rules=["R"])]
        path = generate_agent_md(project, "node", skills, version="1", today=TODAY)
        first = path.read_text()
        generate_agent_md(project, "node", skills, version="1", today=TODAY)
        assert path.read_text() == first

    def test_handwritten_prose_preserved(self, project: Path):
        path = generate_agent_md(project, "node", [], version="1", today=TODAY)
        edited = path.read_text().replace(
            "### Stack & Architecture\n",
            "### Stack & Architecture\nWe deploy on Fly.io.\n",
        )
        edited += "\n### Team Notes\nAsk Sam before touching billing.\n"
        path.write_text(edited)

        generate_agent_md(
            project, "node", [_skill(project, "zod", rules=["R"])], version="2", today=TODAY
        )
        text = path.read_text()
        assert "We deploy on Fly.io." in text
        assert "### Team Notes\nAsk Sam before touching billing.\n" in text
        assert "- [zod (root)](./.kolyn/skills/zod.md)" in text
        assert "1. R" in text
        assert "Kolyn Version: 1" in text  # header untouched on in-place update

    def test_unrecognized_file_replaced(self, project: Path):
        (project / "Agent.md").write_text("random notes\n")
        generate_agent_md(project, "go", [], version="1", today=TODAY)
        assert "### Skills Reference" in (project / "Agent.md").read_text()


class TestUpdateSections:
    def test_none_without_markers(self):
        assert update_sections("# Title\n", "s", "r") is None

    def test_empty_skills_section_keeps_rules(self, project: Path):
        existing = (
            "# Notes\n\n### Skills Reference\n### Rules\n1. old\n\n### Team Notes\nAsk Sam.\n"
        )
        (project / "Agent.md").write_text(existing)
        generate_agent_md(project, "node", [_skill(project, "zod", rules=["R"])], version="1")
        text = (project / "Agent.md").read_text()
        assert "- [zod (root)](./.kolyn/skills/zod.md)\n\n### Rules\n" in text
        assert "1. old" not in text
        assert "\n#### From zod:\n1. R\n" in text
        assert text.endswith("### Team Notes\nAsk Sam.\n")

    def test_empty_rules_section_keeps_following_prose(self, project: Path):
        existing = "### Skills Reference\nold list\n\n### Rules\n### Team Notes\nAsk Sam.\n"
        (project / "Agent.md").write_text(existing)
        generate_agent_md(project, "node", [_skill(project, "zod")], version="1")
        text = (project / "Agent.md").read_text()
        assert "old list" not in text
        assert "#### General:" in text
        assert "### Team Notes\nAsk Sam." in text

    def test_empty_sections_stable_after_first_update(self, project: Path):
        (project / "Agent.md").write_text("### Skills Reference\n### Rules\n### Extra\nkeep\n")
        skills = [_skill(project, "zod", rules=["R"])]
        generate_agent_md(project, "node", skills, version="1")
        first = (project / "Agent.md").read_text()
        generate_agent_md(project, "node", skills, version="1")
        assert (project / "Agent.md").read_text() == first
        assert first.endswith("### Extra\nkeep\n")

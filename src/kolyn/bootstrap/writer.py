"""Agent.md writer: render skill and rule sections, update in place or create fresh."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from kolyn.bootstrap.context import AGENT_FILE, RULES_HEADING, SKILLS_HEADING
from kolyn.config import atomic_write
from kolyn.skills.models import Skill

GENERAL_RULES = (
    "**Follow the Skills:** Read the reference files above before writing code.",
    "**Directory Structure:** Respect the existing project structure.",
    "**Consistency:** Use the same libraries and patterns defined in the stack.",
)

_SKILLS_INTRO = "The following skills are active for this project.\n"
_NO_SKILLS = "No skills selected. Run 'kolyn init --skill <name>' to add skills.\n"

# A section runs from its heading line to the next "### " heading or EOF.
# "#### From ..." sub-headings do not end it.
_SKILLS_SECTION_RE = re.compile(
    r"(?ms)^(" + re.escape(SKILLS_HEADING) + r"\n)(.*?)(?=\n### |^### |\Z)"
)
_RULES_SECTION_RE = re.compile(
    r"(?ms)^(" + re.escape(RULES_HEADING) + r"\n)(.*?)(?=\n### |^### |\Z)"
)
_RECOGNIZED_RE = re.compile(
    r"(?s)" + re.escape(SKILLS_HEADING) + r"\n.*?" + re.escape(RULES_HEADING) + r"\n"
)

_TEMPLATE = """\
# Agent Context - {project_name}

Kolyn Version: {version}
Generated: {generated}
Project Type: {project_type}

---

## Project Context

### Stack & Architecture
This project is defined by the following selected skills.
Type: {project_type_upper}

{skills_heading}
{skills_section}
{rules_heading}
{rules_section}"""


def skill_link(skill: Skill, root: Path) -> str:
    """Project-relative ``./`` link when the skill lives inside the project."""
    path = Path(skill.path)
    try:
        rel = Path(os.path.relpath(path, root))
    except ValueError:
        return path.as_posix()
    if rel.parts and rel.parts[0] == "..":
        return path.as_posix()
    return f"./{rel.as_posix()}"


def _by_name(skills: Sequence[Skill]) -> list[Skill]:
    return sorted(skills, key=lambda s: s.name)


def render_skills_section(skills: Sequence[Skill], root: Path) -> str:
    if not skills:
        return _NO_SKILLS
    lines = [_SKILLS_INTRO]
    for skill in _by_name(skills):
        lines.append(f"- [{skill.name} ({skill.category})]({skill_link(skill, root)})\n")
    return "".join(lines)


def render_rules_section(skills: Sequence[Skill]) -> str:
    """Numbered rules; numbering runs across all skills and the closing rules."""
    out: list[str] = []
    counter = 1
    for skill in _by_name(skills):
        if not skill.agent_rules:
            continue
        out.append(f"\n#### From {skill.name}:\n")
        for rule in skill.agent_rules:
            out.append(f"{counter}. {rule}\n")
            counter += 1
    out.append("\n#### General:\n")
    for rule in GENERAL_RULES:
        out.append(f"{counter}. {rule}\n")
        counter += 1
    return "".join(out)


def _replace_section(pattern: re.Pattern[str], text: str, section: str) -> str:
    def repl(m: re.Match[str]) -> str:
        # An empty section ends right at the next heading; keep a blank line before it.
        sep = "\n" if m.string[m.end() : m.end() + 1] == "#" else ""
        return m.group(1) + section + sep

    return pattern.sub(repl, text, count=1)


def update_sections(existing: str, skills_section: str, rules_section: str) -> str | None:
    """Replace both generated sections in place. None when markers are absent."""
    if not _RECOGNIZED_RE.search(existing):
        return None
    updated = _replace_section(_SKILLS_SECTION_RE, existing, skills_section)
    return _replace_section(_RULES_SECTION_RE, updated, rules_section)


def render_agent_md(
    root: Path,
    project_type: str,
    skills: Sequence[Skill],
    *,
    version: str,
    today: date | None = None,
) -> str:
    return _TEMPLATE.format(
        project_name=root.name,
        version=version,
        generated=(today or date.today()).isoformat(),
        project_type=project_type,
        project_type_upper=project_type.upper(),
        skills_heading=SKILLS_HEADING,
        skills_section=render_skills_section(skills, root),
        rules_heading=RULES_HEADING,
        rules_section=render_rules_section(skills),
    )


def generate_agent_md(
    root: Path,
    project_type: str,
    skills: Sequence[Skill],
    *,
    version: str,
    today: date | None = None,
) -> Path:
    """Write <root>/Agent.md atomically. Returns its path.

    Hand-written prose outside the two generated sections survives
    regeneration; an unrecognizable file is replaced by a fresh template.
    """
    path = root / AGENT_FILE
    skills_section = render_skills_section(skills, root)
    rules_section = render_rules_section(skills)

    content: str | None = None
    if path.is_file():
        existing = path.read_text(encoding="utf-8")
        content = update_sections(existing, skills_section, rules_section)
    if content is None:
        content = render_agent_md(root, project_type, skills, version=version, today=today)

    atomic_write(path, content)
    return path

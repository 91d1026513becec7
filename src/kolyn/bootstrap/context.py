"""Read the active-skill context back out of a generated Agent.md."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

AGENT_FILE = "Agent.md"
SKILLS_HEADING = "### Skills Reference"
RULES_HEADING = "### Rules"
PROJECT_TYPE_PREFIX = "Project Type:"
DEFAULT_PROJECT_TYPE = "generic"

_LINK_RE = re.compile(r"\[.*?\]\((.*?)\)")


@dataclass
class AgentContext:
    """Project type plus the explicit, ordered list of declared skill paths."""

    project_type: str = DEFAULT_PROJECT_TYPE
    skill_paths: list[str] = field(default_factory=list)


def parse_agent_context(text: str) -> AgentContext:
    ctx = AgentContext()
    in_skills = False
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith(PROJECT_TYPE_PREFIX):
            value = line[len(PROJECT_TYPE_PREFIX) :].strip()
            if value:
                ctx.project_type = value
            continue
        if line.startswith(SKILLS_HEADING):
            in_skills = True
            continue
        if line.startswith("### ") and in_skills:
            in_skills = False
            continue
        if in_skills:
            match = _LINK_RE.search(line)
            if match and match.group(1):
                ctx.skill_paths.append(match.group(1))
    return ctx


def load_agent_context(root: Path) -> AgentContext | None:
    """Parse <root>/Agent.md; None when the project has not been initialized."""
    path = root / AGENT_FILE
    if not path.is_file():
        return None
    return parse_agent_context(path.read_text(encoding="utf-8"))


def resolve_skill_path(ref: str, root: Path) -> Path:
    """Declared paths are ``~/``-prefixed, absolute, or relative to the project."""
    path = Path(ref).expanduser()
    if not path.is_absolute():
        path = root / path
    return path

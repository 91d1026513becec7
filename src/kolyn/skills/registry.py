"""Skill store scanner: discovery, frontmatter parsing, selection helpers."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from kolyn.skills.models import ROOT_CATEGORY, CheckRuleSet, Skill

logger = logging.getLogger(__name__)

SKILL_SUFFIX = ".md"
README_NAME = "README.md"
GENERIC_TYPE = "generic"
_DESCRIPTION_MARKERS = ("- **Description**", "**Description**")


class SkillsDirError(Exception):
    """Raised when the only configured, required skills directory is missing."""


class ScanCancelled(Exception):
    """Raised when a scan is aborted through its cancel event."""


def default_skill_roots(home: Path) -> list[Path]:
    """Local user skills first, then every synced source checkout (sorted)."""
    roots = [home / "skills"]
    sources = home / "sources"
    if sources.is_dir():
        roots.extend(sorted(p for p in sources.iterdir() if p.is_dir()))
    return roots


def split_frontmatter(text: str) -> tuple[dict[str, object] | None, str]:
    """Split a leading ``---`` YAML block from the markdown body.

    Returns ``(None, text)`` when there is no block, the block is not closed,
    the YAML does not parse, or it does not hold a mapping.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return None, text

    end_idx = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end_idx = i
            break
    if end_idx is None:
        return None, text

    yaml_text = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError:
        return None, text
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, text
    return data, body


def extract_description(body: str) -> str:
    """Fallback for skills written before frontmatter: ``**Description**: ...``."""
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith(_DESCRIPTION_MARKERS):
            _, sep, value = line.partition(":")
            if sep:
                return value.strip().lstrip("*").strip()
    return ""


def parse_skill(text: str, path: Path, category: str = ROOT_CATEGORY) -> tuple[Skill, bool]:
    """Build a Skill from file content. Never raises on bad content.

    Returns the skill and whether it carries check rules. Files without a
    usable frontmatter are plain reference docs: listed, but rule-less.
    """
    stem = path.stem
    frontmatter, body = split_frontmatter(text)
    if frontmatter is None:
        skill = Skill(
            name=stem,
            category=category,
            path=str(path),
            description=extract_description(text),
        )
        return skill, False

    name = frontmatter.get("name")
    description = frontmatter.get("description")
    capability = frontmatter.get("capability")
    try:
        check = CheckRuleSet.model_validate(frontmatter.get("check") or {})
    except ValidationError as e:
        logger.warning(f"Ignoring malformed check block in {path}: {e.error_count()} error(s)")
        check = CheckRuleSet()

    try:
        skill = Skill(
            name=str(name).strip() if name else stem,
            category=category,
            path=str(path),
            description=(
                str(description).strip() if description else extract_description(body)
            ),
            agent_rules=frontmatter.get("agent_rules"),
            applies_to=frontmatter.get("applies_to"),
            capability=str(capability).strip() if capability else None,
            check=check,
            has_frontmatter=True,
        )
    except ValidationError as e:
        logger.warning(f"Ignoring malformed frontmatter in {path}: {e.error_count()} error(s)")
        skill = Skill(
            name=str(name).strip() if name else stem,
            category=category,
            path=str(path),
            description=extract_description(body),
        )
        return skill, False
    return skill, skill.has_rules


def load_skill(path: Path, category: str = ROOT_CATEGORY) -> Skill | None:
    """Read and parse one skill file. Returns None when it cannot be read."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable skill {path}: {e}")
        return None
    skill, _ = parse_skill(text, path, category)
    return skill


def category_for(path: Path, root: Path) -> str:
    rel_parent = path.parent.relative_to(root)
    if rel_parent == Path("."):
        return ROOT_CATEGORY
    return rel_parent.as_posix()


def scan_skills(
    roots: Iterable[Path],
    *,
    exclude_readme: bool = True,
    required: bool = False,
    cancel: threading.Event | None = None,
) -> list[Skill]:
    """Walk every root and parse each markdown file found.

    Results keep traversal order (roots in the given order, entries sorted
    within each directory); use ``sort_skills`` for display order.
    """
    roots = list(roots)
    skills: list[Skill] = []

    if required and len(roots) == 1 and not roots[0].is_dir():
        raise SkillsDirError(f"skills directory not found: {roots[0]}")

    for root in roots:
        if not root.is_dir():
            logger.debug(f"Skills root missing, skipping: {root}")
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                if cancel is not None and cancel.is_set():
                    raise ScanCancelled(f"scan of {root} cancelled")
                if not filename.endswith(SKILL_SUFFIX):
                    continue
                if exclude_readme and filename == README_NAME:
                    continue
                path = Path(dirpath) / filename
                skill = load_skill(path, category_for(path, root))
                if skill is not None:
                    skills.append(skill)
    return skills


def sort_skills(skills: Iterable[Skill]) -> list[Skill]:
    return sorted(skills, key=lambda s: (s.category, s.name))


def select_applicable(
    skills: Iterable[Skill],
    project_type: str,
    capabilities: Iterable[str] | None = None,
) -> list[Skill]:
    """Feature-flag selection used by ``init --auto``.

    A skill applies when its ``applies_to`` lists the project type or
    ``generic``. When capabilities are given, skills declaring a capability
    must also match one of them; skills without a capability always pass.
    """
    wanted = set(capabilities) if capabilities is not None else None
    selected: list[Skill] = []
    for skill in skills:
        if not skill.has_frontmatter:
            continue
        targets = {t.lower() for t in skill.applies_to}
        if project_type.lower() not in targets and GENERIC_TYPE not in targets:
            continue
        if wanted is not None and skill.capability and skill.capability not in wanted:
            continue
        selected.append(skill)
    return selected


def find_skill(skills: Iterable[Skill], ref: str) -> Skill | None:
    """Resolve a user reference by path, ``category/name``, ``name``, or file stem."""
    skills = list(skills)
    ref_path = Path(ref).expanduser()
    if ref_path.suffix == SKILL_SUFFIX and ref_path.exists():
        resolved = ref_path.resolve()
        for skill in skills:
            if Path(skill.path).resolve() == resolved:
                return skill
    for skill in skills:
        if ref in (skill.label, f"{skill.category}/{skill.name}"):
            return skill
    for skill in skills:
        if ref == skill.name or ref == Path(skill.path).stem:
            return skill
    return None

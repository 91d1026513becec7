"""CLI command handler for init: vendor skills into the project and write Agent.md."""

from __future__ import annotations

import argparse
import shutil
import sys
from collections.abc import Iterable
from pathlib import Path

from kolyn import __version__
from kolyn.bootstrap.context import load_agent_context
from kolyn.bootstrap.detector import detect_project_type
from kolyn.bootstrap.writer import generate_agent_md
from kolyn.config import get_kolyn_home
from kolyn.skills.models import ROOT_CATEGORY, Skill
from kolyn.skills.registry import (
    default_skill_roots,
    find_skill,
    scan_skills,
    select_applicable,
)

LOCAL_SKILLS_DIR = Path(".kolyn") / "skills"


class InitError(Exception):
    """Raised when init cannot vendor skills or write Agent.md."""


def local_skills_dir(root: Path) -> Path:
    return root / LOCAL_SKILLS_DIR


def vendor_skill(skill: Skill, root: Path) -> Path:
    """Copy a skill into <root>/.kolyn/skills/<category>/, keeping its filename."""
    src = Path(skill.path)
    dest_dir = local_skills_dir(root)
    if skill.category != ROOT_CATEGORY:
        dest_dir = dest_dir / skill.category
    dest = dest_dir / src.name
    if dest.exists() and dest.resolve() == src.resolve():
        return dest
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        _ = shutil.copy2(src, dest)
    except OSError as e:
        raise InitError(f"could not copy skill {skill.name} to {dest}: {e}") from e
    return dest


def load_local_skills(root: Path) -> list[Skill]:
    return scan_skills([local_skills_dir(root)])


def _select(
    catalog: list[Skill],
    refs: Iterable[str],
    *,
    auto: bool,
    project_type: str,
    capabilities: list[str] | None,
) -> list[Skill]:
    selected: dict[str, Skill] = {}
    for ref in refs:
        skill = find_skill(catalog, ref)
        if skill is None:
            print(f"Warning: skill not found: {ref}", file=sys.stderr)
            continue
        selected[skill.path] = skill
    if auto:
        for skill in select_applicable(catalog, project_type, capabilities):
            selected.setdefault(skill.path, skill)
    return list(selected.values())


def init_project(
    root: Path,
    *,
    refs: Iterable[str] = (),
    auto: bool = False,
    capabilities: list[str] | None = None,
    project_type: str | None = None,
) -> tuple[Path, list[Skill]]:
    """Vendor the selected skills and (re)generate Agent.md.

    Returns the Agent.md path and every skill now installed in the project,
    which includes skills vendored by earlier runs.
    """
    ptype = project_type or detect_project_type(root)
    print(f"Project type: {ptype}")

    existing = load_agent_context(root)
    if existing is not None:
        print(f"Existing Agent.md found ({len(existing.skill_paths)} skill(s) declared)")

    refs = list(refs)
    selected: list[Skill] = []
    if refs or auto:
        catalog = scan_skills(default_skill_roots(get_kolyn_home()))
        selected = _select(
            catalog, refs, auto=auto, project_type=ptype, capabilities=capabilities
        )

    for skill in selected:
        dest = vendor_skill(skill, root)
        print(f"  {skill.label} -> {dest.relative_to(root).as_posix()}")

    installed = load_local_skills(root)
    try:
        path = generate_agent_md(root, ptype, installed, version=__version__)
    except OSError as e:
        raise InitError(f"could not write Agent.md: {e}") from e
    return path, installed


def cmd_init(args: argparse.Namespace) -> None:
    root = Path(getattr(args, "root", None) or Path.cwd()).resolve()
    refs: list[str] = getattr(args, "skills", None) or []
    auto: bool = getattr(args, "auto", False)
    capabilities: list[str] | None = getattr(args, "capabilities", None)
    project_type: str | None = getattr(args, "project_type", None)

    if not root.is_dir():
        print(f"Error: not a directory: {root}", file=sys.stderr)
        sys.exit(1)

    try:
        path, installed = init_project(
            root,
            refs=refs,
            auto=auto,
            capabilities=capabilities,
            project_type=project_type,
        )
    except InitError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Agent.md: {path}")
    print(f"Active skills: {len(installed)}")
    if not installed and not (refs or auto):
        print("No skills selected. Use --skill <name> or --auto to add skills.")

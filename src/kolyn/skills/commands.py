"""CLI command handlers for the skills library: json, paths, list, show, edit, new."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from kolyn.config import get_kolyn_home, get_skills_dir
from kolyn.external import ExternalTool, SubprocessTool, ToolError
from kolyn.skills.models import Skill, SkillsListing
from kolyn.skills.registry import (
    SkillsDirError,
    default_skill_roots,
    find_skill,
    scan_skills,
    sort_skills,
)

DEFAULT_EDITOR = "vim"

SKILL_TEMPLATE = """\
---
name: {name}
description: Short description of the skill...
agent_rules:
  - "**Rule 1:** Description of rule 1."
  - "**Rule 2:** Description of rule 2."
  - "**Quality:** No prints, clean code."
applies_to: [generic]
capability: core
check:
  required_deps: []
  files_exist_any: []
---

# {name}

## 1. Overview
Describe the purpose of this skill and when it should be used.

## 2. Core Concepts
Fundamental concepts the agent must understand.

## 3. Code Snippets
Examples to copy and paste.

### Example 1
```
// Code here
```

## 4. Checklist
- [ ] Rule 1 satisfied
- [ ] Rule 2 satisfied
"""


def cmd_skills(args: argparse.Namespace, tool: ExternalTool | None = None) -> None:
    action: str = getattr(args, "skills_action", None) or "json"
    dirs: list[Path] | None = getattr(args, "dirs", None)

    if action == "new":
        _skills_new(args.name, force=getattr(args, "force", False))
        return

    skills = _load_catalog(dirs)
    if action == "json":
        _skills_json(skills, dirs)
    elif action == "paths":
        for skill in skills:
            print(skill.path)
    elif action == "list":
        _skills_list(skills)
    elif action in ("show", "edit"):
        skill = find_skill(skills, args.ref)
        if skill is None:
            print(f"Error: skill not found: {args.ref}", file=sys.stderr)
            sys.exit(1)
        if action == "show":
            _show(Path(skill.path))
        else:
            _open_in_editor(Path(skill.path), tool or SubprocessTool(timeout=None))
    else:
        print(f"Error: unknown action: {action}", file=sys.stderr)
        sys.exit(1)


def _load_catalog(dirs: list[Path] | None) -> list[Skill]:
    roots = dirs or default_skill_roots(get_kolyn_home())
    try:
        return scan_skills(roots, required=bool(dirs))
    except SkillsDirError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _show(path: Path) -> None:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        sys.exit(1)
    print(text)


def _skills_json(skills: list[Skill], dirs: list[Path] | None) -> None:
    roots = dirs or default_skill_roots(get_kolyn_home())
    listing = SkillsListing(
        total_skills=len(skills),
        skills_dirs=[str(r) for r in roots],
        skills=skills,
    )
    print(listing.model_dump_json(indent=2))


def _skills_list(skills: list[Skill]) -> None:
    if not skills:
        print(f"Warning: no skills available in {get_kolyn_home()}", file=sys.stderr)
        return
    print(f"Skills ({len(skills)}):")
    for i, skill in enumerate(sort_skills(skills), 1):
        marker = " [rules]" if skill.has_rules else ""
        print(f"  {i}. {skill.category}/{skill.name}{marker}")
        if skill.description:
            print(f"     {skill.description}")


def _open_in_editor(path: Path, tool: ExternalTool) -> None:
    editor = os.environ.get("EDITOR") or DEFAULT_EDITOR
    print(f"Editing {path} with {editor}")
    try:
        result = tool.run([*editor.split(), str(path)], interactive=True)
    except ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if not result.ok:
        print(f"Error: editor exited with status {result.returncode}", file=sys.stderr)
        sys.exit(1)


def create_skill_file(name: str, dest_dir: Path, *, force: bool = False) -> Path | None:
    """Write a new skill from the standard template. Returns None if it exists."""
    stem = name.strip().removesuffix(".md")
    if not stem:
        raise ValueError("skill name is required")
    dest_dir.mkdir(parents=True, exist_ok=True)
    path = dest_dir / f"{stem}.md"
    if path.exists() and not force:
        return None
    path.write_text(SKILL_TEMPLATE.format(name=stem), encoding="utf-8")
    return path


def _skills_new(name: str, *, force: bool) -> None:
    try:
        path = create_skill_file(name, get_skills_dir(), force=force)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if path is None:
        print(f"Warning: skill already exists: {name} (use --force to overwrite)", file=sys.stderr)
        return
    print(f"Skill created: {path}")
    print("Edit it with 'kolyn skills edit' or your editor of choice.")

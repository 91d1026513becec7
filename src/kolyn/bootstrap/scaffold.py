"""Scaffold skills: create a new project from a declared structure, or audit one."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from kolyn.config import get_kolyn_home
from kolyn.external import ExternalTool, SubprocessTool, ToolError
from kolyn.skills.registry import default_skill_roots, find_skill, scan_skills, split_frontmatter

logger = logging.getLogger(__name__)

NAME_PLACEHOLDER = "{name}"


class ScaffoldError(Exception):
    """Raised when a scaffold skill is unusable or project creation fails."""


class ScaffoldFile(BaseModel):
    path: str
    content: str = ""


class ScaffoldStructure(BaseModel):
    directories: list[str] = Field(default_factory=list)
    files: list[ScaffoldFile] = Field(default_factory=list)


class ScaffoldSkill(BaseModel):
    type: str = ""
    framework: str = ""
    create_command: str = ""
    structure: ScaffoldStructure = Field(default_factory=ScaffoldStructure)


class StructureReport(BaseModel):
    present: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    created: list[str] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing


def load_scaffold_skill(path: Path) -> ScaffoldSkill:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScaffoldError(f"could not read {path}: {e}") from e
    frontmatter, _ = split_frontmatter(text)
    if frontmatter is None:
        raise ScaffoldError(f"{path}: missing or malformed frontmatter")
    if "structure" not in frontmatter and "create_command" not in frontmatter:
        raise ScaffoldError(f"{path}: not a scaffold skill (no structure or create_command)")
    try:
        return ScaffoldSkill.model_validate(frontmatter)
    except ValidationError as e:
        raise ScaffoldError(f"{path}: invalid scaffold definition: {e}") from e


def apply_structure(base: Path, structure: ScaffoldStructure, *, create: bool) -> StructureReport:
    """Compare base against the structure; create missing entries when asked."""
    report = StructureReport()
    for rel in structure.directories:
        target = base / rel
        if target.is_dir():
            report.present.append(rel)
            continue
        if not create:
            report.missing.append(rel)
            continue
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScaffoldError(f"could not create directory {rel}: {e}") from e
        report.created.append(rel)

    for entry in structure.files:
        target = base / entry.path
        if target.exists():
            report.present.append(entry.path)
            continue
        if not create:
            report.missing.append(entry.path)
            continue
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(entry.content, encoding="utf-8")
        except OSError as e:
            raise ScaffoldError(f"could not write file {entry.path}: {e}") from e
        report.created.append(entry.path)
    return report


def create_project(
    scaffold: ScaffoldSkill,
    name: str,
    parent: Path,
    tool: ExternalTool,
) -> Path:
    """Run the create command (if any) in parent, then lay down the structure."""
    project = parent / name
    if scaffold.create_command:
        args = shlex.split(scaffold.create_command.replace(NAME_PLACEHOLDER, name))
        logger.debug(f"Scaffold create command: {args} (cwd={parent})")
        print(f"Running: {' '.join(args)}")
        try:
            result = tool.run(args, cwd=parent, interactive=True)
        except ToolError as e:
            raise ScaffoldError(str(e)) from e
        if not result.ok:
            raise ScaffoldError(f"create command exited with status {result.returncode}")
    project.mkdir(parents=True, exist_ok=True)
    apply_structure(project, scaffold.structure, create=True)
    return project


def _resolve_scaffold_path(ref: str) -> Path:
    path = Path(ref).expanduser()
    if path.is_file():
        return path
    skill = find_skill(scan_skills(default_skill_roots(get_kolyn_home())), ref)
    if skill is None:
        raise ScaffoldError(f"scaffold skill not found: {ref} (run 'kolyn sync' first)")
    return Path(skill.path)


def _print_report(report: StructureReport) -> None:
    for rel in report.present:
        print(f"  [OK] {rel}")
    for rel in report.created:
        print(f"  [CREATED] {rel}")
    for rel in report.missing:
        print(f"  [MISSING] {rel}")


def cmd_scaffold(args: argparse.Namespace, tool: ExternalTool | None = None) -> None:
    from kolyn.bootstrap.commands import InitError, init_project

    tool = tool or SubprocessTool(timeout=None)
    try:
        path = _resolve_scaffold_path(args.skill)
        scaffold = load_scaffold_skill(path)

        if getattr(args, "audit", False):
            root = Path(getattr(args, "root", None) or Path.cwd()).resolve()
            print(f"Auditing structure in {root}")
            report = apply_structure(
                root, scaffold.structure, create=getattr(args, "fix", False)
            )
            _print_report(report)
            if not report.complete:
                print(f"Error: {len(report.missing)} missing entries", file=sys.stderr)
                sys.exit(1)
            return

        name: str | None = getattr(args, "name", None)
        if not name:
            print("Error: --name is required to create a project", file=sys.stderr)
            sys.exit(1)
        parent = Path.cwd()
        project = create_project(scaffold, name, parent, tool)
        print(f"Project '{name}' ready at {project}")
        init_project(project.resolve(), project_type=scaffold.type or None)
    except (ScaffoldError, InitError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\n  cd {name}\n  kolyn check")

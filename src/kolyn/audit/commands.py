"""CLI command handler for ``kolyn check``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from kolyn.audit.engine import audit
from kolyn.audit.manifest import load_manifest
from kolyn.audit.models import AuditResult, CheckKind, CheckOutcome, SkillAudit
from kolyn.bootstrap.commands import local_skills_dir
from kolyn.bootstrap.context import load_agent_context, resolve_skill_path
from kolyn.i18n import Locale
from kolyn.skills.models import ROOT_CATEGORY, Skill
from kolyn.skills.registry import category_for, load_skill

# (message when passed, message when failed)
_OUTCOME_KEYS: dict[CheckKind, tuple[str, str]] = {
    CheckKind.REQUIRED_DEP: ("found_dep", "missing_dep"),
    CheckKind.DEPS_ANY: ("found_dep_any", "missing_dep_any"),
    CheckKind.FORBIDDEN_DEP: ("absent_forbidden_dep", "forbidden_dep"),
    CheckKind.FILE_EXISTS: ("found_file", "missing_file"),
    CheckKind.FILES_ANY: ("found_file_any", "missing_file_any"),
    CheckKind.ENV_VAR: ("found_env", "missing_env"),
}


def format_outcome(outcome: CheckOutcome, locale: Locale) -> str:
    ok_key, fail_key = _OUTCOME_KEYS[outcome.kind]
    if outcome.passed:
        return f"  [OK] {locale.text(ok_key, target=outcome.target)}"
    return f"  [WARN] {locale.text(fail_key, target=outcome.target)}"


def _print_skill(skill_audit: SkillAudit, locale: Locale) -> None:
    print()
    print(locale.text("evaluating_skill", category=skill_audit.category, name=skill_audit.name))
    for outcome in skill_audit.checks:
        print(format_outcome(outcome, locale))
    if skill_audit.advisory:
        print(f"  {locale.text('tip', message=skill_audit.advisory)}")


def _category(path: Path, root: Path) -> str:
    local = local_skills_dir(root)
    if path.is_relative_to(local):
        return category_for(path, local)
    return path.parent.name or ROOT_CATEGORY


def _declared_skills(
    root: Path, paths: list[str], locale: Locale
) -> tuple[list[Skill], list[str]]:
    skills: list[Skill] = []
    missing: list[str] = []
    for ref in paths:
        path = resolve_skill_path(ref, root)
        skill = load_skill(path, _category(path, root)) if path.is_file() else None
        if skill is None:
            print(f"Warning: {locale.text('skill_not_found', path=ref)}", file=sys.stderr)
            missing.append(ref)
            continue
        skills.append(skill)
    return skills, missing


def run_check(root: Path, locale: Locale) -> AuditResult | None:
    """Audit the project at root. None when there is nothing to audit."""
    context = load_agent_context(root)
    if context is None:
        print(f"Warning: {locale.text('no_agent_md')}", file=sys.stderr)
        return None

    print(locale.text("check_start"))
    print(locale.text("project_type", value=context.project_type))
    print(locale.text("active_skills", count=len(context.skill_paths)))

    if not context.skill_paths:
        print(locale.text("no_skills"))
        return None

    manifest = load_manifest(root)
    if manifest is None:
        print(f"Warning: {locale.text('no_package_json')}", file=sys.stderr)

    skills, missing = _declared_skills(root, context.skill_paths, locale)
    result = audit(root, skills, manifest)
    for ref in missing:
        result.record_missing(ref)

    for skill_audit in result.skills:
        _print_skill(skill_audit, locale)
    return result


def cmd_check(args: argparse.Namespace, locale: Locale | None = None) -> None:
    locale = locale or Locale()
    root = Path(getattr(args, "root", None) or Path.cwd()).resolve()

    result = run_check(root, locale)
    if result is None:
        return

    print()
    print(
        locale.text(
            "audit_summary",
            total=result.total_checks,
            passed=result.passed_checks,
            warnings=result.warnings,
        )
    )
    if not result.ok:
        print(f"Error: {locale.text('audit_issues', warnings=result.warnings)}", file=sys.stderr)
        sys.exit(1)

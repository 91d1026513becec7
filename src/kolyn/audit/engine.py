"""Audit engine: evaluate skills' check rules against a project."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from kolyn.audit.manifest import ProjectManifest
from kolyn.audit.models import AuditResult, CheckKind, CheckOutcome, SkillAudit
from kolyn.skills.models import CheckRuleSet, Skill

ENV_FILE = ".env"


def read_env_text(root: Path) -> str:
    """Content of <root>/.env; a missing or unreadable file is empty."""
    try:
        return (root / ENV_FILE).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def env_defines(env_text: str, name: str) -> bool:
    prefix = f"{name}="
    return any(line.lstrip().startswith(prefix) for line in env_text.splitlines())


def evaluate_rules(
    project_root: Path,
    rules: CheckRuleSet,
    manifest: ProjectManifest | None,
    env_text: str | None = None,
) -> list[CheckOutcome]:
    """Run one rule set. Any-of lists yield a single outcome each."""
    outcomes: list[CheckOutcome] = []

    if manifest is not None:
        for dep in rules.required_deps:
            outcomes.append(
                CheckOutcome(kind=CheckKind.REQUIRED_DEP, target=dep, passed=manifest.has(dep))
            )
        if rules.deps_exist_any:
            found = next((d for d in rules.deps_exist_any if manifest.has(d)), None)
            outcomes.append(
                CheckOutcome(
                    kind=CheckKind.DEPS_ANY,
                    target=found or ", ".join(rules.deps_exist_any),
                    passed=found is not None,
                )
            )
        for dep in rules.forbidden_deps:
            outcomes.append(
                CheckOutcome(
                    kind=CheckKind.FORBIDDEN_DEP, target=dep, passed=not manifest.has(dep)
                )
            )

    for rel in rules.files_exist:
        outcomes.append(
            CheckOutcome(
                kind=CheckKind.FILE_EXISTS, target=rel, passed=(project_root / rel).exists()
            )
        )
    if rules.files_exist_any:
        found = next((f for f in rules.files_exist_any if (project_root / f).exists()), None)
        outcomes.append(
            CheckOutcome(
                kind=CheckKind.FILES_ANY,
                target=found or ", ".join(rules.files_exist_any),
                passed=found is not None,
            )
        )

    if rules.env_vars:
        if env_text is None:
            env_text = read_env_text(project_root)
        for var in rules.env_vars:
            outcomes.append(
                CheckOutcome(kind=CheckKind.ENV_VAR, target=var, passed=env_defines(env_text, var))
            )

    return outcomes


def audit_skill(
    project_root: Path,
    skill: Skill,
    manifest: ProjectManifest | None,
    env_text: str | None = None,
) -> SkillAudit:
    checks = evaluate_rules(project_root, skill.check, manifest, env_text)
    result = SkillAudit(name=skill.name, category=skill.category, path=skill.path, checks=checks)
    if not result.passed and skill.check.fail_message:
        result.advisory = skill.check.fail_message
    return result


def audit(
    project_root: Path,
    skills: Iterable[Skill],
    manifest: ProjectManifest | None,
) -> AuditResult:
    """Evaluate every rule-bearing skill and tally the outcomes.

    Skills with an empty rule set are left out entirely. When ``manifest`` is
    None, dependency checks are skipped and do not count.
    """
    result = AuditResult(manifest_found=manifest is not None)
    env_text: str | None = None
    for skill in skills:
        if not skill.has_rules:
            continue
        if skill.check.env_vars and env_text is None:
            env_text = read_env_text(project_root)
        result.record(audit_skill(project_root, skill, manifest, env_text))
    return result

"""Pydantic models and enums for audit results."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class CheckKind(StrEnum):
    REQUIRED_DEP = "required_dep"
    DEPS_ANY = "deps_exist_any"
    FORBIDDEN_DEP = "forbidden_dep"
    FILE_EXISTS = "file_exists"
    FILES_ANY = "files_exist_any"
    ENV_VAR = "env_var"


class CheckOutcome(BaseModel):
    kind: CheckKind
    target: str  # dependency, path, or variable name; any-of lists are comma-joined
    passed: bool


class SkillAudit(BaseModel):
    name: str
    category: str
    path: str
    checks: list[CheckOutcome] = Field(default_factory=list)
    advisory: str | None = None  # fail_message, set only when the skill failed

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)


class AuditResult(BaseModel):
    total_checks: int = 0
    passed_checks: int = 0
    warnings: int = 0
    skills: list[SkillAudit] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    manifest_found: bool = False

    @property
    def ok(self) -> bool:
        return self.warnings == 0

    def record(self, skill: SkillAudit) -> None:
        for check in skill.checks:
            self.total_checks += 1
            if check.passed:
                self.passed_checks += 1
            else:
                self.warnings += 1
        self.skills.append(skill)

    def record_missing(self, path: str) -> None:
        """A declared skill that is gone counts as a warning but not a check."""
        self.missing_skills.append(path)
        self.warnings += 1

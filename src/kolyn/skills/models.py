"""Pydantic models for skills and their declarative check rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROOT_CATEGORY = "root"


def _as_str_list(value: object) -> list[str]:
    """YAML gives None for empty keys and a scalar for single entries."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    raise ValueError(f"expected a list of strings, got {type(value).__name__}")


class CheckRuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_deps: list[str] = Field(default_factory=list)
    deps_exist_any: list[str] = Field(default_factory=list)
    forbidden_deps: list[str] = Field(default_factory=list)
    files_exist: list[str] = Field(default_factory=list)
    files_exist_any: list[str] = Field(default_factory=list)
    env_vars: list[str] = Field(default_factory=list)
    fail_message: str = ""

    @field_validator(
        "required_deps",
        "deps_exist_any",
        "forbidden_deps",
        "files_exist",
        "files_exist_any",
        "env_vars",
        mode="before",
    )
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        return _as_str_list(value)

    @field_validator("fail_message", mode="before")
    @classmethod
    def _coerce_message(cls, value: object) -> str:
        return "" if value is None else str(value).strip()

    def is_empty(self) -> bool:
        # fail_message alone carries no assertion
        return not (
            self.required_deps
            or self.deps_exist_any
            or self.forbidden_deps
            or self.files_exist
            or self.files_exist_any
            or self.env_vars
        )

    def uses_manifest(self) -> bool:
        return bool(self.required_deps or self.deps_exist_any or self.forbidden_deps)


class Skill(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str = ROOT_CATEGORY
    path: str
    description: str = ""
    agent_rules: list[str] = Field(default_factory=list)
    applies_to: list[str] = Field(default_factory=list)
    capability: str | None = None
    check: CheckRuleSet = Field(default_factory=CheckRuleSet)
    has_frontmatter: bool = False

    @field_validator("agent_rules", "applies_to", mode="before")
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        return _as_str_list(value)

    @property
    def has_rules(self) -> bool:
        return not self.check.is_empty()

    @property
    def label(self) -> str:
        if self.category == ROOT_CATEGORY:
            return self.name
        return f"{self.category}/{self.name}"


class SkillsListing(BaseModel):
    """Shape of ``kolyn skills json`` output."""

    total_skills: int
    skills_dirs: list[str]
    skills: list[Skill]

"""Skills system: discovery, frontmatter parsing, and selection."""

from kolyn.skills.models import CheckRuleSet, Skill, SkillsListing
from kolyn.skills.registry import (
    ScanCancelled,
    SkillsDirError,
    default_skill_roots,
    find_skill,
    parse_skill,
    scan_skills,
    select_applicable,
    sort_skills,
)

__all__ = [
    "CheckRuleSet",
    "ScanCancelled",
    "Skill",
    "SkillsDirError",
    "SkillsListing",
    "default_skill_roots",
    "find_skill",
    "parse_skill",
    "scan_skills",
    "select_applicable",
    "sort_skills",
]

"""Tests for skills/models.py: CheckRuleSet coercion and Skill helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kolyn.skills.models import ROOT_CATEGORY, CheckRuleSet, Skill, SkillsListing


class TestCheckRuleSet:
    def test_defaults_are_empty(self):
        rules = CheckRuleSet()
        assert rules.is_empty()
        assert rules.required_deps == []
        assert rules.fail_message == ""

    def test_null_lists_become_empty(self):
        rules = CheckRuleSet.model_validate({"required_deps": None, "env_vars": None})
        assert rules.required_deps == []
        assert rules.env_vars == []

    def test_scalar_becomes_single_item_list(self):
        rules = CheckRuleSet.model_validate({"files_exist": "tsconfig.json"})
        assert rules.files_exist == ["tsconfig.json"]

    def test_blank_entries_dropped(self):
        rules = CheckRuleSet.model_validate({"required_deps": ["next", "", None, "  "]})
        assert rules.required_deps == ["next"]

    def test_mapping_value_rejected(self):
        with pytest.raises(ValidationError):
            CheckRuleSet.model_validate({"required_deps": {"next": "14"}})

    def test_fail_message_alone_is_empty(self):
        rules = CheckRuleSet(fail_message="Install it")
        assert rules.is_empty()

    def test_uses_manifest(self):
        assert CheckRuleSet(forbidden_deps=["moment"]).uses_manifest()
        assert not CheckRuleSet(files_exist=["a"]).uses_manifest()


class TestSkill:
    def test_root_label_is_name(self):
        skill = Skill(name="tailwind", path="/s/tailwind.md")
        assert skill.category == ROOT_CATEGORY
        assert skill.label == "tailwind"

    def test_category_label(self):
        skill = Skill(name="shadcn", category="frontend", path="/s/frontend/shadcn.md")
        assert skill.label == "frontend/shadcn"

    def test_has_rules_follows_check(self):
        assert not Skill(name="a", path="a.md").has_rules
        skill = Skill(name="a", path="a.md", check=CheckRuleSet(required_deps=["x"]))
        assert skill.has_rules

    def test_applies_to_scalar(self):
        skill = Skill.model_validate({"name": "a", "path": "a.md", "applies_to": "nextjs"})
        assert skill.applies_to == ["nextjs"]


class TestSkillsListing:
    def test_json_shape(self):
        listing = SkillsListing(
            total_skills=1,
            skills_dirs=["/home/.kolyn/skills"],
            skills=[Skill(name="a", path="/home/.kolyn/skills/a.md")],
        )
        data = listing.model_dump()
        assert data["total_skills"] == 1
        assert data["skills"][0]["name"] == "a"
        assert data["skills"][0]["check"]["required_deps"] == []


class TestImmutability:
    def test_skill_is_frozen(self):
        skill = Skill(name="a", path="a.md")
        with pytest.raises(ValidationError):
            skill.name = "b"

    def test_rule_set_is_frozen(self):
        rules = CheckRuleSet(required_deps=["next"])
        with pytest.raises(ValidationError):
            rules.fail_message = "changed"

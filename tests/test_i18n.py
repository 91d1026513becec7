"""Tests for i18n.py."""

from __future__ import annotations

from kolyn.config import GlobalConfig
from kolyn.i18n import _MESSAGES, Locale


class TestLocale:
    def test_english_default(self):
        assert Locale().text("no_skills") == "No skills declared in Agent.md to audit."

    def test_spanish(self):
        locale = Locale.from_config(GlobalConfig(language="es"))
        assert locale.text("active_skills", count=3) == "Skills activos: 3"

    def test_unknown_language_falls_back(self):
        assert Locale.from_config(GlobalConfig(language="de")).language == "en"

    def test_unknown_key_returned_verbatim(self):
        assert Locale().text("no_such_key") == "no_such_key"

    def test_summary_formatting(self):
        text = Locale().text("audit_summary", total=4, passed=3, warnings=1)
        assert text == "Summary: 4 checks, 3 passed, 1 warnings"

    def test_catalogs_have_same_keys(self):
        assert set(_MESSAGES["en"]) == set(_MESSAGES["es"])

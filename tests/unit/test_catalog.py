"""Unit tests for the module catalog."""
import json

import pytest

from learning.catalog import DEFAULT_CATALOG, ModuleCatalog, ModuleDefinition


@pytest.mark.unit
class TestModuleCatalog:
    def test_default_catalog_has_eight_ten_question_modules(self):
        assert len(DEFAULT_CATALOG) == 8
        assert all(m.total_questions == 10 for m in DEFAULT_CATALOG)
        assert DEFAULT_CATALOG.module_ids()[:2] == ["math", "physics"]

    def test_lookup(self):
        assert "math" in DEFAULT_CATALOG
        assert "astrology" not in DEFAULT_CATALOG
        assert DEFAULT_CATALOG.get("history").name == "Histoire"
        assert DEFAULT_CATALOG.get("astrology") is None

    def test_definitions_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_CATALOG.get("math").total_questions = 99

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError):
            ModuleCatalog([ModuleDefinition("a", "A", 1), ModuleDefinition("a", "B", 2)])

    def test_rejects_empty_module(self):
        with pytest.raises(ValueError):
            ModuleDefinition("a", "A", 0)

    def test_from_dict_accepts_both_key_styles(self):
        catalog = ModuleCatalog.from_dict(
            {
                "art": {"name": "Art", "totalQuestions": 5, "emoji": "🎨"},
                "music": {"name": "Music", "total_questions": 6},
            }
        )
        assert catalog.get("art").total_questions == 5
        assert catalog.get("music").total_questions == 6
        assert catalog.get("music").emoji == "📚"

    def test_from_dict_requires_question_count(self):
        with pytest.raises(ValueError):
            ModuleCatalog.from_dict({"art": {"name": "Art"}})

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"geo": {"name": "Geo", "totalQuestions": 3}}), encoding="utf-8")
        catalog = ModuleCatalog.from_json_file(path)
        assert catalog.module_ids() == ["geo"]

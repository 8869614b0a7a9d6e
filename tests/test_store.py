"""Tests for the Configuration model and its JSON store."""

import json

import pytest
from pydantic import ValidationError

from unmark.parsers.md_parser import MARKDOWN_PATTERNS
from unmark.store import ConfigStore, Configuration, ConfigurationError


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "unmark.json")


class TestConfiguration:
    def test_defaults(self):
        config = Configuration()
        assert config.custom_phrases == ("", "", "")
        assert all(config.is_enabled(p.key) for p in MARKDOWN_PATTERNS)
        assert config.loose_list is False

    def test_phrases_padded_and_truncated(self):
        assert Configuration(customPhrases=["a"]).custom_phrases == ("a", "", "")
        long = Configuration(customPhrases=["a", "b", "c", "d"])
        assert long.custom_phrases == ("a", "b", "c")

    def test_edits_return_new_values(self):
        config = Configuration()
        edited = config.with_custom_phrase(1, "foo").with_pattern_enabled(
            "header", False
        )
        assert edited.custom_phrases == ("", "foo", "")
        assert not edited.is_enabled("header")
        assert config.custom_phrases == ("", "", "")
        assert config.is_enabled("header")

    def test_with_loose_list(self):
        assert Configuration().with_loose_list(True).loose_list is True

    def test_phrase_index_out_of_range(self):
        with pytest.raises(IndexError):
            Configuration().with_custom_phrase(3, "x")

    def test_unknown_pattern_rejected_on_edit(self):
        with pytest.raises(ValueError):
            Configuration().with_pattern_enabled("bogus", True)

    def test_frozen(self):
        config = Configuration()
        with pytest.raises(ValidationError):
            config.loose_list = True

    def test_enabled_patterns_read_only(self):
        config = Configuration()
        with pytest.raises(TypeError):
            config.enabled_patterns["header"] = False
        with pytest.raises(TypeError):
            config.enabled_patterns.update({"header": False})
        assert config.is_enabled("header")

    def test_edited_patterns_stay_read_only(self):
        edited = Configuration().with_pattern_enabled("header", False)
        with pytest.raises(TypeError):
            edited.enabled_patterns["header"] = True
        loaded = Configuration(enabledPatterns={"quote": False})
        with pytest.raises(TypeError):
            del loaded.enabled_patterns["quote"]

    def test_record_uses_camel_case(self):
        record = Configuration().to_record()
        assert set(record) == {"customPhrases", "enabledPatterns", "looseList"}
        assert record["customPhrases"] == ["", "", ""]


class TestConfigStore:
    def test_missing_file_gives_defaults(self, store):
        assert store.load() == Configuration()

    def test_round_trip(self, store):
        config = Configuration().with_custom_phrase(0, "foo").with_loose_list(True)
        store.save(config)
        assert store.load() == config

    def test_save_creates_parent_dirs(self, tmp_path):
        nested = ConfigStore(tmp_path / "a" / "b" / "unmark.json")
        nested.save(Configuration())
        assert nested.path.exists()

    def test_missing_keys_filled(self, store):
        store.path.write_text(
            json.dumps(
                {"customPhrases": ["foo"], "enabledPatterns": {"header": False}}
            ),
            encoding="utf-8",
        )
        config = store.load()
        assert config.custom_phrases == ("foo", "", "")
        assert not config.is_enabled("header")
        assert config.is_enabled("task")
        assert config.loose_list is False

    def test_unknown_pattern_keys_kept(self, store):
        store.path.write_text(
            json.dumps({"enabledPatterns": {"future-key": True}}), encoding="utf-8"
        )
        config = store.load()
        assert config.enabled_patterns["future-key"] is True
        assert config.is_enabled("quote")

    def test_plugin_record_loads(self, store):
        record = {
            "customPhrases": ["TODO", "", ""],
            "enabledPatterns": {p.key.value: True for p in MARKDOWN_PATTERNS},
        }
        store.path.write_text(json.dumps(record), encoding="utf-8")
        assert store.load().custom_phrases[0] == "TODO"

    def test_invalid_json(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            store.load()

    def test_non_object(self, store):
        store.path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            store.load()

    def test_invalid_values(self, store):
        store.path.write_text(json.dumps({"looseList": "maybe"}), encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            store.load()

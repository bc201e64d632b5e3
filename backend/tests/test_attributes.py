"""Tests for the attribute configuration registry."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from welfaretrack.errors import ConfigurationError
from welfaretrack.validation.attributes import (
    AttributeNotManagedError,
    AttributeRegistry,
    find_similar_attribute,
    levenshtein_distance,
)


@pytest.fixture
def registry(config_dir):
    return AttributeRegistry(config_dir)


class TestDisplayNames:
    def test_configured_display_name(self, registry):
        assert registry.get_display_name("customer", "customer_type") == "Customer type"
        assert registry.get_display_name("department", "name") == "Department name"

    def test_unconfigured_attribute_is_humanized(self, registry):
        assert registry.get_display_name("customer", "phone_number") == "Phone number"
        assert registry.get_display_name("customer", "branch_id") == "Branch"

    def test_managed_attributes_in_file_order(self, registry):
        assert registry.managed_attributes("customer") == [
            "name", "customer_type", "status", "department_id",
        ]

    def test_available_entities(self, registry):
        assert registry.available_entities() == ["customer", "department", "user", "work_record"]


class TestChoiceDisplayNames:
    def test_configured_choices(self, registry):
        choices = registry.get_choice_display_names("customer", "customer_type")
        assert choices["premium"] == "Premium"
        assert set(choices) == {"regular", "premium", "corporate"}

    def test_unconfigured_attribute_returns_empty_and_warns(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="welfaretrack.validation.attributes"):
            choices = registry.get_choice_display_names("customer", "nickname")

        assert dict(choices) == {}
        assert any("customer#nickname" in r.message for r in caplog.records)

    def test_configuration_is_read_only(self, registry):
        config = registry.get_entity_config("customer")
        with pytest.raises(TypeError):
            config["name"] = {}  # type: ignore[index]


class TestAssertManaged:
    def test_managed_attribute_passes(self, registry):
        registry.assert_managed("customer", "name")

    def test_unmanaged_attribute_raises_with_suggestion(self, registry):
        with pytest.raises(AttributeNotManagedError) as exc_info:
            registry.assert_managed("customer", "nmae")

        error = exc_info.value
        assert isinstance(error, ConfigurationError)
        assert error.suggestion == "name"
        message = str(error)
        assert "Attribute ':nmae' is not managed for the customer entity." in message
        assert "Managed attributes: name, customer_type, status, department_id" in message
        assert "Did you mean ':name'?" in message

    def test_entity_without_configuration(self, registry):
        with pytest.raises(AttributeNotManagedError, match="has no managed attributes"):
            registry.assert_managed("invoice", "total")


class TestSimilarity:
    def test_levenshtein_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_case_insensitive_exact_match_wins(self):
        assert find_similar_attribute("NAME", ["nam", "name"]) == "name"

    def test_substring_before_distance(self):
        assert find_similar_attribute("type", ["status", "customer_type"]) == "customer_type"

    def test_substring_ignores_case(self):
        assert find_similar_attribute("type", ["status", "customerType"]) == "customerType"
        assert find_similar_attribute("CustomerTypeCode", ["name", "customertype"]) == "customertype"

    def test_smallest_distance(self):
        assert find_similar_attribute("stauts", ["name", "status"]) == "status"

    def test_no_candidates(self):
        assert find_similar_attribute("name", []) is None


class TestLoading:
    def test_missing_file_is_empty_and_warns(self, tmp_path, caplog):
        registry = AttributeRegistry(tmp_path)
        with caplog.at_level(logging.WARNING, logger="welfaretrack.validation.attributes"):
            assert dict(registry.get_entity_config("customer")) == {}
        assert any("not found" in r.message for r in caplog.records)

    def test_malformed_file_is_empty_and_logs_error(self, tmp_path, caplog):
        (tmp_path / "validations").mkdir()
        (tmp_path / "validations" / "customer.yml").write_text("customer: [broken", encoding="utf-8")
        registry = AttributeRegistry(tmp_path)

        with caplog.at_level(logging.ERROR, logger="welfaretrack.validation.attributes"):
            assert registry.managed_attributes("customer") == []
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_non_mapping_document_is_empty(self, tmp_path):
        (tmp_path / "validations").mkdir()
        (tmp_path / "validations" / "customer.yml").write_text("- name\n- status\n", encoding="utf-8")
        assert AttributeRegistry(tmp_path).managed_attributes("customer") == []

    def test_repeat_lookups_return_same_object(self, registry):
        assert registry.get_entity_config("customer") is registry.get_entity_config("customer")

    def test_concurrent_first_access_reads_file_once(self, config_dir, monkeypatch):
        registry = AttributeRegistry(config_dir)
        calls = []
        original = registry._read_config_file

        def slow_read(entity_type):
            calls.append(entity_type)
            time.sleep(0.05)
            return original(entity_type)

        monkeypatch.setattr(registry, "_read_config_file", slow_read)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: registry.get_entity_config("customer"), range(16)))

        assert calls == ["customer"]
        assert all(r is results[0] for r in results)

    def test_reload_single_entity(self, tmp_path):
        (tmp_path / "validations").mkdir()
        path = tmp_path / "validations" / "customer.yml"
        path.write_text("customer:\n  name:\n    display_name: Name\n", encoding="utf-8")
        registry = AttributeRegistry(tmp_path)
        assert registry.get_display_name("customer", "name") == "Name"

        path.write_text("customer:\n  name:\n    display_name: Full name\n", encoding="utf-8")
        registry.reload("customer")
        assert registry.get_display_name("customer", "name") == "Full name"

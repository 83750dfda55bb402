"""
Unit tests for ConfigValidator
Schema validation, consistency checks and the startup hook
"""

import copy
import json

import pytest

from storefront.services.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    get_validator,
    validate_configs_on_startup,
)
from storefront.services.config.configuration_service import DEFAULT_CATALOG_CONFIG


@pytest.fixture
def valid_config():
    config = copy.deepcopy(DEFAULT_CATALOG_CONFIG)
    config["version"] = "1.0"
    return config


@pytest.fixture
def validator_for(write_catalog_config, test_config_dir):
    """Validator over a written catalog_config.json and the packaged schema"""

    def _make(config: dict) -> ConfigValidator:
        config_dir = write_catalog_config(config)
        return ConfigValidator(config_dir=config_dir, schema_dir=test_config_dir / "schemas")

    return _make


@pytest.mark.unit
@pytest.mark.config
class TestConfigValidator:

    def test_packaged_config_is_valid(self, test_config_dir):
        report = ConfigValidator(config_dir=test_config_dir).validate_all()

        assert report.overall_valid
        assert report.to_dict()["total_errors"] == 0

    def test_schema_violation(self, validator_for, valid_config):
        valid_config["search"]["debounce_ms"] = "fast"

        result = validator_for(valid_config).validate_config_schema("catalog_config")

        assert not result.is_valid
        assert any("Schema validation failed" in error for error in result.errors)
        assert any("search.debounce_ms" in error for error in result.errors)

    def test_missing_required_section(self, validator_for, valid_config):
        del valid_config["navigator"]

        result = validator_for(valid_config).validate_config_schema("catalog_config")
        assert not result.is_valid

    def test_missing_config_file(self, tmp_path, test_config_dir):
        validator = ConfigValidator(config_dir=tmp_path, schema_dir=test_config_dir / "schemas")

        report = validator.validate_all()

        assert not report.overall_valid
        assert report.to_dict()["invalid_configs"] == 2

    def test_invalid_json(self, tmp_path, test_config_dir):
        (tmp_path / "catalog_config.json").write_text("{ nope")
        validator = ConfigValidator(config_dir=tmp_path, schema_dir=test_config_dir / "schemas")

        result = validator.validate_config_schema("catalog_config")
        assert any("Invalid JSON" in error for error in result.errors)

    def test_missing_schema(self, write_catalog_config, valid_config, tmp_path):
        config_dir = write_catalog_config(valid_config)
        validator = ConfigValidator(config_dir=config_dir, schema_dir=tmp_path / "no-schemas")

        result = validator.validate_config_schema("catalog_config")
        assert any("File not found" in error for error in result.errors)

    def test_default_page_size_must_be_allowed(self, validator_for, valid_config):
        valid_config["pagination"]["default_page_size"] = 10

        result = validator_for(valid_config).validate_catalog_consistency()

        assert not result.is_valid
        assert "default_page_size 10" in result.errors[0]

    def test_duplicate_brand_is_a_warning(self, validator_for, valid_config):
        valid_config["brands"] = ["Apple", "apple", "Samsung"]

        result = validator_for(valid_config).validate_catalog_consistency()

        assert result.is_valid
        assert result.warnings == ["Duplicate brand in vocabulary: apple"]

    def test_leave_shorter_than_hover_is_a_warning(self, validator_for, valid_config):
        valid_config["navigator"]["leave_reset_ms"] = 10

        result = validator_for(valid_config).validate_catalog_consistency()

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_config_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CATALOG_CONFIG_DIR", str(tmp_path))

        validator = ConfigValidator()

        assert validator.config_dir == tmp_path
        assert validator.schema_dir == tmp_path / "schemas"


@pytest.mark.unit
@pytest.mark.config
class TestValidationReport:

    def test_result_to_dict(self):
        result = ValidationResult(is_valid=True, errors=[], warnings=[], config_name="catalog_config")
        result.add_warning("minor")
        result.add_error("major")

        data = result.to_dict()

        assert data["is_valid"] is False
        assert data["error_count"] == 1
        assert data["warning_count"] == 1

    def test_startup_validation_uses_singleton(self, test_config_dir, monkeypatch):
        monkeypatch.setenv("CATALOG_CONFIG_DIR", str(test_config_dir))

        is_valid, report = validate_configs_on_startup()

        assert is_valid
        assert report["total_configs"] == 2
        assert get_validator() is get_validator()

    def test_startup_validation_reports_failures(self, write_catalog_config, monkeypatch, test_config_dir):
        config_dir = write_catalog_config({"version": "1.0"})
        (config_dir / "schemas").mkdir()
        (config_dir / "schemas" / "catalog_config.schema.json").write_text(
            (test_config_dir / "schemas" / "catalog_config.schema.json").read_text()
        )
        monkeypatch.setenv("CATALOG_CONFIG_DIR", str(config_dir))

        is_valid, report = validate_configs_on_startup()

        assert not is_valid
        assert json.loads(json.dumps(report))["total_errors"] >= 1

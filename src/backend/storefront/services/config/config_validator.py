"""
Configuration Validator Service
Validates configuration files against JSON schemas and performs consistency checks
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Tuple, Any, Optional
from jsonschema import validate, ValidationError, SchemaError
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    config_name: str

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            "config_name": self.config_name,
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings)
        }


@dataclass
class ValidationReport:
    """Complete validation report for all configs"""
    results: List[ValidationResult]
    overall_valid: bool
    timestamp: str

    @classmethod
    def create(cls, results: List[ValidationResult]):
        """Create report from results"""
        return cls(
            results=results,
            overall_valid=all(r.is_valid for r in results),
            timestamp=datetime.now(timezone.utc).isoformat()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "overall_valid": self.overall_valid,
            "timestamp": self.timestamp,
            "total_configs": len(self.results),
            "valid_configs": sum(1 for r in self.results if r.is_valid),
            "invalid_configs": sum(1 for r in self.results if not r.is_valid),
            "total_errors": sum(len(r.errors) for r in self.results),
            "total_warnings": sum(len(r.warnings) for r in self.results),
            "results": [r.to_dict() for r in self.results]
        }


class ConfigValidator:
    """
    Configuration validator with JSON schema validation and consistency checks
    """

    def __init__(self, config_dir: Optional[Path] = None, schema_dir: Optional[Path] = None):
        """
        Initialize validator

        Args:
            config_dir: Path to config directory (defaults to storefront/config)
            schema_dir: Path to schema directory (defaults to <config_dir>/schemas)
        """
        if config_dir is None:
            config_dir = os.getenv("CATALOG_CONFIG_DIR") or Path(__file__).parent.parent.parent / "config"
        if schema_dir is None:
            schema_dir = Path(config_dir) / "schemas"

        self.config_dir = Path(config_dir)
        self.schema_dir = Path(schema_dir)

        self._schema_cache: Dict[str, Dict[str, Any]] = {}

        logger.info(f"ConfigValidator initialized - config_dir: {self.config_dir}, schema_dir: {self.schema_dir}")

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from schemas directory

        Raises:
            FileNotFoundError: If schema file doesn't exist
            json.JSONDecodeError: If schema is invalid JSON
        """
        if schema_name in self._schema_cache:
            return self._schema_cache[schema_name]

        schema_path = self.schema_dir / f"{schema_name}.schema.json"

        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        self._schema_cache[schema_name] = schema
        logger.debug(f"Loaded schema: {schema_name}")

        return schema

    def load_config(self, config_name: str) -> Dict[str, Any]:
        """
        Load configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
            json.JSONDecodeError: If config is invalid JSON
        """
        config_path = self.config_dir / f"{config_name}.json"

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)

        return config

    def validate_config_schema(self, config_name: str, schema_name: Optional[str] = None) -> ValidationResult:
        """
        Validate config file against its JSON schema

        Args:
            config_name: Name of config file to validate
            schema_name: Name of schema (defaults to config_name)

        Returns:
            ValidationResult with errors and warnings
        """
        if schema_name is None:
            schema_name = config_name

        result = ValidationResult(
            is_valid=True,
            errors=[],
            warnings=[],
            config_name=config_name
        )

        try:
            config = self.load_config(config_name)
            schema = self.load_schema(schema_name)

            validate(instance=config, schema=schema)

            logger.info(f"Config '{config_name}' passed schema validation")

        except FileNotFoundError as e:
            result.add_error(f"File not found: {str(e)}")
        except json.JSONDecodeError as e:
            result.add_error(f"Invalid JSON: {str(e)}")
        except ValidationError as e:
            result.add_error(f"Schema validation failed: {e.message}")
            if e.path:
                result.add_error(f"  Path: {'.'.join(str(p) for p in e.path)}")
        except SchemaError as e:
            result.add_error(f"Invalid schema: {str(e)}")

        return result

    def validate_catalog_consistency(self) -> ValidationResult:
        """
        Validate cross-field consistency of catalog_config

        Checks:
        - default_page_size is one of allowed_page_sizes
        - brand vocabulary has no case-insensitive duplicates
        - leave reset delay is not shorter than the hover debounce
        """
        result = ValidationResult(
            is_valid=True,
            errors=[],
            warnings=[],
            config_name="catalog_consistency"
        )

        try:
            config = self.load_config("catalog_config")
        except (FileNotFoundError, json.JSONDecodeError) as e:
            result.add_error(f"Cannot load catalog_config: {e}")
            return result

        pagination = config.get("pagination", {})
        allowed = pagination.get("allowed_page_sizes", [])
        default = pagination.get("default_page_size")
        if default not in allowed:
            result.add_error(
                f"default_page_size {default} is not in allowed_page_sizes {allowed}"
            )

        seen = set()
        for brand in config.get("brands", []):
            key = str(brand).lower()
            if key in seen:
                result.add_warning(f"Duplicate brand in vocabulary: {brand}")
            seen.add(key)

        navigator = config.get("navigator", {})
        hover_ms = navigator.get("hover_debounce_ms", 0)
        leave_ms = navigator.get("leave_reset_ms", 0)
        if leave_ms < hover_ms:
            result.add_warning(
                f"leave_reset_ms ({leave_ms}) is shorter than hover_debounce_ms ({hover_ms})"
            )

        return result

    def validate_all(self) -> ValidationReport:
        """
        Run all validations and generate comprehensive report

        Returns:
            ValidationReport with all results
        """
        logger.info("Starting configuration validation...")

        results = [
            self.validate_config_schema("catalog_config"),
            self.validate_catalog_consistency(),
        ]

        report = ValidationReport.create(results)

        if report.overall_valid:
            logger.info("All configuration validations passed")
        else:
            logger.error(f"Configuration validation failed with {report.to_dict()['total_errors']} errors")

        return report


# Singleton instance
_validator: Optional[ConfigValidator] = None


def get_validator() -> ConfigValidator:
    """Get singleton validator instance"""
    global _validator
    if _validator is None:
        _validator = ConfigValidator()
    return _validator


def validate_configs_on_startup() -> Tuple[bool, Dict[str, Any]]:
    """
    Validate all configs on application startup

    Returns:
        Tuple of (is_valid, report_dict)

    Raises:
        RuntimeError: If validation itself crashes
    """
    try:
        validator = get_validator()
        report = validator.validate_all()

        if not report.overall_valid:
            logger.error("Configuration validation failed on startup")
            logger.error(f"Report: {json.dumps(report.to_dict(), indent=2)}")

        return report.overall_valid, report.to_dict()

    except Exception as e:
        logger.exception(f"Fatal error during startup validation: {e}")
        raise RuntimeError(f"Configuration validation failed: {str(e)}")

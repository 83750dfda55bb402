"""
Configuration Service
Centralized configuration management with caching and validation
"""

import copy
import json
import os
from functools import lru_cache
from typing import Dict, List, Any, Optional
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CATALOG_CONFIG_NAME = "catalog_config"

# Used when catalog_config.json is missing or unreadable
DEFAULT_CATALOG_CONFIG: Dict[str, Any] = {
    "version": "builtin",
    "pagination": {
        "allowed_page_sizes": [12, 24, 48],
        "default_page_size": 12,
        "visible_page_delta": 2,
    },
    "search": {
        "min_query_length": 2,
        "debounce_ms": 300,
        "destinations": {
            "parts": "/repairs",
            "accessories": "/accessories",
            "generic": "/search",
        },
    },
    "navigator": {
        "hover_debounce_ms": 50,
        "leave_reset_ms": 300,
        "other_series_label": "Other",
        "browse_all_url": "/parts",
    },
    "related_searches": {
        "limit": 4,
        "fallback_limit": 3,
        "name_words": 4,
    },
    "brands": [
        "Apple", "Samsung", "Huawei", "Xiaomi", "OnePlus", "Sony", "Google", "Nokia",
        "Motorola", "LG", "HTC", "Asus", "Acer", "Lenovo", "Microsoft", "Honor",
        "Realme", "Oppo", "Vivo", "Nothing", "Fairphone", "Alcatel", "BlackBerry",
        "Meizu", "ZTE", "TCL", "Panasonic", "Sharp", "Philips", "Amazon",
    ],
}


class ConfigurationService:
    """
    Centralized service for loading and caching application configurations

    Loads configurations from JSON files in the config directory with:
    - LRU caching for performance
    - Built-in defaults when the catalog config cannot be read
    - Hot-reload capability
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ConfigurationService

        Args:
            config_dir: Path to configuration directory. If None, uses
                CATALOG_CONFIG_DIR or the packaged storefront/config
        """
        if config_dir is None:
            config_dir = os.getenv("CATALOG_CONFIG_DIR")

        if config_dir is None:
            # Default to storefront/config directory
            self.config_dir = Path(__file__).parent.parent.parent / "config"
        else:
            self.config_dir = Path(config_dir)

        logger.info(f"ConfigurationService initialized with config_dir: {self.config_dir}")

    @lru_cache(maxsize=32)
    def load_config(self, config_name: str) -> Dict[str, Any]:
        """
        Load configuration from JSON file with caching

        Args:
            config_name: Name of config file (without .json extension)

        Returns:
            Dict containing configuration data

        Raises:
            FileNotFoundError: If config file not found
            json.JSONDecodeError: If config file is invalid JSON
        """
        try:
            config_path = self.config_dir / f"{config_name}.json"

            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")

            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)

            logger.info(f"Loaded config: {config_name} (version: {config.get('version', 'N/A')})")
            return config

        except FileNotFoundError:
            logger.error(f"Config file not found: {config_name}.json")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {config_name}.json: {e}")
            raise

    def reload_config(self, config_name: str) -> Dict[str, Any]:
        """
        Force reload of configuration (clears cache)

        Args:
            config_name: Name of config file to reload

        Returns:
            Freshly loaded configuration
        """
        self.load_config.cache_clear()
        logger.info(f"Cache cleared, reloading config: {config_name}")
        return self.load_config(config_name)

    def get_catalog_config(self) -> Dict[str, Any]:
        """
        Get catalog browsing configuration, falling back to built-in defaults.

        Sections missing from the file are filled in from the defaults, so
        a partial file only overrides what it names.
        """
        try:
            loaded = self.load_config(CATALOG_CONFIG_NAME)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.warning(f"Using built-in catalog configuration ({e})")
            return copy.deepcopy(DEFAULT_CATALOG_CONFIG)

        merged = copy.deepcopy(DEFAULT_CATALOG_CONFIG)
        for section, value in loaded.items():
            if isinstance(value, dict) and isinstance(merged.get(section), dict):
                merged[section].update(value)
            else:
                merged[section] = value
        return merged

    def get_allowed_page_sizes(self) -> List[int]:
        """Get the page sizes a listing may be rendered with"""
        return list(self.get_catalog_config()["pagination"]["allowed_page_sizes"])

    def get_default_page_size(self) -> int:
        """Get the default page size"""
        return int(self.get_catalog_config()["pagination"]["default_page_size"])

    def get_visible_page_delta(self) -> int:
        """Get how many page links to show on each side of the current page"""
        return int(self.get_catalog_config()["pagination"].get("visible_page_delta", 2))

    def get_search_settings(self) -> Dict[str, Any]:
        """
        Get live search settings

        Returns:
            Dict with min_query_length, debounce_ms and destinations
        """
        return self.get_catalog_config()["search"]

    def get_destinations(self) -> Dict[str, str]:
        """Get listing URLs used for search routing"""
        return dict(self.get_search_settings()["destinations"])

    def get_navigator_settings(self) -> Dict[str, Any]:
        """Get mega-menu navigator timings and labels"""
        return self.get_catalog_config()["navigator"]

    def get_related_search_settings(self) -> Dict[str, Any]:
        """Get related search generation limits"""
        return self.get_catalog_config().get("related_searches", {})

    def get_brand_vocabulary(self) -> List[str]:
        """
        Get the known-brand vocabulary used for brand extraction

        The navigator's catch-all series label is a bucket, not a brand,
        and is never part of the vocabulary.
        """
        other_label = self.get_navigator_settings().get("other_series_label", "Other").lower()
        return [brand for brand in self.get_catalog_config()["brands"] if brand.lower() != other_label]


# Global singleton instance
_config_service: Optional[ConfigurationService] = None


def get_config_service() -> ConfigurationService:
    """
    Get global ConfigurationService singleton instance

    Returns:
        ConfigurationService instance
    """
    global _config_service
    if _config_service is None:
        _config_service = ConfigurationService()
    return _config_service


def init_config_service(config_dir: Optional[str] = None) -> ConfigurationService:
    """
    Initialize global ConfigurationService with custom config directory

    Args:
        config_dir: Path to configuration directory

    Returns:
        ConfigurationService instance
    """
    global _config_service
    _config_service = ConfigurationService(config_dir)
    logger.info("Global ConfigurationService initialized")
    return _config_service

"""
Pytest configuration and shared fixtures
Provides common test fixtures for all test modules
"""

import json
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, List, Tuple

import pytest

# Add backend directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.models.catalog import CatalogItem, ItemKind
from storefront.models.search import SearchResult
from storefront.services.config.configuration_service import ConfigurationService
from storefront.services.scheduling.timers import Scheduler

PACKAGED_CONFIG_DIR = Path(__file__).parent.parent / "storefront" / "config"


class FakeScheduler(Scheduler):
    """
    Manual clock for timer-driven tests.

    Timers fire only when advance() moves the clock past their due time,
    in due-time order.
    """

    def __init__(self):
        self.now = 0.0
        self._timers = {}
        self._counter = 0
        self.scheduled: List[Tuple[str, float]] = []

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        self.cancel(key)
        self._counter += 1
        self._timers[key] = (self.now + delay, self._counter, callback)
        self.scheduled.append((key, delay))

    def cancel(self, key: str) -> bool:
        return self._timers.pop(key, None) is not None

    def is_pending(self, key: str) -> bool:
        return key in self._timers

    def cancel_all(self) -> None:
        self._timers.clear()

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [
                (when, order, key)
                for key, (when, order, _) in self._timers.items()
                if when <= target + 1e-9
            ]
            if not due:
                break
            when, _, key = min(due)
            _, _, callback = self._timers.pop(key)
            self.now = when
            callback()
        self.now = target


@pytest.fixture
def fake_scheduler():
    """Scheduler driven by advance(seconds) instead of the event loop"""
    return FakeScheduler()


@pytest.fixture(scope="session")
def test_config_dir():
    """
    Temporary config directory holding a copy of the packaged catalog config
    and its schema. Session-scoped, tests must not modify it.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        config_dir = Path(tmpdir)
        shutil.copy(PACKAGED_CONFIG_DIR / "catalog_config.json", config_dir / "catalog_config.json")
        shutil.copytree(PACKAGED_CONFIG_DIR / "schemas", config_dir / "schemas")
        yield config_dir


@pytest.fixture
def config_service(test_config_dir):
    """
    ConfigurationService over the test config directory
    Function-scoped fixture, new instance per test
    """
    service = ConfigurationService(str(test_config_dir))
    service.load_config.cache_clear()
    return service


@pytest.fixture
def write_catalog_config(tmp_path):
    """Write a catalog_config.json into a fresh directory and return the directory"""

    def _write(config: dict) -> Path:
        (tmp_path / "catalog_config.json").write_text(json.dumps(config))
        return tmp_path

    return _write


@pytest.fixture
def sample_items() -> List[CatalogItem]:
    """Small mixed accessory catalog"""
    return [
        CatalogItem(
            id="acc-1", name="iPhone 15 Case", category="CASE", brand="Apple",
            price=20.0, stock=5, min_stock=2, compatibility="iPhone 15, iPhone 15 Pro",
            description="Silicone case", device_type="SMARTPHONE",
        ),
        CatalogItem(
            id="acc-2", name="Galaxy Charger", category="CHARGER", brand="Samsung",
            price=15.0, stock=0, min_stock=1, compatibility="Galaxy S24",
            description="25W fast charger", device_type="SMARTPHONE",
        ),
        CatalogItem(
            id="acc-3", name="USB-C Cable 2m", category="CABLE",
            price=9.5, stock=40, min_stock=10,
            description="Braided USB-C cable",
        ),
        CatalogItem(
            id="acc-4", name="iPhone 14 Screen Protector", category="SCREEN_PROTECTOR",
            price=12.0, stock=3, min_stock=5, compatibility="iPhone 14",
            description="Apple iPhone 14 tempered glass", device_type="SMARTPHONE",
        ),
        CatalogItem(
            id="acc-5", name="iPad Stand", category="STAND",
            price=35.0, stock=8, min_stock=2, compatibility="iPad Air, iPad Pro",
            description="Aluminium stand", device_type="TABLET",
        ),
    ]


@pytest.fixture
def sample_parts() -> List[CatalogItem]:
    """Repair parts that carry no explicit brand"""
    return [
        CatalogItem(
            id="part-1", name="Screen Assembly", kind=ItemKind.PART, price=129.0, stock=4,
            device_model="Samsung Galaxy S24 Ultra", device_type="SMARTPHONE", quality="OEM",
        ),
        CatalogItem(
            id="part-2", name="Battery", kind=ItemKind.PART, price=49.0, stock=0,
            device_model="iPhone 15", description="Apple iPhone 15 battery",
            device_type="SMARTPHONE",
        ),
        CatalogItem(
            id="part-3", name="Charging Port", kind=ItemKind.PART, price=19.0, stock=12,
            device_model="iPhone 15", description="Charging port flex", device_type="SMARTPHONE",
        ),
    ]


def make_result(result_id: str, kind: ItemKind, score=None, title=None) -> SearchResult:
    prefix = "parts" if kind == ItemKind.PART else "accessories"
    return SearchResult(
        id=result_id,
        title=title or result_id,
        kind=kind,
        url=f"/{prefix}/{result_id}",
        score=score,
    )


@pytest.fixture
def result_factory():
    """Build SearchResult objects: result_factory("p1", ItemKind.PART, 0.8)"""
    return make_result


# Pytest markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "config: Configuration system tests")
    config.addinivalue_line("markers", "services: Service layer tests")


# Auto-use fixtures
@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """
    Reset singleton instances before each test
    Ensures test isolation
    """
    import storefront.services.config.config_validator as validator_module
    import storefront.services.config.configuration_service as config_module

    monkeypatch.delenv("CATALOG_CONFIG_DIR", raising=False)
    config_module._config_service = None
    validator_module._validator = None

    yield

    config_module._config_service = None
    validator_module._validator = None

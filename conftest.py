"""
Root conftest.py for pytest configuration

Applies markers automatically based on test location:
- tests/unit/... -> unit, tests/integration/... -> integration
- tests/*/delivery/... -> delivery, tests/*/core/... -> core
"""
import pytest

PRIMARY_MARKERS = {"unit", "integration"}
DOMAIN_MARKERS = ("core", "delivery")


def apply_auto_markers(item: pytest.Item) -> None:
    """Apply primary and domain markers to a test item based on its path"""
    test_path = str(item.fspath)
    existing_markers = {mark.name for mark in item.iter_markers()}

    if not existing_markers & PRIMARY_MARKERS:
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)

    for domain in DOMAIN_MARKERS:
        if f"/{domain}/" in test_path and domain not in existing_markers:
            item.add_marker(getattr(pytest.mark, domain))


def pytest_collection_modifyitems(config, items):
    for item in items:
        apply_auto_markers(item)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before each test"""
    from core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""
Shared fixtures for estimator tests.
"""

import pytest

from estimator.core.config import settings
from estimator.services.catalog import CatalogItem, MaterialCategory, load_catalog


@pytest.fixture(scope="session")
def catalog():
    """The bundled materials catalog."""
    return load_catalog(settings.resolved_catalog_path)


@pytest.fixture
def make_item():
    """Factory for ad-hoc catalog items."""
    def _make_item(**overrides) -> CatalogItem:
        fields = {
            "id": "test-item",
            "name": "Test Item",
            "category": MaterialCategory.HARDWARE_MISC,
            "unit": "each",
            "default_unit_cost": 1.0,
        }
        fields.update(overrides)
        return CatalogItem(**fields)
    return _make_item

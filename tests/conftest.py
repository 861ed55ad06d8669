"""
Test configuration for the AAMVA barcode test suite.
"""

import os

import pytest

from aamva_barcode.api import get_processor
from aamva_barcode.config import get_settings
from tests.fixtures.aamva_samples import MANDATORY_VALUES, OPTIONAL_VALUES, SAMPLE_PAYLOAD


# Test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "aamva: mark test as AAMVA container related")
    config.addinivalue_line("markers", "canonical: mark test as canonicalization related")


# Collection settings
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        name = item.name.lower()
        if "decode" in name or "subfile" in name:
            item.add_marker(pytest.mark.aamva)
        if "canonical" in name or "hash" in name:
            item.add_marker(pytest.mark.canonical)


@pytest.fixture(autouse=True)
def clean_settings():
    """Isolate tests from AAMVA_* environment variables and cached settings."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.upper().startswith("AAMVA_"):
            del os.environ[key]
    get_settings.cache_clear()
    get_processor.cache_clear()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()
    get_processor.cache_clear()


@pytest.fixture
def sample_payload() -> bytes:
    """Raw barcode payload with a DL subfile and a ZZ subfile."""
    return SAMPLE_PAYLOAD.encode("utf-8")


@pytest.fixture
def id_payload() -> bytes:
    """The sample payload with every DL designator replaced by ID."""
    return SAMPLE_PAYLOAD.replace("DL", "ID").encode("utf-8")


@pytest.fixture
def dl_fields() -> dict:
    return {**MANDATORY_VALUES, **OPTIONAL_VALUES}

import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from irrf_api.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from sortstepper.plugins import unload_all


@pytest.fixture(autouse=True)
def _clear_custom_sorters():
    """Drop custom sorters registered by a test."""

    yield
    unload_all()


@pytest.fixture
def example_sorter_path():
    return str(ROOT / "example_custom_sorter.py")

"""Test configuration and fixtures for json5_config tests.

Shared schemas live in :mod:`tests.schemas`; this module only provides
temporary locations and test logging.
"""

import pytest
import tempfile
import shutil
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def temp_dir():
    """Creates a temporary directory for test operations."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def settings_path(temp_dir):
    """Path of a not-yet-existing ``settings.json5`` file."""
    return temp_dir / "settings.json5"

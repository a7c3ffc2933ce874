"""Test configuration: put liftlog on the path and share fixtures."""
import sys
from pathlib import Path

import pytest

# Add project root to path so `from liftlog.xxx import` works without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

AS_OF = "2026-03-01T00:00:00Z"


@pytest.fixture
def as_of():
    """Fixed reference instant so time windows are deterministic."""
    return AS_OF

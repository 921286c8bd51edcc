import os
import sys

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))


@pytest.fixture(autouse=True)
def _clean_shared_store():
    """Start every test with an empty process-wide store and zeroed counters."""
    from mcp_context_memory.shared_store import reset_shared_store

    reset_shared_store()
    yield
    reset_shared_store()

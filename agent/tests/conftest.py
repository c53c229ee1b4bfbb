import os
import sys
import pytest
from unittest.mock import MagicMock

# Ensure src is importable for tests
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT_DIR, "src"))

from tools.context import set_context

@pytest.fixture
def mock_setup():
    """Provide a mocked env and chain client, and register them in tools.context."""
    env = MagicMock()
    chain = MagicMock()
    set_context(env=env, chain=chain)
    return (env, chain)

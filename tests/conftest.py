# tests/conftest.py
import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI invocations attach handlers to CliRunner's stderr; drop them after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

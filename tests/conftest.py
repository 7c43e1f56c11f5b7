"""Pytest configuration for chatstream tests.

Puts src/ at the front of sys.path so the package imports without being
installed, and provides helpers shared by the processor tests.
"""
import json
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    """Hook called after command line options have been parsed.

    This runs BEFORE test collection, allowing us to manipulate
    sys.path before any test modules are imported.
    """
    src_path = str(Path(__file__).parent.parent.absolute() / "src")
    if src_path in sys.path:
        sys.path.remove(src_path)
    sys.path.insert(0, src_path)


def jsonl(event: dict) -> str:
    """Serialize an event the way the assistant writes it."""
    return json.dumps(event) + "\n"


@pytest.fixture
def transcript():
    """A fresh replay transcript recording every callback."""
    from chatstream.runner.output import create_output

    return create_output()


@pytest.fixture
def tracker():
    from chatstream.operations.tracker import OperationTracker

    return OperationTracker()

"""Pytest configuration and fixtures

Provides shared fixtures for all tests: a console logger, preview settings
rooted in a temporary extension directory, and in-memory host doubles.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gcad_preview.config import PreviewSettings
from gcad_preview.logger import ConsoleLogger
from gcad_preview.sessions import SessionManager
from mock.host import FakeDocument, FakeHost

# Debounce delay used by tests; short enough to keep the suite fast.
TEST_DEBOUNCE_MS = 20


@pytest.fixture
def console_logger():
    """Create a real ConsoleLogger instance."""
    return ConsoleLogger(level=logging.DEBUG)


@pytest.fixture
def extension_root(tmp_path):
    """Extension directory with placeholder build artifacts."""
    dist = tmp_path / "extension" / "dist"
    dist.mkdir(parents=True)
    (dist / "app.js").write_text("export {};\n", encoding="utf-8")
    (dist / "app.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    return tmp_path / "extension"


@pytest.fixture
def settings(extension_root):
    return PreviewSettings(extension_root=extension_root, debounce_ms=TEST_DEBOUNCE_MS)


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def gcad_document():
    return FakeDocument("cutter_diameter(6.35mm);")


@pytest.fixture
def session_manager(fake_host, settings, console_logger):
    """Create a SessionManager bound to the fake host."""
    return SessionManager(host=fake_host, settings=settings, logger=console_logger)

"""Shared fixtures for the xml_compare test suite."""

import logging
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def write_xml(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write XML text to a file under the test's temporary directory."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo any handler or level the CLI installs on the package logger."""
    package_logger = logging.getLogger("xml_compare")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)

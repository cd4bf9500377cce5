"""Command-line interface module for XML Compare.

This module provides the xml-compare tool for comparing two XML files and
inspecting individual files.
"""

from .main import main

__all__ = ["main"]

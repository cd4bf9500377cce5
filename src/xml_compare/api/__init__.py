"""API module for XML comparison.

This module provides the main entry points with progressive disclosure:
plain functions for one-off comparisons and a configured comparator class.
"""

from .compare import (
    XMLComparator,
    analyze_file,
    compare_canonical,
    compare_streaming,
    validate_input_files,
    validate_output_path,
)

__all__ = [
    "XMLComparator",
    "analyze_file",
    "compare_canonical",
    "compare_streaming",
    "validate_input_files",
    "validate_output_path",
]

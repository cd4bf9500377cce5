"""XML Compare.

Decide whether two XML documents are equivalent, either in strict document
order with bounded memory or ignoring sibling order.

Progressive API Disclosure:
- Level 1: Simple functions - compare_streaming(), compare_canonical(), analyze_file()
- Level 2: Configured comparator - XMLComparator class
- Level 3: Building blocks - event sources, tree builder, canonical matcher
"""

__version__ = "0.1.0"
__author__ = "XML Compare Team"

from .api import XMLComparator, analyze_file, compare_canonical, compare_streaming
from .shared.config import ComparatorConfig
from .shared.errors import (
    ComparisonIOError,
    ComparisonParseError,
    ComparisonResourceError,
    XMLCompareError,
)
from .shared.result import ComparisonResult, DifferenceKind, DifferenceRecord, FileInfo

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple comparison functions
    "compare_streaming",
    "compare_canonical",
    "analyze_file",

    # Level 2: Configured comparator
    "XMLComparator",
    "ComparatorConfig",

    # Result objects
    "ComparisonResult",
    "DifferenceKind",
    "DifferenceRecord",
    "FileInfo",

    # Errors
    "XMLCompareError",
    "ComparisonIOError",
    "ComparisonParseError",
    "ComparisonResourceError",
]

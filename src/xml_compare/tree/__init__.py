"""Tree layer for canonical XML comparison.

This module materializes documents into element trees and matches them
without regard to sibling order.
"""

from .builder import DocumentTreeBuilder, ElementNode, build_tree, parse_element
from .matcher import (
    describe_mismatch,
    elements_equal,
    equal_canonically,
    greedy_match,
)

__all__ = [
    "DocumentTreeBuilder",
    "ElementNode",
    "build_tree",
    "parse_element",
    "describe_mismatch",
    "elements_equal",
    "equal_canonically",
    "greedy_match",
]

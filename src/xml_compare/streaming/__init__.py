"""Streaming comparison layer.

This module provides the bounded-memory, order-sensitive comparator.
"""

from .comparator import (
    DifferenceAccumulator,
    StreamingXMLComparator,
    compare_streaming,
    format_streaming_report,
    write_streaming_report,
)

__all__ = [
    "DifferenceAccumulator",
    "StreamingXMLComparator",
    "compare_streaming",
    "format_streaming_report",
    "write_streaming_report",
]

"""Event layer for XML comparison.

This module turns XML files into lazy sequences of structural events that
both comparators consume.
"""

from .events import (
    Characters,
    EndElement,
    EventType,
    StartDocument,
    StartElement,
    StreamEvent,
)
from .source import XMLEventSource, iter_events, parse_declaration

__all__ = [
    "Characters",
    "EndElement",
    "EventType",
    "StartDocument",
    "StartElement",
    "StreamEvent",
    "XMLEventSource",
    "iter_events",
    "parse_declaration",
]

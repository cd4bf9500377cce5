"""Structural parse events produced by the event source.

Each event is an immutable value; a document is a sequence of them that is
produced lazily and consumed once.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple, Union


class EventType(Enum):
    """Structural kinds of parse events."""

    START_DOCUMENT = auto()
    START_ELEMENT = auto()
    CHARACTERS = auto()
    END_ELEMENT = auto()


@dataclass(frozen=True)
class StartDocument:
    """Beginning of a document, with whatever the XML declaration stated."""

    encoding: Optional[str] = None
    version: Optional[str] = None
    event_type: EventType = field(default=EventType.START_DOCUMENT, init=False)


@dataclass(frozen=True)
class StartElement:
    """Opening tag with its attributes in document order."""

    local_name: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    attribute_count: Optional[int] = None
    event_type: EventType = field(default=EventType.START_ELEMENT, init=False)

    def __post_init__(self) -> None:
        if not self.local_name:
            raise ValueError("Element name cannot be empty")
        if not isinstance(self.attributes, tuple):
            object.__setattr__(self, "attributes", tuple(self.attributes))
        if self.attribute_count is None:
            object.__setattr__(self, "attribute_count", len(self.attributes))


@dataclass(frozen=True)
class Characters:
    """Character data between two markup boundaries (may be empty)."""

    text: str = ""
    event_type: EventType = field(default=EventType.CHARACTERS, init=False)

    @property
    def stripped(self) -> str:
        return self.text.strip()


@dataclass(frozen=True)
class EndElement:
    """Closing tag."""

    local_name: str
    event_type: EventType = field(default=EventType.END_ELEMENT, init=False)


StreamEvent = Union[StartDocument, StartElement, Characters, EndElement]

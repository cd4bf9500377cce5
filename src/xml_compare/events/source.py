"""Bounded-memory event source over an XML file.

The source drives lxml's feed parser with a parser target, reading the file
in fixed-size chunks and handing out one ``StreamEvent`` per pull. Only the
events produced by the current chunk are buffered, so memory does not grow
with document size.

Character data is coalesced: inside the root element every run of text
between two tags becomes exactly one ``Characters`` event, empty when the
run is empty. Two documents that differ only in where formatting
whitespace appears therefore yield aligned event sequences.
"""

import re
from collections import deque
from pathlib import Path
from typing import Any, BinaryIO, Deque, Dict, Iterator, List, Optional, Tuple, Union

from lxml import etree

from xml_compare.events.events import (
    Characters,
    EndElement,
    StartDocument,
    StartElement,
    StreamEvent,
)
from xml_compare.shared.config import SourceConfig
from xml_compare.shared.errors import ComparisonIOError, ComparisonParseError
from xml_compare.shared.logging import get_logger

PathInput = Union[str, Path]

# Wide enough for a UTF-32 declaration; the first read is never shorter.
DECLARATION_SEARCH_BYTES = 1024
XML_DECLARATION_PATTERN = re.compile(
    r'<\?xml\s+version\s*=\s*["\']([^"\']+)["\']'
    r'(?:\s+encoding\s*=\s*["\']([^"\']+)["\'])?'
)

# Byte order marks, longest first so UTF-32 LE is not taken for UTF-16 LE
BOM_PATTERNS: Tuple[Tuple[bytes, str], ...] = (
    (b"\xff\xfe\x00\x00", "utf-32-le"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)

# How "<?" looks in wide encodings when no BOM is present
BOMLESS_PATTERNS: Tuple[Tuple[bytes, str], ...] = (
    (b"\x00\x00\x00<", "utf-32-be"),
    (b"<\x00\x00\x00", "utf-32-le"),
    (b"\x00<\x00?", "utf-16-be"),
    (b"<\x00?\x00", "utf-16-le"),
)


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix lxml puts on qualified names."""
    return tag.rpartition("}")[2]


def _decode_head(head: bytes) -> str:
    """Decode the leading bytes of a document well enough to read its declaration."""
    for bom, codec in BOM_PATTERNS:
        if head.startswith(bom):
            return head[len(bom):].decode(codec, errors="ignore")
    for prefix, codec in BOMLESS_PATTERNS:
        if head.startswith(prefix):
            return head.decode(codec, errors="ignore")
    # ASCII-compatible encodings all spell the declaration the same way
    return head.decode("latin-1")


def parse_declaration(head: bytes) -> StartDocument:
    """Build the StartDocument event from the first bytes of a file."""
    match = XML_DECLARATION_PATTERN.match(_decode_head(head[:DECLARATION_SEARCH_BYTES]))
    if not match:
        return StartDocument()
    return StartDocument(encoding=match.group(2), version=match.group(1))


class _EventCollector:
    """lxml parser target that turns parser callbacks into stream events."""

    def __init__(self) -> None:
        self.events: Deque[StreamEvent] = deque()
        self._text: List[str] = []
        self._depth = 0
        self._root_seen = False

    def _flush_text(self) -> None:
        # Text outside the root element is never reported
        if self._depth > 0:
            self.events.append(Characters("".join(self._text)))
        self._text = []

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        self._flush_text()
        attributes = tuple((_local_name(name), value) for name, value in attrib.items())
        self.events.append(StartElement(_local_name(tag), attributes, len(attributes)))
        self._root_seen = True
        self._depth += 1

    def data(self, data: str) -> None:
        self._text.append(data)

    @property
    def saw_root(self) -> bool:
        return self._root_seen

    def end(self, tag: str) -> None:
        self._flush_text()
        self._depth -= 1
        self.events.append(EndElement(_local_name(tag)))

    def close(self) -> None:
        return None


class XMLEventSource:
    """Pull cursor yielding the structural events of one XML file.

    Example:
        >>> with XMLEventSource("catalog.xml") as source:
        ...     while source.has_next():
        ...         event = source.next_event()
    """

    def __init__(
        self,
        path: PathInput,
        config: Optional[SourceConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.path = Path(path)
        self.config = config or SourceConfig()
        self.events_read = 0
        self.logger = get_logger(__name__, correlation_id, "event_source")

        self._handle: Optional[BinaryIO] = None
        self._parser: Any = None
        self._collector = _EventCollector()
        self._pending = self._collector.events
        self._first_chunk: Optional[bytes] = None
        self._started = False
        self._exhausted = False

    def __enter__(self) -> "XMLEventSource":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __iter__(self) -> Iterator[StreamEvent]:
        while self.has_next():
            yield self.next_event()

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> "XMLEventSource":
        """Open the file and queue the StartDocument event."""
        if self._started:
            return self
        self._started = True
        try:
            self._handle = self.path.open("rb")
            self._first_chunk = self._handle.read(
                max(self.config.chunk_size, DECLARATION_SEARCH_BYTES)
            )
        except OSError as e:
            self.close()
            raise ComparisonIOError(
                f"Cannot open XML file {self.path}: {e.strerror or e}", self.path
            ) from e

        self._parser = etree.XMLParser(
            target=self._collector,
            resolve_entities=self.config.resolve_entities,
            no_network=self.config.no_network,
            huge_tree=self.config.huge_tree,
        )
        self._pending.append(parse_declaration(self._first_chunk))
        self.logger.debug(
            "Opened XML event source",
            extra={"path": str(self.path), "chunk_size": self.config.chunk_size},
        )
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self._parser = None

    def has_next(self) -> bool:
        """Check whether another event is available, reading ahead if needed."""
        if not self._started:
            self.open()
        while not self._pending and not self._exhausted:
            self._read_chunk()
        return bool(self._pending)

    def next_event(self) -> StreamEvent:
        """Return the next event.

        Raises:
            IndexError: If the document has no more events
        """
        if not self.has_next():
            raise IndexError(f"No more events in {self.path}")
        self.events_read += 1
        return self._pending.popleft()

    def _read_chunk(self) -> None:
        if self._first_chunk is not None:
            chunk, self._first_chunk = self._first_chunk, None
        else:
            try:
                chunk = self._handle.read(self.config.chunk_size)
            except OSError as e:
                raise ComparisonIOError(
                    f"Cannot read XML file {self.path}: {e.strerror or e}", self.path
                ) from e

        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._exhausted = True
                self._parser.close()
                if not self._collector.saw_root:
                    raise ComparisonParseError("Document is empty", self.path)
        except etree.LxmlError as e:
            self._exhausted = True
            raise self._parse_error(e) from e

        if self._exhausted:
            self.close()

    def _parse_error(self, error: Exception) -> ComparisonParseError:
        line, column = getattr(error, "position", (None, None)) or (None, None)
        message = getattr(error, "msg", None) or str(error) or "not well-formed"
        self.logger.debug(
            "XML parse failure",
            extra={"path": str(self.path), "line": line, "column": column},
        )
        return ComparisonParseError(message, self.path, line=line, column=column)


def iter_events(
    path: PathInput,
    config: Optional[SourceConfig] = None,
    correlation_id: Optional[str] = None,
) -> Iterator[StreamEvent]:
    """Yield the events of one file, closing it when iteration ends."""
    with XMLEventSource(path, config, correlation_id) as source:
        yield from source

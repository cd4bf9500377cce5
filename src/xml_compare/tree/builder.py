"""Document tree building for canonical comparison.

This module materializes an event stream into ``ElementNode`` trees. Only
the canonical comparison path builds trees; the streaming path never does.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from xml_compare.events import (
    Characters,
    EndElement,
    StartElement,
    XMLEventSource,
)
from xml_compare.shared.config import ComparatorConfig
from xml_compare.shared.logging import get_logger
from xml_compare.tree.matcher import elements_equal

PathInput = Union[str, Path]

MS_PER_SECOND = 1000


@dataclass(eq=False)
class ElementNode:
    """One element of a materialized document tree.

    ``text`` holds the trimmed character data owned directly by this element,
    not by its descendants. Equality is canonical: children are compared as an
    unordered collection.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["ElementNode"] = field(default_factory=list)
    text: str = ""

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementNode):
            return NotImplemented
        return elements_equal(self, other)

    def __hash__(self) -> int:
        # Children are left out so that reordered siblings hash alike
        return hash((self.name, frozenset(self.attributes.items()), self.text))

    def add_child(self, child: "ElementNode") -> None:
        """Append a child element."""
        if not isinstance(child, ElementNode):
            raise TypeError("Child must be an ElementNode instance")
        self.children.append(child)

    def find_children(self, name: str) -> List["ElementNode"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def iter(self) -> Iterator["ElementNode"]:
        """Iterate over this element and all descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def subtree_size(self) -> int:
        """Number of elements in this subtree, including this element."""
        return sum(1 for _ in self.iter())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.attributes:
            result["attributes"] = dict(self.attributes)
        if self.text:
            result["text"] = self.text
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


class DocumentTreeBuilder:
    """Build element trees from XML files."""

    def __init__(
        self,
        config: Optional[ComparatorConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ComparatorConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(self, path: PathInput) -> List[ElementNode]:
        """Build the top-level elements of one file.

        Raises:
            ComparisonIOError: If the file cannot be read
            ComparisonParseError: If the file is not well-formed XML
        """
        start_time = time.time()
        with XMLEventSource(path, self.config.source, self.correlation_id) as source:
            roots = self.build_from_source(source)

        self.logger.debug(
            "Document tree built",
            extra={
                "path": str(path),
                "top_level_elements": len(roots),
                "element_count": sum(root.subtree_size for root in roots),
                "build_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            },
        )
        return roots

    def build_from_source(self, source: XMLEventSource) -> List[ElementNode]:
        """Consume a source and return its top-level elements."""
        roots: List[ElementNode] = []
        while source.has_next():
            event = source.next_event()
            if isinstance(event, StartElement):
                roots.append(parse_element(event, source))
        return roots


def parse_element(start: StartElement, source: XMLEventSource) -> ElementNode:
    """Materialize the element opened by ``start`` from the following events.

    Consumes events up to and including the matching end tag. An explicit
    stack is used so nesting depth is not bounded by the interpreter's
    recursion limit.
    """
    root = ElementNode(start.local_name, dict(start.attributes))
    stack: List[Tuple[ElementNode, List[str]]] = [(root, [])]

    while source.has_next():
        event = source.next_event()
        node, text_parts = stack[-1]

        if isinstance(event, StartElement):
            child = ElementNode(event.local_name, dict(event.attributes))
            node.add_child(child)
            stack.append((child, []))
        elif isinstance(event, Characters):
            text = event.stripped
            if text:
                text_parts.append(text)
        elif isinstance(event, EndElement):
            node.text = "".join(text_parts).strip()
            stack.pop()
            if not stack:
                return root

    # Stream ended before the closing tag
    for node, text_parts in stack:
        node.text = "".join(text_parts).strip()
    return root


def build_tree(
    path: PathInput,
    *,
    config: Optional[ComparatorConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[ElementNode]:
    """Build the top-level elements of an XML file."""
    return DocumentTreeBuilder(config, correlation_id).build(path)

"""Public comparison API.

This module provides the entry points callers use: module-level functions
for one-off comparisons and ``XMLComparator`` for repeated comparisons that
share a configuration and correlation ID.
"""

import os
import time
from pathlib import Path
from typing import Optional, Union

from xml_compare.events import EventType, XMLEventSource
from xml_compare.shared.config import ComparatorConfig
from xml_compare.shared.errors import (
    ComparisonIOError,
    ComparisonResourceError,
    XMLCompareError,
)
from xml_compare.shared.logging import get_logger, new_correlation_id
from xml_compare.shared.result import ComparisonResult, FileInfo
from xml_compare.streaming import StreamingXMLComparator
from xml_compare.tree import DocumentTreeBuilder, describe_mismatch, equal_canonically

PathInput = Union[str, Path]

MS_PER_SECOND = 1000
DEFAULT_ENCODING = "UTF-8"
DEFAULT_XML_VERSION = "1.0"


def _validate_input_file(path: Optional[PathInput], label: str) -> Path:
    if path is None or not str(path).strip():
        raise ComparisonIOError(f"{label} XML file path cannot be null or empty")
    file_path = Path(path)
    if not file_path.exists():
        raise ComparisonIOError(f"{label} XML file does not exist: {path}", path)
    if not file_path.is_file():
        raise ComparisonIOError(f"{label} XML path is not a file: {path}", path)
    if not os.access(file_path, os.R_OK):
        raise ComparisonIOError(f"Cannot read {label.lower()} XML file: {path}", path)
    return file_path


def validate_input_files(path_a: PathInput, path_b: PathInput) -> None:
    """Check that both inputs are existing, readable regular files.

    Raises:
        ComparisonIOError: Naming the first offending path
    """
    _validate_input_file(path_a, "First")
    _validate_input_file(path_b, "Second")


def validate_output_path(output_path: PathInput) -> None:
    """Check that a report can be created at ``output_path``.

    Raises:
        ComparisonIOError: If the path is empty or its directory is missing or read-only
    """
    if output_path is None or not str(output_path).strip():
        raise ComparisonIOError("Output file path cannot be null or empty")
    parent = Path(output_path).absolute().parent
    if not parent.exists():
        raise ComparisonIOError(f"Output directory does not exist: {parent}", output_path)
    if not os.access(parent, os.W_OK):
        raise ComparisonIOError(f"Cannot write to output directory: {parent}", output_path)


class XMLComparator:
    """Comparison facade bound to one configuration.

    Example:
        >>> comparator = XMLComparator(ComparatorConfig.large_files())
        >>> comparator.compare_streaming("a.xml", "b.xml").files_match
        True
    """

    def __init__(
        self,
        config: Optional[ComparatorConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ComparatorConfig()
        self.correlation_id = correlation_id or new_correlation_id()
        self.logger = get_logger(__name__, self.correlation_id, "api")

    def compare_streaming(
        self,
        path_a: PathInput,
        path_b: PathInput,
        output_path: Optional[PathInput] = None,
    ) -> ComparisonResult:
        """Order-sensitive, bounded-memory comparison."""
        validate_input_files(path_a, path_b)
        if output_path is not None:
            validate_output_path(output_path)
        comparator = StreamingXMLComparator(self.config, self.correlation_id)
        return comparator.compare(path_a, path_b, output_path)

    def compare_canonical(self, path_a: PathInput, path_b: PathInput) -> bool:
        """Order-agnostic structural comparison.

        Both documents are held in memory, so this is meant for moderate
        file sizes.

        Raises:
            ComparisonIOError: If a file is missing or unreadable
            ComparisonParseError: If a file is not well-formed XML
            ComparisonResourceError: If memory or recursion depth runs out
        """
        validate_input_files(path_a, path_b)
        start_time = time.time()
        self.logger.info(
            "Starting canonical comparison",
            extra={"file_a": str(path_a), "file_b": str(path_b)},
        )

        builder = DocumentTreeBuilder(self.config, self.correlation_id)
        try:
            elements_a = builder.build(path_a)
            elements_b = builder.build(path_b)
            files_match = equal_canonically(elements_a, elements_b)
            reason = None if files_match else describe_mismatch(elements_a, elements_b)
        except MemoryError as e:
            self.logger.exception("Out of memory during canonical comparison")
            raise ComparisonResourceError(
                "Out of memory during canonical XML comparison", path_a
            ) from e
        except RecursionError as e:
            self.logger.exception("Document nesting too deep for canonical comparison")
            raise ComparisonResourceError(
                "Document nesting too deep for canonical XML comparison", path_a
            ) from e

        self.logger.info(
            "Canonical comparison completed",
            extra={
                "files_match": files_match,
                "reason": reason,
                "elapsed_ms": int((time.time() - start_time) * MS_PER_SECOND),
            },
        )
        return files_match

    def analyze(self, path: PathInput) -> FileInfo:
        """Collect basic facts about one file without raising on bad input."""
        info = FileInfo(path=str(path))
        try:
            file_path = _validate_input_file(path, "Input")
        except ComparisonIOError as e:
            info.error_message = e.message
            return info

        info.size_bytes = file_path.stat().st_size
        depth = 0
        try:
            with XMLEventSource(file_path, self.config.source, self.correlation_id) as source:
                for event in source:
                    if event.event_type is EventType.START_DOCUMENT:
                        info.encoding = event.encoding or DEFAULT_ENCODING
                        info.version = event.version or DEFAULT_XML_VERSION
                    elif event.event_type is EventType.START_ELEMENT:
                        info.element_count += 1
                        depth += 1
                        info.max_depth = max(info.max_depth, depth)
                        if info.root_element is None:
                            info.root_element = event.local_name
                    elif event.event_type is EventType.END_ELEMENT:
                        depth -= 1
        except XMLCompareError as e:
            self.logger.debug("XML analysis failed", extra={"path": str(path)})
            info.valid_xml = False
            info.error_message = f"XML parsing failed: {e}"
            return info

        info.valid_xml = True
        return info


def compare_canonical(
    path_a: PathInput,
    path_b: PathInput,
    *,
    config: Optional[ComparatorConfig] = None,
    correlation_id: Optional[str] = None,
) -> bool:
    """Compare two XML files ignoring sibling order.

    Examples:
        >>> compare_canonical("ordered.xml", "shuffled.xml")
        True
    """
    return XMLComparator(config, correlation_id).compare_canonical(path_a, path_b)


def compare_streaming(
    path_a: PathInput,
    path_b: PathInput,
    output_path: Optional[PathInput] = None,
    *,
    config: Optional[ComparatorConfig] = None,
    correlation_id: Optional[str] = None,
) -> ComparisonResult:
    """Compare two XML files in document order, validating paths first.

    Examples:
        >>> result = compare_streaming("expected.xml", "actual.xml", "diff.txt")
        >>> result.files_match, result.difference_count
        (False, 3)
    """
    return XMLComparator(config, correlation_id).compare_streaming(
        path_a, path_b, output_path
    )


def analyze_file(
    path: PathInput,
    *,
    config: Optional[ComparatorConfig] = None,
) -> FileInfo:
    """Report size, declaration, root element, element count and depth of a file."""
    return XMLComparator(config).analyze(path)

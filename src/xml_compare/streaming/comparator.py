"""Streaming, order-sensitive comparison of two XML files.

The comparator walks both documents in lock-step, one event pair at a time,
and records a difference as soon as the pair disagrees. Only event
alignment, element names, attribute counts and non-empty text are checked;
attribute values are never compared on this path.

Memory use is bounded by the two event sources plus the difference
accumulator, which stops the comparison once its limit is exceeded.
"""

import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import psutil

from xml_compare.events import (
    Characters,
    EndElement,
    EventType,
    StartElement,
    XMLEventSource,
)
from xml_compare.shared.config import ComparatorConfig, StreamingConfig
from xml_compare.shared.errors import ComparisonIOError, ComparisonResourceError
from xml_compare.shared.logging import get_logger, new_correlation_id
from xml_compare.shared.result import (
    ComparisonResult,
    DifferenceKind,
    DifferenceRecord,
)

PathInput = Union[str, Path]

MS_PER_SECOND = 1000
REPORT_TITLE = "Streaming XML Comparison Results"


class DifferenceAccumulator:
    """Ordered, capped collection of difference records.

    Records beyond ``limit`` are not stored; the first one that would
    overflow flips ``overflowed`` so the comparison loop can stop.
    """

    def __init__(self, limit: int) -> None:
        if limit <= 0:
            raise ValueError("Difference limit must be > 0")
        self.limit = limit
        self.overflowed = False
        self._records: List[DifferenceRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def add(
        self,
        kind: DifferenceKind,
        message: str,
        position: Optional[int] = None,
    ) -> None:
        if len(self._records) >= self.limit:
            self.overflowed = True
            return
        self._records.append(DifferenceRecord(kind, message, position))

    def add_advisory(self) -> None:
        """Append the single record explaining why the comparison stopped early."""
        self._records.append(DifferenceRecord(
            DifferenceKind.DIFFERENCE_LIMIT_REACHED,
            f"Too many differences found (>{self.limit}). "
            "Stopping comparison to prevent memory issues.",
        ))

    def add_length_mismatch(self) -> None:
        self._records.append(DifferenceRecord(
            DifferenceKind.LENGTH_MISMATCH, "Files have different lengths"
        ))

    @property
    def records(self) -> Tuple[DifferenceRecord, ...]:
        return tuple(self._records)


class StreamingXMLComparator:
    """Compare two XML files event by event in document order."""

    def __init__(
        self,
        config: Optional[ComparatorConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ComparatorConfig()
        self.correlation_id = correlation_id or new_correlation_id()
        self.logger = get_logger(__name__, self.correlation_id, "streaming_comparator")

    @property
    def streaming_config(self) -> StreamingConfig:
        return self.config.streaming

    def compare(
        self,
        path_a: PathInput,
        path_b: PathInput,
        output_path: Optional[PathInput] = None,
    ) -> ComparisonResult:
        """Compare two files and optionally write a difference report.

        Args:
            path_a: First XML file
            path_b: Second XML file
            output_path: Report file written only when differences exist

        Returns:
            ComparisonResult with match flag, differences and timing

        Raises:
            ComparisonIOError: If a file cannot be read or the report cannot be written
            ComparisonParseError: If either file is not well-formed XML
            ComparisonResourceError: If memory runs out during comparison
        """
        start_time = time.time()
        self.logger.info(
            "Starting streaming comparison",
            extra={"file_a": str(path_a), "file_b": str(path_b)},
        )
        rss_before = self._resident_memory()

        accumulator = DifferenceAccumulator(self.streaming_config.max_differences)
        try:
            with XMLEventSource(path_a, self.config.source, self.correlation_id) as source_a, \
                    XMLEventSource(path_b, self.config.source, self.correlation_id) as source_b:
                files_match, element_count = self._compare_sources(
                    source_a, source_b, accumulator
                )
        except MemoryError as e:
            self.logger.exception(
                "Out of memory during streaming comparison",
                extra={"differences_so_far": len(accumulator)},
            )
            rss = self._resident_memory()
            detail = f" (resident memory {rss} bytes)" if rss is not None else ""
            raise ComparisonResourceError(
                f"Out of memory during XML comparison{detail}", path_a
            ) from e

        differences = accumulator.records
        if output_path is not None and differences:
            write_streaming_report(
                output_path, differences, self.streaming_config.report_encoding
            )

        elapsed_ms = int((time.time() - start_time) * MS_PER_SECOND)
        result = ComparisonResult(
            files_match=files_match,
            differences=differences,
            elapsed_ms=elapsed_ms,
            element_count=element_count,
            truncated=accumulator.overflowed,
        )
        rss_after = self._resident_memory()
        self.logger.info(
            "Streaming comparison completed",
            extra={
                "files_match": result.files_match,
                "difference_count": result.difference_count,
                "elapsed_ms": elapsed_ms,
                "element_count": element_count,
                "rss_delta_bytes": (
                    rss_after - rss_before
                    if rss_before is not None and rss_after is not None else None
                ),
            },
        )
        return result

    def _compare_sources(
        self,
        source_a: XMLEventSource,
        source_b: XMLEventSource,
        accumulator: DifferenceAccumulator,
    ) -> Tuple[bool, int]:
        files_match = True
        diverged = False
        element_count = 0

        while source_a.has_next() and source_b.has_next():
            event_a = source_a.next_event()
            event_b = source_b.next_event()

            if event_a.event_type is not event_b.event_type:
                accumulator.add(
                    DifferenceKind.EVENT_TYPE_MISMATCH,
                    f"Event type mismatch at element {element_count}: "
                    f"{event_a.event_type.name} vs {event_b.event_type.name}",
                    element_count,
                )
                files_match = False
                diverged = True
            elif event_a.event_type is EventType.START_ELEMENT:
                if not self._compare_start_elements(
                    event_a, event_b, element_count, accumulator
                ):
                    files_match = False
                element_count += 1
            elif event_a.event_type is EventType.CHARACTERS:
                if not self._compare_characters(
                    event_a, event_b, element_count, accumulator
                ):
                    files_match = False
            elif event_a.event_type is EventType.END_ELEMENT:
                if not self._compare_end_elements(
                    event_a, event_b, element_count, accumulator
                ):
                    files_match = False

            if accumulator.overflowed:
                self.logger.warning(
                    "Too many differences found. Stopping comparison to prevent memory issues.",
                    extra={"limit": accumulator.limit, "element_count": element_count},
                )
                accumulator.add_advisory()
                files_match = False
                break

            if diverged:
                break

        if not accumulator.overflowed and (source_a.has_next() or source_b.has_next()):
            accumulator.add_length_mismatch()
            files_match = False

        return files_match, element_count

    @staticmethod
    def _compare_start_elements(
        event_a: StartElement,
        event_b: StartElement,
        position: int,
        accumulator: DifferenceAccumulator,
    ) -> bool:
        if event_a.local_name != event_b.local_name:
            accumulator.add(
                DifferenceKind.ELEMENT_NAME_MISMATCH,
                f"Element name mismatch at position {position}: "
                f"'{event_a.local_name}' vs '{event_b.local_name}'",
                position,
            )
            return False

        # Only the number of attributes is checked here, never their values
        if event_a.attribute_count != event_b.attribute_count:
            accumulator.add(
                DifferenceKind.ATTRIBUTE_COUNT_MISMATCH,
                f"Attribute count mismatch for element '{event_a.local_name}' "
                f"at position {position}: "
                f"{event_a.attribute_count} vs {event_b.attribute_count}",
                position,
            )
            return False

        return True

    @staticmethod
    def _compare_characters(
        event_a: Characters,
        event_b: Characters,
        position: int,
        accumulator: DifferenceAccumulator,
    ) -> bool:
        text_a = event_a.stripped
        text_b = event_b.stripped

        # Text against empty text is tolerated
        if text_a != text_b and text_a and text_b:
            accumulator.add(
                DifferenceKind.TEXT_MISMATCH,
                f"Text content mismatch at element {position}: '{text_a}' vs '{text_b}'",
                position,
            )
            return False

        return True

    @staticmethod
    def _compare_end_elements(
        event_a: EndElement,
        event_b: EndElement,
        position: int,
        accumulator: DifferenceAccumulator,
    ) -> bool:
        if event_a.local_name != event_b.local_name:
            accumulator.add(
                DifferenceKind.END_ELEMENT_MISMATCH,
                f"End element name mismatch at position {position}: "
                f"'{event_a.local_name}' vs '{event_b.local_name}'",
                position,
            )
            return False

        return True

    def _resident_memory(self) -> Optional[int]:
        if not self.streaming_config.track_memory:
            return None
        try:
            return psutil.Process().memory_info().rss
        except psutil.Error:
            return None


def format_streaming_report(differences: Sequence[DifferenceRecord]) -> str:
    """Render the numbered plain-text difference report."""
    lines = [
        REPORT_TITLE,
        "=" * len(REPORT_TITLE),
        "",
        f"Total differences found: {len(differences)}",
        "",
    ]
    lines.extend(
        f"{index}. {record.message}" for index, record in enumerate(differences, start=1)
    )
    return "\n".join(lines) + "\n"


def write_streaming_report(
    output_path: PathInput,
    differences: Sequence[DifferenceRecord],
    encoding: str = "utf-8",
) -> None:
    """Write the difference report, replacing any existing file.

    Raises:
        ComparisonIOError: If the report cannot be written
    """
    logger = get_logger(__name__, None, "streaming_report")
    logger.info(
        "Writing streaming comparison results",
        extra={"output_path": str(output_path), "difference_count": len(differences)},
    )
    try:
        # Encode first so an unencodable report never truncates an existing file
        content = format_streaming_report(differences).encode(encoding)
        Path(output_path).write_bytes(content)
    except (OSError, UnicodeError, LookupError) as e:
        reason = getattr(e, "strerror", None) or e
        raise ComparisonIOError(
            f"Cannot write comparison report {output_path}: {reason}",
            output_path,
        ) from e


def compare_streaming(
    path_a: PathInput,
    path_b: PathInput,
    output_path: Optional[PathInput] = None,
    *,
    config: Optional[ComparatorConfig] = None,
    correlation_id: Optional[str] = None,
) -> ComparisonResult:
    """Compare two XML files in document order with bounded memory.

    Examples:
        >>> result = compare_streaming("expected.xml", "actual.xml")
        >>> result.files_match
        True
    """
    comparator = StreamingXMLComparator(config, correlation_id)
    return comparator.compare(path_a, path_b, output_path)

"""Result objects and difference records for XML comparison.

These are the shapes handed to report formatters and other collaborators.
They are built once per comparison call and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional, Sequence, Tuple


class DifferenceKind(Enum):
    """Kinds of mismatch recorded by the streaming comparator."""

    EVENT_TYPE_MISMATCH = auto()       # Streams diverged structurally
    ELEMENT_NAME_MISMATCH = auto()     # Start tags with different local names
    ATTRIBUTE_COUNT_MISMATCH = auto()  # Same element, different attribute count
    TEXT_MISMATCH = auto()             # Non-empty trimmed texts differ
    END_ELEMENT_MISMATCH = auto()      # End tags with different local names
    LENGTH_MISMATCH = auto()           # One document has trailing events
    DIFFERENCE_LIMIT_REACHED = auto()  # Advisory: comparison stopped early


@dataclass(frozen=True)
class DifferenceRecord:
    """Single human-readable mismatch description."""

    kind: DifferenceKind
    message: str
    position: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate difference record."""
        if not self.message:
            raise ValueError("Difference message cannot be empty")

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name,
            "message": self.message,
            "position": self.position,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of one streaming comparison."""

    files_match: bool
    differences: Tuple[DifferenceRecord, ...] = field(default_factory=tuple)
    elapsed_ms: int = 0
    element_count: int = 0
    truncated: bool = False

    def __post_init__(self) -> None:
        """Validate result and freeze the difference sequence."""
        if not isinstance(self.differences, tuple):
            object.__setattr__(self, "differences", tuple(self.differences))
        if self.elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")
        if self.element_count < 0:
            raise ValueError("element_count must be >= 0")

    @property
    def difference_count(self) -> int:
        """Number of recorded differences, including any advisory entry."""
        return len(self.differences)

    @property
    def messages(self) -> Sequence[str]:
        """Difference texts in order of discovery."""
        return [record.message for record in self.differences]

    def kinds(self) -> Sequence[DifferenceKind]:
        """Difference kinds in order of discovery."""
        return [record.kind for record in self.differences]

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a plain dictionary for formatters."""
        return {
            "files_match": self.files_match,
            "difference_count": self.difference_count,
            "differences": [record.message for record in self.differences],
            "elapsed_ms": self.elapsed_ms,
            "element_count": self.element_count,
            "truncated": self.truncated,
        }


@dataclass
class FileInfo:
    """Basic facts about a single XML file."""

    path: str
    size_bytes: int = 0
    encoding: Optional[str] = None
    version: Optional[str] = None
    root_element: Optional[str] = None
    element_count: int = 0
    max_depth: int = 0
    valid_xml: bool = False
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "encoding": self.encoding,
            "version": self.version,
            "root_element": self.root_element,
            "element_count": self.element_count,
            "max_depth": self.max_depth,
            "valid_xml": self.valid_xml,
            "error_message": self.error_message,
        }

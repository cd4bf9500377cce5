"""Exception types raised by the comparison engine.

Every failure surfaced to callers derives from ``XMLCompareError`` so that a
single ``except`` clause covers the whole engine, while the subclasses keep
the failure kinds apart.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class XMLCompareError(Exception):
    """Base exception for comparison failures."""

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None


class ComparisonIOError(XMLCompareError):
    """A file could not be opened, read, or written."""


class ComparisonParseError(XMLCompareError):
    """One of the inputs is not well-formed XML."""

    def __init__(
        self,
        message: str,
        path: Optional[PathLike] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message, path)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        if self.path:
            return f"Malformed XML in {self.path}{location}: {self.message}"
        return f"Malformed XML{location}: {self.message}"


class ComparisonResourceError(ComparisonIOError):
    """The comparison ran out of memory or exceeded safe recursion depth."""

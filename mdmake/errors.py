"""Errors raised while compiling a site."""

from pathlib import Path
from typing import Optional


class MdmakeError(Exception):
    """Base class for compile failures. ``str(err)`` is the diagnostic."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class SourceReadError(MdmakeError):
    """Input file could not be read or decoded."""


class ParseFailure(MdmakeError):
    """Markdown parser failed on an input file."""


class OutputWriteError(MdmakeError):
    """Clearing, creating, writing or copying into the output tree failed."""

"""
elfsize Error Taxonomy
=======================

Every failure of the size calculation is raised as a subclass of
:class:`ElfSizeError` carrying an :class:`ErrorKind` tag, so programmatic
callers can branch on ``exc.kind`` while the CLI only needs to catch the
base class.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Discriminator for :class:`ElfSizeError` subclasses."""
    FILE_NOT_FOUND = "FileNotFound"
    UNREADABLE = "Unreadable"
    TRUNCATED_FILE = "TruncatedFile"
    UNSUPPORTED_ENCODING = "UnsupportedEncoding"
    UNSUPPORTED_CLASS = "UnsupportedClass"
    MALFORMED_SECTION_TABLE = "MalformedSectionTable"


class ElfSizeError(Exception):
    """Base class for every size-calculation failure.

    Attributes:
        kind: The :class:`ErrorKind` of this failure.
        path: Path of the file being inspected, when known.
    """

    kind: ErrorKind

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is not None:
            return f"{self.path}: {message}"
        return message


class ElfFileNotFoundError(ElfSizeError):
    """The path does not exist."""
    kind = ErrorKind.FILE_NOT_FOUND


class UnreadableFileError(ElfSizeError):
    """The path exists but cannot be opened or read."""
    kind = ErrorKind.UNREADABLE


class TruncatedFileError(ElfSizeError):
    """A fixed-size read returned fewer bytes than the structure needs."""
    kind = ErrorKind.TRUNCATED_FILE

    def __init__(
        self,
        what: str,
        expected: int,
        actual: int,
        *,
        path: str | None = None,
    ) -> None:
        super().__init__(
            f"Read of {what} failed: expected {expected} bytes, got {actual}",
            path=path,
        )
        self.what = what
        self.expected = expected
        self.actual = actual


class UnsupportedEncodingError(ElfSizeError):
    """``e_ident[EI_DATA]`` is neither little- nor big-endian."""
    kind = ErrorKind.UNSUPPORTED_ENCODING

    def __init__(self, value: int, *, path: str | None = None) -> None:
        super().__init__(f"Unknown ELF data order {value}", path=path)
        self.value = value


class UnsupportedClassError(ElfSizeError):
    """``e_ident[EI_CLASS]`` is neither ELF32 nor ELF64."""
    kind = ErrorKind.UNSUPPORTED_CLASS

    def __init__(self, value: int, *, path: str | None = None) -> None:
        super().__init__(f"Unknown ELF class {value}", path=path)
        self.value = value


class MalformedSectionTableError(ElfSizeError):
    """The section header table is empty or its offsets overflow u64."""
    kind = ErrorKind.MALFORMED_SECTION_TABLE


__all__ = [
    "ErrorKind",
    "ElfSizeError",
    "ElfFileNotFoundError",
    "UnreadableFileError",
    "TruncatedFileError",
    "UnsupportedEncodingError",
    "UnsupportedClassError",
    "MalformedSectionTableError",
]

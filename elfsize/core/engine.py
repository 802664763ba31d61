"""
elfsize Calculation Engine
===========================

Computes the logical content size of an ELF file from its headers:

    1. Identification -- read ``e_ident``, validate encoding and class.
    2. Header walk    -- read the class-specific ELF header, then the
                         last section header.
    3. Resolution     -- ``max(shoff + shentsize * shnum,
                               sh_offset + sh_size)``.

An ELF object ends either with its section header table or with the
content of a section placed after it, so both ends are computed and the
larger one wins.  Anything stored past that offset (signatures,
archives, padding) is not part of the ELF object.

All state lives in locals of :meth:`ElfSizeCalculator.analyze`; the file
handle is closed on every exit path.
"""

from __future__ import annotations

import os
from typing import BinaryIO

from shared.config import AppConfig
from shared.logger import ElfSizeLogger
from shared.math_utils import checked_add_u64, checked_table_offset

from elfsize.core.errors import (
    ElfFileNotFoundError,
    ElfSizeError,
    MalformedSectionTableError,
    UnreadableFileError,
)
from elfsize.core.models import (
    ElfSizeResult,
    NormalizedElfHeader,
    NormalizedSectionHeader,
)
from elfsize.parsers.elf_parser import identify, reader_for

_default_logger = ElfSizeLogger("engine")


# ---------------------------------------------------------------------------
# Size resolution
# ---------------------------------------------------------------------------

def resolve_content_size(
    header: NormalizedElfHeader,
    last_section: NormalizedSectionHeader,
    path: str | None = None,
) -> tuple[int, int, int]:
    """Return ``(sht_end, last_section_end, content_size)``.

    Raises:
        MalformedSectionTableError: Either end overflows 64 bits.
    """
    try:
        sht_end = checked_table_offset(header.shoff, header.shentsize, header.shnum)
    except OverflowError as exc:
        raise MalformedSectionTableError(
            f"Section header table end overflows: {exc}", path=path
        ) from exc
    try:
        last_section_end = checked_add_u64(last_section.sh_offset, last_section.sh_size)
    except OverflowError as exc:
        raise MalformedSectionTableError(
            f"Last section end overflows: {exc}", path=path
        ) from exc
    return sht_end, last_section_end, max(sht_end, last_section_end)


# ---------------------------------------------------------------------------
# ElfSizeCalculator
# ---------------------------------------------------------------------------

class ElfSizeCalculator:
    """Determines where the ELF content of a file ends.

    The calculator holds only configuration and a logger, so one
    instance can serve any number of calls, from any number of threads.

    Usage::

        calc = ElfSizeCalculator()
        size = calc.compute("/usr/bin/ls")
        result = calc.analyze("firmware.signed.elf")
        print(result.trailing_bytes)
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        logger: ElfSizeLogger | None = None,
    ) -> None:
        """Initialise the calculator.

        Args:
            config: Application configuration.  Defaults are used if not
                provided.
            logger: Logger instance.  When omitted, one is built from
                *config*'s global settings, or the module logger is used
                if no config was given either.
        """
        self._config: AppConfig = config or AppConfig()
        if logger is not None:
            self._logger = logger
        elif config is not None:
            settings = config.global_settings
            self._logger = ElfSizeLogger(
                "engine",
                log_level=settings.log_level,
                log_file=settings.log_file or None,
                json_logs=settings.log_json,
            )
        else:
            self._logger = _default_logger

    @property
    def config(self) -> AppConfig:
        return self._config

    def compute(self, path: str | os.PathLike[str]) -> int:
        """Return the logical content size of *path* in bytes.

        Raises:
            ElfSizeError: A subclass naming the specific failure.
        """
        return self.analyze(path).content_size

    def analyze(self, path: str | os.PathLike[str]) -> ElfSizeResult:
        """Run the full pipeline and return every intermediate value.

        Raises:
            ElfSizeError: A subclass naming the specific failure.
        """
        path_str = os.fspath(path)
        try:
            with self._logger.timed(f"ELF size of {path_str}"):
                return self._analyze(path_str)
        except ElfSizeError as exc:
            self._logger.warning("%s", exc, kind=exc.kind.value)
            raise

    # ------------------------------------------------------------------ #
    #  Pipeline
    # ------------------------------------------------------------------ #

    def _analyze(self, path: str) -> ElfSizeResult:
        log = self._logger
        with self._open(path) as fh:
            try:
                file_size = os.fstat(fh.fileno()).st_size
            except OSError as exc:
                raise UnreadableFileError(
                    f"Cannot stat: {exc.strerror or exc}", path=path
                ) from exc

            with log.operation("identification"):
                ident = identify(fh, path)
                log.debug(
                    "ELF%d, %s-endian", ident.bits, ident.byteorder,
                )

            reader = reader_for(ident.elf_class)
            with log.operation("header_walk"):
                header = reader.read_header(fh, ident.encoding, path)
                log.debug(
                    "e_shoff=%d e_shentsize=%d e_shnum=%d",
                    header.shoff, header.shentsize, header.shnum,
                )
                last_section = reader.read_last_section_header(
                    fh, header, ident.encoding, path
                )
                log.debug(
                    "last section: sh_offset=%d sh_size=%d",
                    last_section.sh_offset, last_section.sh_size,
                )

        with log.operation("size_resolution"):
            sht_end, last_section_end, content_size = resolve_content_size(
                header, last_section, path
            )
            log.debug(
                "sht_end=%d last_section_end=%d -> %d",
                sht_end, last_section_end, content_size,
            )

        return ElfSizeResult(
            path=path,
            identification=ident,
            header=header,
            last_section=last_section,
            sht_end=sht_end,
            last_section_end=last_section_end,
            content_size=content_size,
            file_size=file_size,
        )

    @staticmethod
    def _open(path: str) -> BinaryIO:
        try:
            return open(path, "rb")
        except FileNotFoundError as exc:
            raise ElfFileNotFoundError(
                f"Cannot open: {exc.strerror or exc}", path=path
            ) from exc
        except OSError as exc:
            raise UnreadableFileError(
                f"Cannot open: {exc.strerror or exc}", path=path
            ) from exc


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

def compute_elf_content_size(path: str | os.PathLike[str]) -> int:
    """Return the logical content size of the ELF file at *path*.

    Raises:
        ElfSizeError: A subclass naming the specific failure; inspect
            ``exc.kind`` for an :class:`~elfsize.core.errors.ErrorKind`.
    """
    return ElfSizeCalculator().compute(path)


def analyze_elf_size(path: str | os.PathLike[str]) -> ElfSizeResult:
    """Like :func:`compute_elf_content_size` but return the full result."""
    return ElfSizeCalculator().analyze(path)

"""
elfsize Structured Logger
==========================

Provides :class:`ElfSizeLogger`, a structured logging facade that emits
human-friendly Rich console output on stderr and, optionally,
machine-parseable JSON logs to rotating log files.

Library callers get a silent logger by default (no console handler,
WARNING threshold); the CLI turns console output on.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

_ROOT_LOGGER_NAME = "elfsize"

# Active operation label, local to the current thread or task
_current_operation: ContextVar[str | None] = ContextVar(
    "elfsize_operation", default=None
)


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "DEBUG",
          "logger": "elfsize.engine",
          "message": "...",
          "tool_name": "engine",
          "operation": "header_walk",
          "extra": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("tool_name", "operation"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        extra = getattr(record, "elfsize_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` bound to a themed stderr console."""

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== ElfSizeLogger ==================================


class ElfSizeLogger:
    """Structured logger bound to one elfsize component.

    Every instance owns a private :class:`logging.Logger` that is not
    registered with the logging manager, so two instances never share
    handlers or levels, even under the same *tool_name*.

    Usage::

        log = ElfSizeLogger("engine", log_level="DEBUG", console_output=True)
        with log.operation("identification"):
            log.debug("class=%s encoding=%s", cls, enc)
        log.warning("Read of ELF header failed", path=path)

    Args:
        tool_name:       Component name, appended to ``elfsize.``.
        log_level:       Minimum severity name; unknown names mean WARNING.
        log_file:        Rotating log file; ``None`` or ``""`` disables it.
        json_logs:       Write JSON lines instead of plain text to the file.
        max_bytes:       Size at which the log file rotates.
        backup_count:    Rotated files to keep.
        console_output:  Attach the Rich stderr handler.
    """

    def __init__(
        self,
        tool_name: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = False,
    ) -> None:
        self._tool_name = tool_name
        level = getattr(logging, log_level.upper(), logging.WARNING)

        self._logger = logging.Logger(f"{_ROOT_LOGGER_NAME}.{tool_name}", level)
        self._logger.propagate = False

        if console_output:
            self._logger.addHandler(_ColorConsoleHandler(level=level))

        if log_file:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            self._logger.addHandler(fh)

        # Keep the stdlib last-resort handler from printing library warnings
        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

    def close(self) -> None:
        """Detach and close every handler of this logger."""
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

    # ------------------------------------------------------------------ #
    #  Operation scope
    # ------------------------------------------------------------------ #

    class _OperationContext:
        """Binds an operation name for the current thread or task."""

        def __init__(self, operation: str) -> None:
            self._operation = operation
            self._token: Any = None

        def __enter__(self) -> _OperationContext:
            self._token = _current_operation.set(self._operation)
            return self

        def __exit__(self, *exc: Any) -> None:
            _current_operation.reset(self._token)

    def operation(self, name: str) -> _OperationContext:
        """Return a context manager that sets the *operation* field.

        While active, records logged from the same thread carry
        ``operation=<name>``.
        """
        return self._OperationContext(name)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Move non-standard keyword args into the record's *extra*."""
        extra = kwargs.pop("extra", {}) or {}

        extra_data: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                extra_data[key] = kwargs.pop(key)

        extra["tool_name"] = self._tool_name
        extra["operation"] = _current_operation.get()
        if extra_data:
            extra["elfsize_extra"] = extra_data

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Logs a debug record on entry and one with the elapsed time on exit."""

        def __init__(self, logger_inst: ElfSizeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> ElfSizeLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.debug(
                "Completed: %s (%.6f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            """Seconds since the context was entered."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start, finish and elapsed time."""
        return self._TimingContext(self, label)

    @property
    def tool_name(self) -> str:
        """Name of the component this logger is bound to."""
        return self._tool_name

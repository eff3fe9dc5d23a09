"""
KeyForge Structured Logger
===========================

:class:`KeyForgeLogger` wraps a stdlib logger named ``keyforge.<component>``
with a Rich handler on stderr and an optional JSON-lines file handler.

Keyword arguments passed to the log methods become structured fields
(``count=5, strategy="uniform"``). Fields whose name marks them as a secret
(see :data:`SECRET_FIELDS`) are masked before the record is created, so a
careless ``log.debug("...", password=pw)`` never writes the clear value to
a terminal or a log file.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - OWASP Logging Cheat Sheet -- data to exclude.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SECRET_FIELDS: frozenset[str] = frozenset(
    {"password", "secret", "candidate", "value", "passphrase"}
)

_LOG_FILE_BYTES = 5 * 1024 * 1024
_LOG_FILE_BACKUPS = 3

# Current operation name; per thread and per asyncio task.
_OPERATION: ContextVar[str | None] = ContextVar("keyforge_operation", default=None)

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)


def mask_secret(secret: str) -> str:
    """Mask all but the first and last character: ``"hunter2"`` -> ``"h*****2"``."""
    if len(secret) <= 2:
        return "*" * len(secret)
    return secret[0] + "*" * (len(secret) - 2) + secret[-1]


class _JSONLineFormatter(logging.Formatter):
    """One JSON object per record: time, level, component, operation, fields."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "operation": getattr(record, "operation", None),
            "msg": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            line["fields"] = fields
        if record.exc_info and record.exc_info[1] is not None:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class _FieldsRichHandler(RichHandler):
    """Rich stderr handler that appends structured fields as ``key=value``."""

    def __init__(self, level: int) -> None:
        super().__init__(
            level=level,
            console=Console(theme=_LOG_THEME, stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )

    def render_message(self, record: logging.LogRecord, message: str) -> Any:
        fields = getattr(record, "fields", None)
        if fields:
            message = message + "  " + " ".join(f"{k}={v}" for k, v in fields.items())
        return super().render_message(record, message)


class KeyForgeLogger:
    """Structured logger for one KeyForge component.

    Usage::

        log = KeyForgeLogger("engine", log_level="DEBUG")
        with log.operation("generate"), log.timed("batch"):
            log.info("Generating candidates", count=5)

    Args:
        component: Short component name (``"engine"``).
        log_level: Minimum level name.
        log_file: Rotating log file; ``None`` disables file output.
        json_logs: Write the file as JSON lines instead of plain text.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
    ) -> None:
        self.component = component
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

        self._logger = logging.getLogger(f"keyforge.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False
        self.close()
        self._logger.addHandler(_FieldsRichHandler(level))

        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                path,
                maxBytes=_LOG_FILE_BYTES,
                backupCount=_LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(
                _JSONLineFormatter()
                if json_logs
                else logging.Formatter("%(asctime)s %(levelname)-8s %(name)s %(message)s")
            )
            self._logger.addHandler(handler)

    def close(self) -> None:
        """Detach and close every handler of ``keyforge.<component>``.

        A later logger for the same component replaces the handlers, so the
        previous log file is released instead of leaking.
        """
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

    # ------------------------------------------------------------------ #
    #  Scopes
    # ------------------------------------------------------------------ #

    @contextmanager
    def operation(self, name: str) -> Iterator[KeyForgeLogger]:
        """Tag every record emitted inside the block with ``operation=name``."""
        token = _OPERATION.set(name)
        try:
            yield self
        finally:
            _OPERATION.reset(token)

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log the wall-clock duration of the block at INFO."""
        start = time.perf_counter()
        self.debug("Started %s", label)
        try:
            yield
        finally:
            self.info("Finished %s", label, seconds=round(time.perf_counter() - start, 4))

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _log(self, level: int, msg: str, args: tuple[Any, ...], fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = fields.pop("exc_info", None)
        safe = {
            key: mask_secret(str(val)) if key in SECRET_FIELDS else val
            for key, val in fields.items()
        }
        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra={"component": self.component, "operation": _OPERATION.get(), "fields": safe},
        )

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, args, fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, msg, args, fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, msg, args, fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, msg, args, fields)

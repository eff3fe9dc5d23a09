"""
KeyForge Console
================

Thin layer over :class:`rich.console.Console` that gives every CLI command
the same look: one banner, ruled section headers, tagged status lines,
tables and a spinner for long-running work.

Everything that could carry user or generated text (candidate secrets,
finding titles) is rendered through :class:`rich.text.Text` or escaped
markup, so a password like ``[red]x`` is shown literally.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "kf.accent": "bold cyan",
        "kf.rule": "bold magenta",
        "kf.muted": "dim",
        "kf.strong": "bold bright_white",
        "kf.ok": "bold green",
        "kf.warn": "bold yellow",
        "kf.err": "bold red",
        "kf.note": "bold blue",
        "kf.sev.critical": "bold white on red",
        "kf.sev.high": "bold red",
        "kf.sev.medium": "bold yellow",
        "kf.sev.low": "bold cyan",
        "kf.sev.info": "bold blue",
    }
)

_LOGO = r"""[kf.accent] _  __          _____
| |/ /___ _   _|  ___|__  _ __ __ _  ___
| ' // _ \ | | | |_ / _ \| '__/ _` |/ _ \
| . \  __/ |_| |  _| (_) | | | (_| |  __/
|_|\_\___|\__, |_|  \___/|_|  \__, |\___|
          |___/               |___/[/kf.accent]"""

# tag, style
_MESSAGE_TAGS: dict[str, tuple[str, str]] = {
    "success": ("OK", "kf.ok"),
    "warning": ("WARN", "kf.warn"),
    "error": ("ERROR", "kf.err"),
    "info": ("INFO", "kf.note"),
}


def _severity_style(name: str) -> str:
    return f"kf.sev.{name.lower()}"


class KeyForgeConsole:
    """Console used by every KeyForge command.

    Args:
        quiet: Swallow all output; handy when the engine is driven as a
            library.
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self._console = Console(theme=_THEME, quiet=quiet, highlight=False)

    @property
    def rich(self) -> Console:
        return self._console

    # ------------------------------------------------------------------ #
    #  Headers
    # ------------------------------------------------------------------ #

    def banner(self, version: str) -> None:
        started = _dt.datetime.now().strftime("%Y-%m-%d %H:%M")
        body = Text.from_markup(
            f"{_LOGO}\n\n"
            "[kf.strong]Credential generation and strength analysis[/kf.strong]\n"
            f"[kf.muted]v{escape(version)} - {started}[/kf.muted]"
        )
        self._console.print(Panel(Align.center(body), border_style="cyan", padding=(0, 2)))

    def section(self, title: str) -> None:
        self._console.print()
        self._console.rule(Text(title, style="kf.rule"), style="magenta")

    # ------------------------------------------------------------------ #
    #  Tagged one-line messages
    # ------------------------------------------------------------------ #

    def _tagged(self, kind: str, message: str) -> None:
        tag, style = _MESSAGE_TAGS[kind]
        line = Text.assemble((f"[{tag}] ", style), message)
        self._console.print(line)

    def success(self, message: str) -> None:
        self._tagged("success", message)

    def warning(self, message: str) -> None:
        self._tagged("warning", message)

    def error(self, message: str) -> None:
        self._tagged("error", message)

    def info(self, message: str) -> None:
        self._tagged("info", message)

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    @staticmethod
    def _new_table(title: str, caption: str | None = None) -> Table:
        return Table(
            title=title,
            caption=caption,
            border_style="cyan",
            header_style="bold magenta",
            show_lines=True,
        )

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
    ) -> None:
        """Print a table of plain cells; every cell is shown literally."""
        tbl = self._new_table(title, caption)
        for name in columns:
            tbl.add_column(name)
        for row in rows:
            tbl.add_row(*(Text(str(cell)) for cell in row))
        self._console.print(tbl)

    def findings_table(self, findings: Sequence[Any]) -> None:
        """Print findings (anything with severity, title, description).

        Nothing is printed for an empty sequence.
        """
        if not findings:
            return
        tbl = self._new_table("Findings")
        tbl.add_column("#", justify="right", style="kf.muted", width=3)
        tbl.add_column("Severity", width=10)
        tbl.add_column("Title")
        tbl.add_column("Description", ratio=2)
        for idx, finding in enumerate(findings, start=1):
            severity = getattr(finding.severity, "value", str(finding.severity))
            tbl.add_row(
                str(idx),
                Text(severity, style=_severity_style(severity)),
                Text(finding.title),
                Text(finding.description),
            )
        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Misc
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(self, message: str) -> Iterator[Status]:
        with self._console.status(Text(message, style="kf.note"), spinner="dots") as spinner:
            yield spinner

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        self._console.print("\n" * (count - 1))

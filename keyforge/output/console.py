"""
Forge Console Output
=====================

Rich-based formatters for engine results: the generated candidate table,
the strength meter and breakdown, the alphabet listing, the uniformity
self-test and the preset catalogue.

Every formatter takes the :class:`ScanResult` produced by
:class:`~keyforge.core.engine.ForgeEngine` and reads the raw payload from
its ``metadata``, so the console and the report layer render the same
data.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import KeyForgeConsole
from shared.models import ScanResult

from keyforge.core.models import GenerationPolicy


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_RATING_COLOURS: dict[str, str] = {
    "very_weak": "bold white on red",
    "weak": "bold red",
    "fair": "bold yellow",
    "good": "bold cyan",
    "strong": "bold green",
    "very_strong": "bold bright_green",
}

_STATUS_COLOURS: dict[str, str] = {
    "ok": "green",
    "truncated": "yellow",
    "unsatisfiable": "bold red",
}


class ForgeConsoleOutput:
    """Console formatters for Forge results.

    Usage::

        output = ForgeConsoleOutput(KeyForgeConsole())
        output.display_generation(engine.generate(policy, count=5))
        output.display_analysis(engine.analyze_password("hunter2"))
    """

    def __init__(self, console: Optional[KeyForgeConsole] = None) -> None:
        self.console = console or KeyForgeConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Generation
    # ------------------------------------------------------------------ #

    def display_generation(self, result: ScanResult) -> None:
        """Table of generated candidates with entropy and crack time."""
        meta = result.metadata
        self.console.section("Generated Candidates")

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
            caption=f"Entropy convention: {meta.get('convention', 'nominal')}",
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Candidate", style="bold bright_white", overflow="fold")
        tbl.add_column("Status")
        tbl.add_column("Length", justify="right")
        tbl.add_column("Entropy", justify="right")
        tbl.add_column("Crack Time", justify="right")
        tbl.add_column("Attempts", justify="right")

        for entry in meta.get("candidates", []):
            status = entry["status"]
            entropy = entry.get("entropy") or {}
            value = entry.get("value")
            tbl.add_row(
                str(entry["index"] + 1),
                Text(value) if value is not None else Text("-", style="dim"),
                Text(status.upper(), style=_STATUS_COLOURS.get(status, "")),
                str(entry["length"]),
                f"{entropy['bits']:.1f} bits" if entropy else "-",
                entropy.get("crack_time", "-") if entropy else "-",
                str(entry["attempts"]),
            )
        self._rich.print(tbl)

        for entry in meta.get("candidates", []):
            slot = entry["index"] + 1
            for warning in entry.get("warnings", []):
                self.console.warning(f"#{slot}: {warning}")
            for violation in entry.get("violations", []):
                self.console.error(f"#{slot}: {violation}")

        self.console.blank()
        self.console.info(result.summary)

    # ------------------------------------------------------------------ #
    #  Strength analysis
    # ------------------------------------------------------------------ #

    def display_analysis(self, result: ScanResult) -> None:
        """Strength meter, sub-score breakdown, entropy and suggestions."""
        meta = result.metadata
        strength = meta["strength"]
        entropy = meta["entropy"]
        self.console.section("Password Analysis")

        rating = strength["rating"]
        colour = _RATING_COLOURS.get(rating, "white")
        self._rich.print(Panel(
            self._meter(strength["percentage"], rating.replace("_", " ").upper(), colour),
            title="Strength Meter",
            border_style="cyan",
        ))

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Dimension", style="bold")
        tbl.add_column("Score", justify="right")
        tbl.add_column("Feedback")
        for key in ("length", "variety", "complexity", "patterns"):
            sub = strength[key]
            tbl.add_row(key.title(), f"{sub['score']}/{sub['max']}", Text(sub["feedback"]))
        tbl.add_row("Total", f"{meta['total']}/12", "")
        self._rich.print(tbl)

        details = Table(border_style="bright_cyan", show_header=False, show_lines=True)
        details.add_column("Property", style="bold")
        details.add_column("Value")
        details.add_row("Password", Text(result.target))
        details.add_row("Length", str(meta["length"]))
        details.add_row("Character Pool", str(meta["alphabet_size"]))
        details.add_row("Entropy", f"{entropy['bits']:.2f} bits")
        details.add_row("Crack Time", entropy["crack_time"])
        details.add_row(
            "Common Secret",
            Text("Yes", style="bold red") if meta["common_secret"] else Text("No", style="green"),
        )
        self._rich.print(details)

        self.console.blank()
        for suggestion in strength["suggestions"]:
            self._rich.print(Text(f"  • {suggestion}"))

    @staticmethod
    def _meter(percentage: int, label: str, colour: str, width: int = 40) -> Text:
        filled = max(0, min(width, int(percentage / 100 * width)))
        meter = Text()
        meter.append(f"{percentage:>3}%  ", style="bold")
        meter.append("[", style="dim")
        for i in range(width):
            if i >= filled:
                meter.append("░", style="dim")
            elif i < width * 0.25:
                meter.append("█", style="red")
            elif i < width * 0.50:
                meter.append("█", style="yellow")
            elif i < width * 0.75:
                meter.append("█", style="green")
            else:
                meter.append("█", style="bright_green")
        meter.append("]  ", style="dim")
        meter.append(label, style=colour)
        return meter

    # ------------------------------------------------------------------ #
    #  Alphabet / uniformity
    # ------------------------------------------------------------------ #

    def display_alphabet(self, result: ScanResult) -> None:
        meta = result.metadata
        self.console.section("Alphabet")
        body = Text()
        body.append("Symbols: ", style="bold")
        body.append(meta["symbols"] + "\n")
        body.append("Size: ", style="bold")
        body.append(f"{meta['size']}  ({meta['bits_per_symbol']:.2f} bits/symbol)\n")
        body.append("Source: ", style="bold")
        body.append("custom alphabet" if meta["custom"] else "character classes")
        self._rich.print(Panel(body, border_style="cyan"))
        self.console.findings_table(
            [f for f in result.findings if f.severity.value != "INFO"]
        )

    def display_uniformity(self, result: ScanResult) -> None:
        meta = result.metadata
        self.console.section("Uniformity Self-Test")
        rows: list[Sequence[Any]] = [
            ("Alphabet size", meta["alphabet_size"]),
            ("Symbols drawn", f"{meta['sample_symbols']:,}"),
            ("Expected per symbol", f"{meta['expected_count']:.1f}"),
            ("Observed min / max", f"{meta['min_count']} / {meta['max_count']}"),
            ("Chi-squared", f"{meta['chi_squared']:.3f}"),
            ("Degrees of freedom", meta["degrees_of_freedom"]),
            ("p-value", f"{meta['p_value']:.6f}"),
            ("Significance", meta["significance"]),
        ]
        self.console.table("Chi-Squared Goodness of Fit", ["Statistic", "Value"], rows)
        if meta["passed"]:
            self.console.success(result.summary)
        else:
            self.console.error(result.summary)

    # ------------------------------------------------------------------ #
    #  Presets
    # ------------------------------------------------------------------ #

    def display_presets(self, presets: Sequence[tuple[str, GenerationPolicy, bool]]) -> None:
        """Table of ``(name, policy, builtin)`` triples."""
        rows = [
            (name, "built-in" if builtin else "user", describe_policy(policy))
            for name, policy, builtin in presets
        ]
        self.console.table("Policy Presets", ["Name", "Kind", "Policy"], rows)

    def display_policy(self, name: str, policy: GenerationPolicy) -> None:
        rows = [
            (key, value)
            for key, value in policy.model_dump(mode="json").items()
            if value is not None
        ]
        self.console.table(f"Preset: {name}", ["Field", "Value"], rows)


def describe_policy(policy: GenerationPolicy) -> str:
    """One-line human summary of a policy."""
    strategy = policy.strategy.value
    if strategy == "passphrase":
        return f"passphrase, {policy.word_count} words, separator {policy.separator!r}"
    if strategy == "pattern":
        return f"pattern {policy.pattern_template}"
    if strategy == "pronounceable":
        return f"pronounceable, {policy.length} chars"
    if policy.custom_alphabet:
        source = f"custom alphabet ({len(set(policy.custom_alphabet))} symbols)"
    else:
        source = "+".join(c.value for c in policy.classes.enabled()) or "no classes"
    extras = []
    if policy.exclude_similar:
        extras.append("no similar")
    if policy.exclude_ambiguous:
        extras.append("no ambiguous")
    suffix = f", {', '.join(extras)}" if extras else ""
    return f"{strategy}, {policy.length} chars, {source}{suffix}"

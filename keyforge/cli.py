"""
KeyForge CLI
=============

Click-based command-line interface for the credential generation engine.

Usage::

    python -m keyforge generate --length 20 --count 5
    python -m keyforge generate --strategy passphrase --words 6
    python -m keyforge generate --strategy pattern --pattern word-number-symbol
    python -m keyforge generate --preset pin --require-digit --min-length 6
    python -m keyforge analyze "P@ssw0rd!"
    python -m keyforge alphabet --no-symbols --exclude-similar
    python -m keyforge uniformity --samples 5000
    python -m keyforge presets save work --length 24 --exclude-ambiguous

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import click
from pydantic import ValidationError

from shared.config import KeyForgeConfig
from shared.console import KeyForgeConsole
from shared.models import ScanResult, Severity

from keyforge import __version__
from keyforge.core.engine import ForgeEngine
from keyforge.core.errors import KeyForgeError
from keyforge.core.models import (
    EntropyConvention,
    GenerationPolicy,
    RequirementsPolicy,
    Strategy,
)
from keyforge.output.console import ForgeConsoleOutput
from keyforge.output.report import ForgeReportGenerator
from keyforge.presets import PolicyPresetStore


# ===================================================================== #
#  Error translation
# ===================================================================== #


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Turn engine and validation errors into Click errors (exit 1 / 2)."""
    try:
        yield
    except ValidationError as exc:
        raise click.BadParameter(_validation_message(exc)) from exc
    except KeyForgeError as exc:
        raise click.ClickException(str(exc)) from exc
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc


# ===================================================================== #
#  Shared option sets
# ===================================================================== #


def _policy_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options that shape a GenerationPolicy."""
    options = [
        click.option("--preset", "-p", default=None, help="Start from a named preset."),
        click.option("--length", "-l", type=int, default=None, help="Number of symbols."),
        click.option(
            "--strategy", "-s",
            type=click.Choice([s.value for s in Strategy]),
            default=None,
            help="Generation strategy.",
        ),
        click.option("--upper/--no-upper", default=None, help="Include A-Z."),
        click.option("--lower/--no-lower", default=None, help="Include a-z."),
        click.option("--digits/--no-digits", default=None, help="Include 0-9."),
        click.option("--symbols/--no-symbols", default=None, help="Include symbols."),
        click.option(
            "--exclude-similar/--allow-similar", default=None,
            help="Drop look-alike characters (0 O I l 1).",
        ),
        click.option(
            "--exclude-ambiguous/--allow-ambiguous", default=None,
            help="Drop brackets, quotes and similar punctuation.",
        ),
        click.option("--custom-alphabet", default=None, help="Explicit alphabet."),
        click.option(
            "--pattern", "pattern_template", default=None,
            help="Pattern template, e.g. word-number-symbol.",
        ),
        click.option("--words", type=int, default=None, help="Passphrase word count."),
        click.option("--separator", default=None, help="Passphrase separator (0-1 chars)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _requirement_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options that build a RequirementsPolicy."""
    options = [
        click.option("--min-length", type=int, default=None, help="Minimum length."),
        click.option("--max-length", type=int, default=None, help="Maximum length."),
        click.option("--require-upper", is_flag=True, default=False),
        click.option("--require-lower", is_flag=True, default=False),
        click.option("--require-digit", is_flag=True, default=False),
        click.option("--require-symbol", is_flag=True, default=False),
        click.option("--min-upper", type=int, default=None),
        click.option("--min-lower", type=int, default=None),
        click.option("--min-digit", type=int, default=None),
        click.option("--min-symbol", type=int, default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


_POLICY_KEYS = (
    "preset", "length", "strategy", "upper", "lower", "digits", "symbols",
    "exclude_similar", "exclude_ambiguous", "custom_alphabet",
    "pattern_template", "words", "separator",
)
_REQUIREMENT_KEYS = (
    "min_length", "max_length", "require_upper", "require_lower",
    "require_digit", "require_symbol", "min_upper", "min_lower",
    "min_digit", "min_symbol",
)


def _split(kwargs: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {key: kwargs.pop(key) for key in keys}


def _build_policy(ctx: click.Context, opts: dict[str, Any]) -> GenerationPolicy:
    """Preset (or config defaults) overlaid with the options actually given."""
    if opts["preset"]:
        values = _store(ctx).get(opts["preset"]).model_dump()
    else:
        values = _engine(ctx).policy_values(strategy=opts["strategy"])

    classes = dict(values.get("classes") or {})
    for key in ("upper", "lower", "digits", "symbols"):
        if opts[key] is not None:
            classes[key] = opts[key]
    values["classes"] = classes

    overrides = {
        "length": opts["length"],
        "strategy": opts["strategy"],
        "exclude_similar": opts["exclude_similar"],
        "exclude_ambiguous": opts["exclude_ambiguous"],
        "custom_alphabet": opts["custom_alphabet"],
        "pattern_template": opts["pattern_template"],
        "passphrase_word_count": opts["words"],
        "passphrase_separator": opts["separator"],
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    strategy = values.get("strategy")
    if str(getattr(strategy, "value", strategy)) == "pattern" and not values.get("pattern_template"):
        values["pattern_template"] = ctx.find_root().obj["config"].forge.default_pattern
    return GenerationPolicy.model_validate(values)


def _build_requirements(opts: dict[str, Any]) -> Optional[RequirementsPolicy]:
    given = {k: v for k, v in opts.items() if v not in (None, False)}
    if not given:
        return None
    return RequirementsPolicy(**given)


# ===================================================================== #
#  Context helpers
# ===================================================================== #


def _engine(ctx: click.Context) -> ForgeEngine:
    obj = ctx.find_root().obj
    if obj.get("engine") is None:
        with _translate_errors():
            obj["engine"] = ForgeEngine(obj["config"])
    return obj["engine"]


def _store(ctx: click.Context) -> PolicyPresetStore:
    obj = ctx.find_root().obj
    if obj.get("store") is None:
        obj["store"] = PolicyPresetStore(obj["config"].forge.presets_file)
    return obj["store"]


def _handle_output(ctx: click.Context, result: ScanResult, command: str) -> None:
    """Write the result as JSON or HTML according to ``--output``."""
    obj = ctx.find_root().obj
    reporter: ForgeReportGenerator = obj["reporter"]
    console: KeyForgeConsole = obj["console"]
    output_file = obj["output_file"]

    if obj["output_format"] == "json":
        if output_file:
            path = reporter.generate_json(result, Path(output_file))
            console.success(f"JSON report saved to: {path}")
        else:
            click.echo(reporter.render_json(result))
    elif obj["output_format"] == "html":
        if output_file:
            target = Path(output_file)
        else:
            target = Path(obj["config"].global_settings.output_dir) / f"keyforge_{command}.html"
        path = reporter.generate_html(result, target)
        console.success(f"HTML report saved to: {path}")


def _show_findings(console: KeyForgeConsole, result: ScanResult) -> None:
    console.findings_table([f for f in result.findings if f.severity != Severity.INFO])


# ===================================================================== #
#  CLI Group
# ===================================================================== #


@click.group()
@click.version_option(__version__, prog_name="keyforge")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a KeyForge configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json", "html"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON/HTML output).",
)
@click.option(
    "--reveal",
    is_flag=True,
    default=False,
    help="Write generated secrets in clear in JSON/HTML reports.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress the startup banner.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    reveal: bool,
    quiet: bool,
) -> None:
    """KeyForge -- Credential Generation & Strength Analysis.

    Generate passwords, passphrases and pattern secrets under a policy,
    check them against compliance requirements, and rate the strength of
    existing passwords.
    """
    ctx.ensure_object(dict)

    try:
        forge_config = KeyForgeConfig.load(config)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Cannot load config: {exc}") from exc

    console = KeyForgeConsole()
    ctx.obj.update({
        "config": forge_config,
        "output_format": output,
        "output_file": output_file,
        "quiet": quiet,
        "console": console,
        "display": ForgeConsoleOutput(console),
        "reporter": ForgeReportGenerator(reveal_secrets=reveal),
    })
    ctx.obj.setdefault("engine", None)
    ctx.obj.setdefault("store", None)

    if not quiet and output == "console":
        console.banner(version=forge_config.global_settings.version)


# ===================================================================== #
#  Subcommands
# ===================================================================== #


@cli.command()
@_policy_options
@_requirement_options
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="Number of candidates.")
@click.option("--max-attempts", type=click.IntRange(min=1), default=None, help="Retry budget per candidate.")
@click.option(
    "--convention",
    type=click.Choice([c.value for c in EntropyConvention]),
    default=None,
    help="Entropy keyspace convention.",
)
@click.pass_context
def generate(
    ctx: click.Context,
    count: int,
    max_attempts: Optional[int],
    convention: Optional[str],
    **kwargs: Any,
) -> None:
    """Generate credentials under a policy and optional requirements.

    Exits with status 1 when any candidate could not satisfy the
    requirements within the attempt budget.
    """
    policy_opts = _split(kwargs, _POLICY_KEYS)
    requirement_opts = _split(kwargs, _REQUIREMENT_KEYS)

    with _translate_errors():
        policy = _build_policy(ctx, policy_opts)
        requirements = _build_requirements(requirement_opts)
        result = _engine(ctx).generate(
            policy,
            requirements,
            count=count,
            max_attempts=max_attempts,
            convention=EntropyConvention(convention) if convention else None,
        )

    obj = ctx.obj
    if obj["output_format"] == "console":
        obj["display"].display_generation(result)
        _show_findings(obj["console"], result)
    else:
        _handle_output(ctx, result, "generate")

    if any(f.title == "Requirements unsatisfiable" for f in result.findings):
        ctx.exit(1)


@cli.command()
@click.argument("password", required=False)
@click.pass_context
def analyze(ctx: click.Context, password: Optional[str]) -> None:
    """Rate the strength of PASSWORD.

    Prompts without echo when PASSWORD is omitted; ``-`` reads one line
    from standard input.
    """
    if password is None:
        password = click.prompt("Password", hide_input=True, default="", show_default=False)
    elif password == "-":
        password = sys.stdin.readline().rstrip("\r\n")

    with _translate_errors():
        result = _engine(ctx).analyze_password(password)

    obj = ctx.obj
    if obj["output_format"] == "console":
        obj["display"].display_analysis(result)
        _show_findings(obj["console"], result)
    else:
        _handle_output(ctx, result, "analyze")


@cli.command()
@_policy_options
@click.pass_context
def alphabet(ctx: click.Context, **kwargs: Any) -> None:
    """Show the alphabet a policy builds and its size."""
    with _translate_errors():
        policy = _build_policy(ctx, _split(kwargs, _POLICY_KEYS))
        result = _engine(ctx).alphabet(policy)

    if ctx.obj["output_format"] == "console":
        ctx.obj["display"].display_alphabet(result)
    else:
        _handle_output(ctx, result, "alphabet")


@cli.command()
@_policy_options
@click.option("--samples", type=click.IntRange(min=1), default=None, help="Candidates to draw.")
@click.option("--sample-length", type=click.IntRange(min=1), default=None, help="Length of each candidate.")
@click.pass_context
def uniformity(
    ctx: click.Context,
    samples: Optional[int],
    sample_length: Optional[int],
    **kwargs: Any,
) -> None:
    """Chi-squared self-test of the uniform generator.

    Exits with status 1 when the frequencies deviate from uniform at the
    configured significance level.
    """
    with _translate_errors():
        policy = _build_policy(ctx, _split(kwargs, _POLICY_KEYS))
        engine = _engine(ctx)
        with ctx.obj["console"].status("Sampling generator output..."):
            result = engine.uniformity(policy, samples=samples, length=sample_length)

    if ctx.obj["output_format"] == "console":
        ctx.obj["display"].display_uniformity(result)
    else:
        _handle_output(ctx, result, "uniformity")

    if not result.metadata.get("passed", False):
        ctx.exit(1)


# ===================================================================== #
#  Presets
# ===================================================================== #


@cli.group()
def presets() -> None:
    """Manage named generation policy presets."""


@presets.command("list")
@click.pass_context
def presets_list(ctx: click.Context) -> None:
    """List built-in and user presets."""
    store = _store(ctx)
    with _translate_errors():
        rows = [(name, policy, store.is_builtin(name)) for name, policy in store.items()]
    ctx.find_root().obj["display"].display_presets(rows)


@presets.command("show")
@click.argument("name")
@click.pass_context
def presets_show(ctx: click.Context, name: str) -> None:
    """Show the policy stored under NAME."""
    with _translate_errors():
        policy = _store(ctx).get(name)
    ctx.find_root().obj["display"].display_policy(name, policy)


@presets.command("save")
@click.argument("name")
@_policy_options
@click.option("--overwrite", is_flag=True, default=False, help="Replace an existing preset.")
@click.pass_context
def presets_save(ctx: click.Context, name: str, overwrite: bool, **kwargs: Any) -> None:
    """Save the policy built from the given options as NAME."""
    with _translate_errors():
        policy = _build_policy(ctx, _split(kwargs, _POLICY_KEYS))
        _store(ctx).save(name, policy, overwrite=overwrite)
    ctx.find_root().obj["console"].success(f"Preset '{name}' saved")


@presets.command("delete")
@click.argument("name")
@click.pass_context
def presets_delete(ctx: click.Context, name: str) -> None:
    """Delete the user preset NAME."""
    with _translate_errors():
        _store(ctx).delete(name)
    ctx.find_root().obj["console"].success(f"Preset '{name}' deleted")


# ===================================================================== #
#  Entry Point
# ===================================================================== #


def main() -> None:
    """Main entry point for the KeyForge CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

"""
KeyForge Configuration Management
==================================

Centralized configuration for the KeyForge toolkit using Python
dataclasses and TOML-based persistence.

Configuration is kept separate from code (Wiggins, 2011): every tunable
of the generation engine -- default policy values, the retry budget, the
attacker guess rate used for crack-time buckets -- lives here and can be
overridden from a ``config.toml`` file.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - PEP 681 -- Data Class Transforms (2022).
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the KeyForge root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Config ===========================


@dataclass(frozen=False, slots=True)
class ForgeConfig:
    """Configuration for Forge -- Credential Generation Engine.

    Default policy values, the retry budget of the orchestrator, and the
    brute-force model used by the crack-time estimator.

    Reference:
        NIST SP 800-63B (2017). Digital Identity Guidelines --
        Authentication and Lifecycle Management.
    """

    # Default generation policy
    default_length: int = 16
    default_strategy: str = "uniform"
    passphrase_word_count: int = 4
    passphrase_separator: str = "-"
    default_pattern: str = "word-number-symbol"

    # Retry orchestrator
    max_attempts: int = 100

    # Entropy / crack-time model
    guesses_per_second: int = 1_000_000_000
    entropy_convention: str = "nominal"

    # Advisory denylist ("" = built-in list)
    denylist_path: str = ""

    # Preset store
    presets_file: str = "presets.json"

    # Uniformity self-test
    uniformity_samples: int = 2000
    uniformity_length: int = 32
    chi_squared_significance: float = 0.01


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings shared across KeyForge modules.

    Controls logging verbosity, output directories and general operational
    parameters.
    """

    log_level: str = "WARNING"
    log_file: str = ""
    log_json: bool = False
    output_dir: str = "output"
    report_format: str = "html"
    max_workers: int = 4
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class KeyForgeConfig:
    """Master configuration aggregating the global and forge settings.

    Usage:
        >>> config = KeyForgeConfig.load()                  # from default path
        >>> config = KeyForgeConfig.load("custom.toml")     # from custom path
        >>> print(config.forge.max_attempts)
        100
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    forge: ForgeConfig = field(default_factory=ForgeConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> KeyForgeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to the dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`KeyForgeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            forge=cls._build_section(ForgeConfig, raw.get("forge", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files keep loading on older releases.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

"""
Policy Preset Store
====================

Named :class:`GenerationPolicy` presets. A handful of built-in presets are
always available and read-only; user presets are persisted as JSON in a
file owned by the caller::

    {
      "version": 1,
      "presets": {
        "work": {"length": 20, "exclude_similar": true, ...}
      }
    }

The generation engine itself never touches storage; the CLI creates a
store from ``forge.presets_file`` and resolves ``--preset`` through it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from keyforge.core.errors import PresetError
from keyforge.core.models import CharacterClasses, GenerationPolicy, Strategy

STORE_VERSION = 1

BUILTIN_PRESETS: dict[str, GenerationPolicy] = {
    "strong": GenerationPolicy(length=16),
    "maximum": GenerationPolicy(length=32),
    "memorable": GenerationPolicy(
        strategy=Strategy.PASSPHRASE,
        passphrase_word_count=4,
        passphrase_separator="-",
    ),
    "pin": GenerationPolicy(
        length=6,
        classes=CharacterClasses(upper=False, lower=False, digits=True, symbols=False),
    ),
    "pronounceable": GenerationPolicy(length=10, strategy=Strategy.PRONOUNCEABLE),
}


class PolicyPresetStore:
    """Built-in presets plus user presets backed by a JSON file.

    Args:
        path: Location of the JSON store. The file is created on the first
            :meth:`save`; a missing file simply means no user presets.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._user: dict[str, GenerationPolicy] | None = None

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def names(self) -> list[str]:
        """Built-in names in definition order, then user names sorted."""
        user = sorted(n for n in self._load() if n not in BUILTIN_PRESETS)
        return list(BUILTIN_PRESETS) + user

    def is_builtin(self, name: str) -> bool:
        return name in BUILTIN_PRESETS

    def get(self, name: str) -> GenerationPolicy:
        """Resolve *name*; built-ins shadow user presets of the same name.

        Raises:
            PresetError: No preset is called *name*.
        """
        if name in BUILTIN_PRESETS:
            return BUILTIN_PRESETS[name]
        try:
            return self._load()[name]
        except KeyError:
            raise PresetError(
                f"Unknown preset '{name}'. Available: {', '.join(self.names())}"
            ) from None

    def items(self) -> list[tuple[str, GenerationPolicy]]:
        return [(name, self.get(name)) for name in self.names()]

    # ------------------------------------------------------------------ #
    #  Mutations
    # ------------------------------------------------------------------ #

    def save(self, name: str, policy: GenerationPolicy, *, overwrite: bool = False) -> None:
        """Persist *policy* under *name*.

        Raises:
            PresetError: *name* is empty, built-in, or already taken and
                *overwrite* is false.
        """
        name = name.strip()
        if not name:
            raise PresetError("Preset name must not be empty")
        if name in BUILTIN_PRESETS:
            raise PresetError(f"'{name}' is a built-in preset and cannot be replaced")
        user = self._load()
        if name in user and not overwrite:
            raise PresetError(f"Preset '{name}' already exists")
        user[name] = policy
        self._write(user)

    def delete(self, name: str) -> None:
        """Remove the user preset *name*.

        Raises:
            PresetError: *name* is built-in or unknown.
        """
        if name in BUILTIN_PRESETS:
            raise PresetError(f"'{name}' is a built-in preset and cannot be deleted")
        user = self._load()
        if name not in user:
            raise PresetError(f"Unknown preset '{name}'")
        del user[name]
        self._write(user)

    # ------------------------------------------------------------------ #
    #  Persistence
    # ------------------------------------------------------------------ #

    def _load(self) -> dict[str, GenerationPolicy]:
        if self._user is not None:
            return self._user
        if not self.path.exists():
            self._user = {}
            return self._user

        try:
            raw: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PresetError(f"Cannot read preset store {self.path}: {exc}") from exc

        presets = raw.get("presets", {}) if isinstance(raw, dict) else None
        if not isinstance(presets, dict):
            raise PresetError(f"Malformed preset store {self.path}")

        loaded: dict[str, GenerationPolicy] = {}
        for name, data in presets.items():
            try:
                loaded[name] = GenerationPolicy.model_validate(data)
            except ValidationError as exc:
                raise PresetError(f"Invalid preset '{name}' in {self.path}: {exc}") from exc
        self._user = loaded
        return loaded

    def _write(self, user: dict[str, GenerationPolicy]) -> None:
        payload = {
            "version": STORE_VERSION,
            "presets": {
                name: policy.model_dump(mode="json", exclude_defaults=True)
                for name, policy in sorted(user.items())
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self.path)
        self._user = dict(user)

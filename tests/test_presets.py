"""Tests for the policy preset store."""

import json

import pytest

from keyforge.core.errors import PresetError
from keyforge.core.models import CharClass, GenerationPolicy, Strategy
from keyforge.presets import BUILTIN_PRESETS, PolicyPresetStore


@pytest.fixture
def store(tmp_path):
    return PolicyPresetStore(tmp_path / "presets.json")


class TestBuiltins:
    def test_available_without_a_file(self, store):
        assert store.names() == ["strong", "maximum", "memorable", "pin", "pronounceable"]
        assert not store.path.exists()

    def test_pin_is_digits_only(self, store):
        policy = store.get("pin")
        assert policy.length == 6
        assert policy.classes.enabled() == [CharClass.DIGITS]

    def test_memorable_is_a_passphrase(self, store):
        assert store.get("memorable").strategy == Strategy.PASSPHRASE

    def test_cannot_be_replaced_or_deleted(self, store):
        with pytest.raises(PresetError):
            store.save("strong", GenerationPolicy(length=8))
        with pytest.raises(PresetError):
            store.delete("pin")
        assert store.is_builtin("strong")


class TestUserPresets:
    def test_save_and_reload(self, store):
        policy = GenerationPolicy(length=24, exclude_similar=True)
        store.save("work", policy)

        reloaded = PolicyPresetStore(store.path)
        assert reloaded.get("work") == policy
        assert reloaded.names()[-1] == "work"
        assert not reloaded.is_builtin("work")

    def test_file_format(self, store):
        store.save("short", GenerationPolicy(length=10))
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["presets"]["short"]["length"] == 10
        assert "strategy" not in data["presets"]["short"]

    def test_user_names_are_sorted(self, store):
        store.save("zeta", GenerationPolicy())
        store.save("alpha", GenerationPolicy())
        assert store.names()[len(BUILTIN_PRESETS):] == ["alpha", "zeta"]

    def test_duplicate_requires_overwrite(self, store):
        store.save("work", GenerationPolicy(length=20))
        with pytest.raises(PresetError, match="already exists"):
            store.save("work", GenerationPolicy(length=30))
        store.save("work", GenerationPolicy(length=30), overwrite=True)
        assert store.get("work").length == 30

    def test_blank_name_rejected(self, store):
        with pytest.raises(PresetError):
            store.save("   ", GenerationPolicy())

    def test_delete(self, store):
        store.save("temp", GenerationPolicy())
        store.delete("temp")
        assert "temp" not in PolicyPresetStore(store.path).names()

    def test_unknown(self, store):
        with pytest.raises(PresetError, match="Unknown preset"):
            store.get("nope")
        with pytest.raises(PresetError):
            store.delete("nope")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "presets.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PresetError, match="Cannot read"):
            PolicyPresetStore(path).names()

    def test_invalid_policy_in_file(self, tmp_path):
        path = tmp_path / "presets.json"
        path.write_text(json.dumps({"version": 1, "presets": {"bad": {"length": -3}}}))
        with pytest.raises(PresetError, match="Invalid preset 'bad'"):
            PolicyPresetStore(path).get("bad")

"""Tests for the ForgeEngine facade."""

import pytest

from shared.config import ForgeConfig, KeyForgeConfig
from shared.models import Severity

from keyforge.core.engine import ForgeEngine
from keyforge.core.errors import ConfigError, EmptyAlphabetError
from keyforge.core.models import (
    CharacterClasses,
    EntropyConvention,
    GenerationPolicy,
    RequirementsPolicy,
    Strategy,
)
from keyforge.core.random_source import SeededRandomSource


@pytest.fixture
def engine():
    return ForgeEngine(rng=SeededRandomSource(99))


def _titles(result):
    return [f.title for f in result.findings]


class TestGenerate:
    def test_metadata_lists_every_slot(self, engine, default_policy):
        result = engine.generate(default_policy, count=3)
        entries = result.metadata["candidates"]

        assert result.tool_name == "forge"
        assert [e["index"] for e in entries] == [0, 1, 2]
        for entry in entries:
            assert entry["status"] == "ok"
            assert len(entry["value"]) == 16
            assert entry["alphabet_size"] == 88
            assert entry["keyspace"] == str(88 ** 16)
            assert entry["entropy"]["crack_time"].endswith("billion years")
        assert result.metadata["convention"] == "nominal"
        assert result.risk is not None
        assert result.end_time is not None

    def test_findings_never_contain_the_secret(self, engine, default_policy):
        result = engine.generate(default_policy, count=2)
        values = [e["value"] for e in result.metadata["candidates"]]
        text = " ".join(f.description + f.evidence for f in result.findings)
        for value in values:
            assert value not in text
        assert _titles(result).count("Candidate generated") == 2

    def test_structural_convention(self, engine):
        policy = GenerationPolicy(strategy=Strategy.PASSPHRASE)
        result = engine.generate(policy, convention=EntropyConvention.STRUCTURAL)
        entropy = result.metadata["candidates"][0]["entropy"]
        assert entropy["convention"] == "structural"
        assert entropy["alphabet_size"] is None

    def test_unsatisfiable_slot(self, engine, digits_policy):
        result = engine.generate(
            digits_policy, RequirementsPolicy(require_upper=True), count=1, max_attempts=3
        )
        entry = result.metadata["candidates"][0]
        assert entry["status"] == "unsatisfiable"
        assert entry["value"] is None
        assert entry["attempts"] == 3
        assert entry["violations"] == ["Must contain at least one uppercase letter"]
        assert "Requirements unsatisfiable" in _titles(result)
        assert result.highest_severity == Severity.HIGH
        assert result.risk is None

    def test_truncated_slot(self, engine):
        policy = GenerationPolicy(
            strategy=Strategy.NO_REPEATED, custom_alphabet="xyz", length=5
        )
        result = engine.generate(policy)
        assert result.metadata["candidates"][0]["status"] == "truncated"
        assert "Candidate truncated" in _titles(result)

    def test_injected_denylist(self, default_policy):
        engine = ForgeEngine(rng=SeededRandomSource(1), denylist=["aaaa"])
        policy = GenerationPolicy(custom_alphabet="a", length=4)
        result = engine.generate(policy)
        assert "Common secret detected" in _titles(result)
        assert result.metadata["candidates"][0]["warnings"] == [
            "Candidate resembles a common secret"
        ]

    def test_empty_alphabet_raises(self, engine):
        policy = GenerationPolicy(
            classes=CharacterClasses(upper=False, lower=False, digits=False, symbols=False)
        )
        with pytest.raises(EmptyAlphabetError):
            engine.generate(policy)


class TestAnalyze:
    def test_common_password(self, engine):
        result = engine.analyze_password("password")
        assert result.target == "p******d"
        assert result.metadata["common_secret"] is True
        assert result.highest_severity == Severity.CRITICAL
        assert "Weak password" in _titles(result)
        assert result.risk.score == 100.0
        assert "password" not in result.summary

    def test_strong_password(self, engine):
        result = engine.analyze_password("Tr0ub4dor&3xKq!Z")
        assert result.metadata["total"] == 12
        assert result.metadata["alphabet_size"] == 88
        assert result.metadata["common_secret"] is False
        assert _titles(result) == ["Password strength"]
        assert result.highest_severity == Severity.INFO

    def test_empty_password(self, engine):
        result = engine.analyze_password("")
        assert result.target == "<empty>"
        assert result.metadata["entropy"]["crack_time"] == "N/A"


class TestAlphabet:
    def test_default(self, engine, default_policy):
        result = engine.alphabet(default_policy)
        assert result.metadata["size"] == 88
        assert result.findings == []

    def test_small_custom_alphabet(self, engine):
        result = engine.alphabet(GenerationPolicy(custom_alphabet="abc"))
        assert result.metadata["custom"] is True
        assert _titles(result) == ["Small alphabet"]


class TestConfiguration:
    def test_denylist_path(self, tmp_path):
        path = tmp_path / "deny.txt"
        path.write_text("hunter2\nletmein\n", encoding="utf-8")
        config = KeyForgeConfig(forge=ForgeConfig(denylist_path=str(path)))
        assert ForgeEngine(config).denylist == ("hunter2", "letmein")

    def test_default_policy_uses_config(self):
        config = KeyForgeConfig(forge=ForgeConfig(default_length=24, passphrase_word_count=6))
        engine = ForgeEngine(config)
        assert engine.default_policy().length == 24
        assert engine.default_policy(strategy="passphrase").word_count == 6
        assert engine.default_policy(length=None).length == 24
        assert engine.default_policy(strategy=None).strategy == Strategy.UNIFORM

    @pytest.mark.parametrize(
        "settings, message",
        [
            ({"guesses_per_second": 0}, "guesses_per_second"),
            ({"max_attempts": 0}, "max_attempts"),
            ({"chi_squared_significance": 1.5}, "chi_squared_significance"),
            ({"entropy_convention": "bogus"}, "entropy_convention"),
        ],
    )
    def test_invalid_settings_rejected(self, settings, message):
        with pytest.raises(ConfigError, match=message):
            ForgeEngine(KeyForgeConfig(forge=ForgeConfig(**settings)))

    def test_unreadable_denylist(self, tmp_path):
        path = tmp_path / "deny.txt"
        path.write_bytes(b"\xff\xfe\x00bad")
        config = KeyForgeConfig(forge=ForgeConfig(denylist_path=str(path)))
        with pytest.raises(ConfigError, match="Cannot read denylist"):
            ForgeEngine(config)

    def test_pattern_default_policy_carries_template(self):
        config = KeyForgeConfig(forge=ForgeConfig(default_strategy="pattern"))
        engine = ForgeEngine(config)
        assert engine.default_policy().pattern_template == "word-number-symbol"
        values = engine.policy_values(strategy="pattern", pattern_template="word-word")
        assert values["pattern_template"] == "word-word"


def test_maximum_length_keyspace_is_not_stringified(engine):
    result = engine.generate(GenerationPolicy(length=4096))
    entry = result.metadata["candidates"][0]
    assert entry["length"] == 4096
    assert entry["keyspace"].endswith("e+7964")
    assert entry["entropy"]["crack_time"].endswith("e+7939 billion years")
    evidence = [f.evidence for f in result.findings if f.title == "Candidate generated"]
    assert '"keyspace_digits": 7965' in evidence[0]


def test_uniformity_self_test(engine):
    result = engine.uniformity(samples=300, length=32)
    assert result.metadata["alphabet_size"] == 88
    assert result.metadata["sample_symbols"] == 9600
    assert _titles(result)[0] in ("Uniformity test passed", "Uniformity test failed")

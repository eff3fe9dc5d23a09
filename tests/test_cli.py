"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from shared.config import ForgeConfig, KeyForgeConfig

from keyforge import __version__
from keyforge.cli import cli
from keyforge.core.engine import ForgeEngine
from keyforge.core.random_source import SeededRandomSource
from keyforge.generators.charset import SYMBOLS
from keyforge.generators.wordlist import WORDS


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, args, **kwargs):
    obj = {"engine": ForgeEngine(rng=SeededRandomSource(2024))}
    return runner.invoke(cli, args, obj=obj, **kwargs)


class TestGenerate:
    def test_console(self, runner):
        result = _invoke(runner, ["-q", "generate", "--length", "12", "--count", "2"])
        assert result.exit_code == 0, result.output
        assert "Generated Candidates" in result.output
        assert "Generated 2 of 2" in result.output

    def test_json_masks_by_default(self, runner):
        result = _invoke(runner, ["-o", "json", "generate", "--length", "20"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        value = payload["metadata"]["candidates"][0]["value"]
        assert len(value) == 20
        assert set(value[1:-1]) == {"*"}

    def test_json_reveal(self, runner):
        result = _invoke(runner, ["-o", "json", "--reveal", "generate", "--preset", "pin"])
        assert result.exit_code == 0, result.output
        value = json.loads(result.stdout)["metadata"]["candidates"][0]["value"]
        assert value.isdigit()
        assert len(value) == 6

    def test_passphrase_options(self, runner):
        args = ["-o", "json", "--reveal", "generate", "-s", "passphrase", "--words", "5", "--separator", "."]
        result = _invoke(runner, args)
        assert result.exit_code == 0, result.output
        value = json.loads(result.stdout)["metadata"]["candidates"][0]["value"]
        assert value.count(".") == 4

    def test_empty_alphabet_exits_1(self, runner):
        args = ["-q", "generate", "--no-upper", "--no-lower", "--no-digits", "--no-symbols"]
        result = _invoke(runner, args)
        assert result.exit_code == 1
        assert "Select at least one character class" in result.output

    def test_pattern_strategy_with_template(self, runner):
        args = ["-o", "json", "--reveal", "generate", "--strategy", "pattern",
                "--pattern", "word-number-symbol"]
        result = _invoke(runner, args)
        assert result.exit_code == 0, result.output
        value = json.loads(result.stdout)["metadata"]["candidates"][0]["value"]
        assert value[-1] in SYMBOLS
        assert value[-5:-1].isdigit()
        assert value[:-5].lower() in WORDS

    def test_pattern_strategy_falls_back_to_configured_template(self, runner):
        config = KeyForgeConfig(forge=ForgeConfig(default_pattern="word-word"))
        obj = {"engine": ForgeEngine(config, rng=SeededRandomSource(2024))}
        args = ["-o", "json", "--reveal", "generate", "--strategy", "pattern"]
        result = runner.invoke(cli, args, obj=obj)
        assert result.exit_code == 0, result.output
        value = json.loads(result.stdout)["metadata"]["candidates"][0]["value"]
        assert value.isalpha()

    def test_pattern_as_configured_default_strategy(self, runner):
        config = KeyForgeConfig(forge=ForgeConfig(default_strategy="pattern"))
        obj = {"engine": ForgeEngine(config, rng=SeededRandomSource(2024))}
        result = runner.invoke(cli, ["-o", "json", "--reveal", "generate"], obj=obj)
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["metadata"]["policy"]["strategy"] == "pattern"
        assert payload["metadata"]["policy"]["pattern_template"] == "word-number-symbol"

    def test_preset_switched_to_pattern_uses_default_template(self, runner):
        args = ["-o", "json", "--reveal", "generate", "--preset", "pin", "--strategy", "pattern"]
        result = _invoke(runner, args)
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["metadata"]["policy"]["pattern_template"] == "word-number-symbol"

    def test_unknown_pattern_token_is_a_usage_error(self, runner):
        args = ["-q", "generate", "--strategy", "pattern", "--pattern", "word-emoji"]
        result = _invoke(runner, args)
        assert result.exit_code == 2

    def test_maximum_length_reports_keyspace_in_scientific_notation(self, runner):
        result = _invoke(runner, ["-o", "json", "generate", "--length", "4096"])
        assert result.exit_code == 0, result.output
        entry = json.loads(result.stdout)["metadata"]["candidates"][0]
        assert entry["keyspace"].endswith("e+7964")
        assert entry["entropy"]["crack_time"].endswith("e+7939 billion years")

    def test_unsatisfiable_exits_1(self, runner):
        args = ["-q", "generate", "--no-upper", "--require-upper", "--max-attempts", "5"]
        result = _invoke(runner, args)
        assert result.exit_code == 1

    def test_html_report(self, runner, tmp_path):
        target = tmp_path / "report.html"
        result = _invoke(runner, ["-o", "html", "-f", str(target), "generate"])
        assert result.exit_code == 0, result.output
        html = target.read_text(encoding="utf-8")
        assert "KeyForge" in html
        assert "Candidates" in html


class TestAnalyze:
    def test_json(self, runner):
        result = _invoke(runner, ["-o", "json", "analyze", "password"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["metadata"]["common_secret"] is True
        assert payload["report_metadata"]["target"] == "p******d"

    def test_console(self, runner):
        result = _invoke(runner, ["-q", "analyze", "Tr0ub4dor&3xKq!Z"])
        assert result.exit_code == 0, result.output
        assert "Password Analysis" in result.output
        assert "VERY STRONG" in result.output

    def test_reads_stdin(self, runner):
        result = _invoke(runner, ["-o", "json", "analyze", "-"], input="hunter2\n")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["metadata"]["length"] == 7


class TestAlphabet:
    def test_digits_only(self, runner):
        args = ["-o", "json", "alphabet", "--no-upper", "--no-lower", "--no-symbols"]
        result = _invoke(runner, args)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["metadata"]["symbols"] == "0123456789"

    def test_exclude_similar(self, runner):
        result = _invoke(runner, ["-o", "json", "alphabet", "--exclude-similar"])
        assert json.loads(result.stdout)["metadata"]["size"] == 83


class TestPresets:
    def test_save_show_delete(self, runner):
        with runner.isolated_filesystem():
            saved = _invoke(runner, ["presets", "save", "work", "--length", "24"])
            assert saved.exit_code == 0, saved.output

            listed = _invoke(runner, ["-q", "presets", "list"])
            assert "work" in listed.output

            shown = _invoke(runner, ["-q", "presets", "show", "work"])
            assert shown.exit_code == 0
            assert "24" in shown.output

            duplicate = _invoke(runner, ["presets", "save", "work"])
            assert duplicate.exit_code == 1

            generated = _invoke(
                runner, ["-o", "json", "--reveal", "generate", "--preset", "work"]
            )
            value = json.loads(generated.stdout)["metadata"]["candidates"][0]["value"]
            assert len(value) == 24

            deleted = _invoke(runner, ["presets", "delete", "work"])
            assert deleted.exit_code == 0

    def test_save_pattern_preset(self, runner):
        with runner.isolated_filesystem():
            args = ["presets", "save", "memorable", "--strategy", "pattern", "--pattern", "word-number"]
            saved = _invoke(runner, args)
            assert saved.exit_code == 0, saved.output

            generated = _invoke(
                runner, ["-o", "json", "--reveal", "generate", "--preset", "memorable"]
            )
            assert generated.exit_code == 0, generated.output
            value = json.loads(generated.stdout)["metadata"]["candidates"][0]["value"]
            assert value[-4:].isdigit()
            assert value[:-4].isalpha()

    def test_builtin_cannot_be_deleted(self, runner):
        with runner.isolated_filesystem():
            result = _invoke(runner, ["presets", "delete", "strong"])
            assert result.exit_code == 1
            assert "built-in" in result.output

    def test_unknown_preset(self, runner):
        with runner.isolated_filesystem():
            result = _invoke(runner, ["-q", "generate", "--preset", "nope"])
            assert result.exit_code == 1
            assert "Unknown preset" in result.output


def test_uniformity_json(runner):
    result = _invoke(runner, ["-o", "json", "uniformity", "--samples", "200"])
    assert result.exit_code in (0, 1)
    assert '"alphabet_size": 88' in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_too_few_uniformity_samples_exits_1(runner):
    result = _invoke(runner, ["-q", "uniformity", "--samples", "1"])
    assert result.exit_code == 1
    assert "too few" in result.output


class TestConfigErrors:
    def test_malformed_toml(self, runner, tmp_path):
        path = tmp_path / "keyforge.toml"
        path.write_text("[forge\nmax_attempts = 3\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(path), "alphabet"])
        assert result.exit_code == 1
        assert "Cannot load config" in result.output

    def test_out_of_range_setting(self, runner, tmp_path):
        path = tmp_path / "keyforge.toml"
        path.write_text("[forge]\nguesses_per_second = 0\n", encoding="utf-8")
        result = runner.invoke(cli, ["-q", "--config", str(path), "alphabet"])
        assert result.exit_code == 1
        assert "guesses_per_second must be positive" in result.output

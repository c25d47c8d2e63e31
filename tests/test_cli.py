"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from undha.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_args(tmp_path, raw_entries, monkeypatch):
    """Global options pointing at a temp config and lexicon file."""
    monkeypatch.delenv("UNDHA_CONFIG", raising=False)
    config = tmp_path / "config.yaml"
    config.write_text("responder: none\n", encoding="utf-8")
    lexicon = tmp_path / "lexicon.json"
    lexicon.write_text(json.dumps({"entries": raw_entries}), encoding="utf-8")
    return ["--config", str(config), "--lexicon", str(lexicon)]


class TestTranslate:
    """Tests for the translate command."""

    def test_table(self, runner, cli_args):
        result = runner.invoke(
            cli, cli_args + ["translate", "-r", "honorific", "-s", "table", "ibu makan"]
        )
        assert result.exit_code == 0, result.output
        assert "ibu dhahar" in result.output
        assert "Krama Inggil" in result.output

    def test_words_joined(self, runner, cli_args):
        result = runner.invoke(
            cli, cli_args + ["translate", "--json", "-s", "table", "makan", "nasi"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["original_text"] == "makan nasi"
        assert data["translated_text"] == "mangan sega"

    def test_json_reverse(self, runner, cli_args):
        result = runner.invoke(
            cli,
            cli_args
            + ["translate", "--json", "--reverse", "-r", "krama-alus", "griya"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["translated_text"] == "rumah"
        assert data["direction"] == "reverse"

    def test_hybrid_with_fake_responder(self, runner, cli_args):
        result = runner.invoke(
            cli,
            cli_args
            + ["translate", "--json", "--responder", "fake", "-r", "polite", "makanan"],
        )
        data = json.loads(result.output)
        assert data["method"] == "external"
        assert data["translated_text"] == "[polite] makanan"

    def test_hybrid_degraded_without_responder(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["translate", "makanan"])
        assert result.exit_code == 0, result.output
        assert "mangan" in result.output
        assert "showing lexicon result" in result.output

    def test_no_match(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["translate", "-s", "table", "xyz"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_external_without_responder(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["translate", "-s", "external", "x"])
        assert result.exit_code == 1
        assert "No external responder" in result.output

    def test_missing_lexicon(self, runner, cli_args, tmp_path):
        args = cli_args[:2] + ["--lexicon", str(tmp_path / "nope.json")]
        result = runner.invoke(cli, args + ["translate", "makan"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_demo_lexicon_default(self, runner, tmp_path, monkeypatch):
        """Without a configured lexicon the bundled sample is used."""
        monkeypatch.delenv("UNDHA_LEXICON_PATH", raising=False)
        config = tmp_path / "config.yaml"
        config.write_text("{}\n", encoding="utf-8")
        result = runner.invoke(
            cli,
            ["--config", str(config), "translate", "--json", "-s", "table", "tidur"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["translated_text"] == "turu"


class TestLookupCommands:
    """Tests for lookup, search, stats and glossary."""

    def test_lookup(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["lookup", "-r", "polite", "mandi"])
        assert result.exit_code == 0
        assert "adus" in result.output
        assert "ngoko fallback" in result.output

    def test_lookup_reverse(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["lookup", "--reverse", "tindak"])
        assert result.exit_code == 0
        assert "pergi" in result.output

    def test_lookup_missing(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["lookup", "terbang"])
        assert result.exit_code == 1

    def test_search(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["search", "griya"])
        assert result.exit_code == 0
        assert "rumah" in result.output

    def test_stats_json(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["stats", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["total_entries"] == 5

    def test_glossary(self, runner, cli_args):
        result = runner.invoke(cli, cli_args + ["glossary", "makan, xyz"])
        assert result.exit_code == 0
        assert "makan=mangan / nedha / dhahar" in result.output
        assert "xyz=(no entry)" in result.output


class TestAuth:
    """Tests for auth set/show/clear with file storage."""

    def test_set_show_clear(self, runner, tmp_path, monkeypatch):
        import undha.responders.credentials as credentials

        monkeypatch.setattr(credentials, "KEY_FILE_PATH", tmp_path / ".api_key")
        monkeypatch.delenv("UNDHA_API_KEY", raising=False)
        monkeypatch.setenv("UNDHA_CONFIG", str(tmp_path / "config.yaml"))
        (tmp_path / "config.yaml").write_text("{}\n", encoding="utf-8")

        with patch("undha.responders.credentials._keychain", return_value=None):
            result = runner.invoke(cli, ["auth", "set", "--key", "sk-abcdef123456"])
            assert result.exit_code == 0, result.output
            assert "file" in result.output

            result = runner.invoke(cli, ["auth", "show"])
            assert "sk-a...****" in result.output
            assert "sk-abcdef123456" not in result.output

            result = runner.invoke(cli, ["auth", "clear"])
            assert "deleted" in result.output

            result = runner.invoke(cli, ["auth", "show"])
            assert result.exit_code == 1

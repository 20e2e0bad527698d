# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Tests for the typer-ai command-line front end.

Config is redirected to tmp_path, secrets to memory, and providers are fakes.
"""

import io
from unittest.mock import patch

import pytest

from typer_ai import cli
from typer_ai.config import load_config
from typer_ai.corrector import Corrector
from typer_ai.errors import MissingApiKeyError
from typer_ai.keystore import MemorySecretStore
from typer_ai.providers.base import CorrectionProvider


class CannedProvider(CorrectionProvider):
    def __init__(self, config, answer=None, error=None):
        super().__init__(config, MemorySecretStore())
        self.answer = answer
        self.error = error

    @property
    def id(self) -> str:
        return "grok"

    @property
    def name(self) -> str:
        return "Grok"

    def correct(self, text: str, prompt: str) -> str:
        if self.error:
            raise self.error
        return self.answer


@pytest.fixture
def env(tmp_path):
    """Point the CLI at a temp config and an in-memory secret store."""
    cfg_file = tmp_path / "config.toml"
    secrets = MemorySecretStore()
    with patch.object(cli, "load_config", lambda: load_config(cfg_file)), \
         patch.object(cli, "default_secret_store", lambda: secrets):
        yield cfg_file, secrets


def _with_provider(answer=None, error=None):
    """Patch the CLI's Corrector so it uses a canned provider."""
    def factory(config, secrets):
        return Corrector(config, secrets, CannedProvider(config, answer, error))
    return patch.object(cli, "Corrector", factory)


def _recording_provider(seen):
    """Patch the CLI's Corrector so the provider records the text it receives."""
    def factory(config, secrets):
        provider = CannedProvider(config, "ok")
        provider.correct = lambda text, prompt: seen.append(text) or "ok"
        return Corrector(config, secrets, provider)
    return patch.object(cli, "Corrector", factory)


class TestDispatch:
    def test_unknown_command_exits(self, env, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.cli_main(["frobnicate"])
        assert exc.value.code == 1
        assert "Unknown command" in capsys.readouterr().err

    def test_help(self, env, capsys):
        cli.cli_main(["help"])
        assert "typer-ai fix" in capsys.readouterr().out

    def test_default_shows_status(self, env, capsys):
        cli.cli_main([])
        out = capsys.readouterr().out
        assert "Grok (xAI)" in out
        assert "missing" in out

    def test_version(self, env, capsys):
        cli.cli_main(["version"])
        assert capsys.readouterr().out.startswith("Typer AI ")


class TestFixCommand:
    def test_prints_result_and_count(self, env, capsys):
        with _with_provider("The cat sat on the mat"):
            cli.cli_main(["fix", "The", "cat", "sat", "on", "mat"])
        captured = capsys.readouterr()
        assert captured.out.strip() == "The cat sat on the mat"
        assert "1 word changed" in captured.err

    def test_plain_output(self, env, capsys):
        with _with_provider("Hello, world."):
            cli.cli_main(["fix", "--plain", "hello world"])
        captured = capsys.readouterr()
        assert captured.out == "Hello, world.\n"
        assert "changed" not in captured.err

    def test_reads_stdin(self, env, capsys):
        with _with_provider("From stdin."), patch("sys.stdin", io.StringIO("from stdin\n")):
            cli.cli_main(["fix", "-"])
        assert "From stdin." in capsys.readouterr().out

    def test_records_stats(self, env, capsys):
        cfg_file, _ = env
        with _with_provider("a b c d"):
            cli.cli_main(["fix", "a b"])
        assert load_config(cfg_file).stats.words_changed == 2

    def test_provider_error_exits(self, env, capsys):
        with _with_provider(error=MissingApiKeyError("Grok", "grok")):
            with pytest.raises(SystemExit):
                cli.cli_main(["fix", "hello"])
        assert "No Grok API key set" in capsys.readouterr().err

    def test_copy(self, env, capsys):
        with _with_provider("Copied."), patch.object(cli, "copy_to_clipboard", return_value=True) as copy:
            cli.cli_main(["fix", "--copy", "copied"])
        copy.assert_called_once_with("Copied.")

    def test_flag_words_inside_text_are_kept(self, env, capsys):
        seen = []
        with _recording_provider(seen), \
             patch.object(cli, "copy_to_clipboard") as copy:
            cli.cli_main(["fix", "use", "--plain", "and", "--copy", "flags"])
        assert seen == ["use --plain and --copy flags"]
        copy.assert_not_called()

    def test_double_dash_ends_options(self, env, capsys):
        seen = []
        with _recording_provider(seen):
            cli.cli_main(["fix", "--plain", "--", "--copy", "is", "a", "flag"])
        assert seen == ["--copy is a flag"]
        assert capsys.readouterr().out == "ok\n"


class TestDiffCommand:
    def test_offline_diff(self, env, capsys):
        cli.cli_main(["diff", "a b c", "x y z"])
        captured = capsys.readouterr()
        assert captured.out.strip() == "x y z"
        assert "3 changed" in captured.err

    def test_wrong_arity(self, env):
        with pytest.raises(SystemExit):
            cli.cli_main(["diff", "only one"])


class TestSettingsCommands:
    def test_switch_provider(self, env, capsys):
        cfg_file, _ = env
        cli.cli_main(["provider", "gemini"])
        assert load_config(cfg_file).provider.default == "gemini"

    def test_unknown_provider(self, env, capsys):
        with pytest.raises(SystemExit):
            cli.cli_main(["provider", "openai"])
        assert "Unknown provider" in capsys.readouterr().err

    def test_set_model(self, env, capsys):
        cfg_file, _ = env
        cli.cli_main(["model", "grok", "grok-3-mini"])
        assert load_config(cfg_file).grok.model == "grok-3-mini"

    def test_prompt_set_and_reset(self, env, capsys):
        cfg_file, _ = env
        cli.cli_main(["prompt", "set", "Make", "it", "formal:"])
        assert load_config(cfg_file).provider.prompt == "Make it formal:"
        cli.cli_main(["prompt", "reset"])
        assert load_config(cfg_file).provider.prompt.startswith("Rewrite to fix grammar")

    def test_theme(self, env, capsys):
        cfg_file, _ = env
        cli.cli_main(["theme", "dark"])
        assert load_config(cfg_file).ui.theme == "dark"

    def test_font_size_out_of_range(self, env, capsys):
        with pytest.raises(SystemExit):
            cli.cli_main(["font-size", "99"])

    def test_key_set_and_clear(self, env, capsys):
        _, secrets = env
        with patch("typer_ai.cli.getpass.getpass", return_value=" gm-key "):
            cli.cli_main(["key", "gemini"])
        assert secrets.get("gemini_api_key") == "gm-key"
        cli.cli_main(["key", "gemini", "--clear"])
        assert secrets.get("gemini_api_key") is None

    def test_stats_and_reset(self, env, capsys):
        cfg_file, _ = env
        with _with_provider("x y"):
            cli.cli_main(["fix", "a"])
        capsys.readouterr()
        cli.cli_main(["stats"])
        assert "Fixes" in capsys.readouterr().out
        cli.cli_main(["stats", "reset"])
        assert load_config(cfg_file).stats.total_fixes == 0

    def test_config_path(self, env, capsys):
        cfg_file, _ = env
        cli.cli_main(["config", "path"])
        assert capsys.readouterr().out.strip() == str(cfg_file)

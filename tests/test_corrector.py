# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Unit tests for the correction service and usage statistics.

Providers are fakes; config files live in tmp_path.
"""

import threading

import pytest

from typer_ai.config import load_config
from typer_ai.corrector import Corrector
from typer_ai.diff import build_diff
from typer_ai.errors import CorrectionBusyError, ProviderRequestError
from typer_ai.keystore import MemorySecretStore
from typer_ai.providers.base import CorrectionProvider
from typer_ai.stats import format_stats, record_fix, reset_stats


class FakeProvider(CorrectionProvider):
    """Returns a canned answer and remembers what it was asked."""

    def __init__(self, config, answer="", error=None):
        super().__init__(config, MemorySecretStore())
        self.answer = answer
        self.error = error
        self.calls = []
        self.closed = False

    @property
    def id(self) -> str:
        return "grok"

    @property
    def name(self) -> str:
        return "Fake"

    def correct(self, text: str, prompt: str) -> str:
        self.calls.append((text, prompt))
        if self.error:
            raise self.error
        return self.answer

    def close(self) -> None:
        self.closed = True


class BlockingProvider(FakeProvider):
    """Holds the request open until released."""

    def __init__(self, config):
        super().__init__(config, answer="done")
        self.entered = threading.Event()
        self.release = threading.Event()

    def correct(self, text: str, prompt: str) -> str:
        self.entered.set()
        self.release.wait(timeout=5)
        return self.answer


@pytest.fixture
def config(tmp_path):
    return load_config(tmp_path / "config.toml")


# ---------------------------------------------------------------------------
# Corrector.fix
# ---------------------------------------------------------------------------

class TestCorrectorFix:
    def test_returns_diff_of_trimmed_texts(self, config):
        provider = FakeProvider(config, answer="  The cat sat on the mat \n")
        result = Corrector(config, MemorySecretStore(), provider).fix("  The cat sat on mat\n")

        assert result.original == "The cat sat on mat"
        assert result.corrected == "The cat sat on the mat"
        assert result.provider == "Fake"
        assert result.diff.changed_tokens() == ["the"]
        assert result.diff.changed_count == 1

    def test_label_like_first_word_survives(self, config):
        provider = FakeProvider(config, answer="Fixed: the login bug on Safari.\n")
        result = Corrector(config, MemorySecretStore(), provider).fix("fixed: the login bug on safari")
        assert result.corrected == "Fixed: the login bug on Safari."
        assert result.diff.changed_tokens() == ["Fixed:", "Safari."]

    def test_sends_trimmed_text_and_prompt(self, config):
        config.provider.prompt = "Fix:"
        provider = FakeProvider(config, answer="ok")
        Corrector(config, MemorySecretStore(), provider).fix("  hello  ")
        assert provider.calls == [("hello", "Fix:")]

    def test_empty_text_rejected(self, config):
        provider = FakeProvider(config, answer="x")
        with pytest.raises(ValueError):
            Corrector(config, MemorySecretStore(), provider).fix("   \n ")
        assert provider.calls == []

    def test_provider_error_propagates(self, config):
        provider = FakeProvider(config, error=ProviderRequestError("Fake not responding", "Fake"))
        corrector = Corrector(config, MemorySecretStore(), provider)
        with pytest.raises(ProviderRequestError):
            corrector.fix("hello")
        assert corrector.busy is False
        assert config.stats.total_fixes == 0

    def test_concurrent_fix_rejected(self, config):
        provider = BlockingProvider(config)
        corrector = Corrector(config, MemorySecretStore(), provider)
        results = []
        worker = threading.Thread(target=lambda: results.append(corrector.fix("first")))
        worker.start()
        try:
            assert provider.entered.wait(timeout=5)
            assert corrector.busy is True
            with pytest.raises(CorrectionBusyError):
                corrector.fix("second")
        finally:
            provider.release.set()
            worker.join(timeout=5)

        assert results[0].corrected == "done"
        assert corrector.busy is False

    def test_close_closes_provider(self, config):
        provider = FakeProvider(config, answer="x")
        Corrector(config, MemorySecretStore(), provider).close()
        assert provider.closed is True


class TestProviderSelection:
    def test_follows_config_default(self, config):
        corrector = Corrector(config, MemorySecretStore())
        assert corrector.provider.id == "grok"
        config.provider.default = "gemini"
        assert corrector.provider.id == "gemini"

    def test_reuses_instance_while_unchanged(self, config):
        corrector = Corrector(config, MemorySecretStore())
        assert corrector.provider is corrector.provider

    def test_pinned_provider_ignores_config(self, config):
        provider = FakeProvider(config, answer="x")
        corrector = Corrector(config, MemorySecretStore(), provider)
        config.provider.default = "gemini"
        assert corrector.provider is provider


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

class TestStats:
    def test_fix_records_usage(self, config):
        provider = FakeProvider(config, answer="The cat sat on the mat")
        Corrector(config, MemorySecretStore(), provider).fix("The cat sat on mat")

        assert config.stats.total_fixes == 1
        assert config.stats.characters_fixed == len("The cat sat on mat")
        assert config.stats.words_changed == 1

        reloaded = load_config(config.path)
        assert reloaded.stats.total_fixes == 1
        assert reloaded.stats.words_changed == 1

    def test_stats_accumulate(self, config):
        record_fix(config, build_diff("a b c", "x y z"))
        record_fix(config, build_diff("quick brown fox", "quick brown fox"))
        assert config.stats.total_fixes == 2
        assert config.stats.characters_fixed == len("a b c") + len("quick brown fox")
        assert config.stats.words_changed == 3

    def test_record_stats_disabled(self, config):
        provider = FakeProvider(config, answer="changed")
        Corrector(config, MemorySecretStore(), provider, record_stats=False).fix("original")
        assert config.stats.total_fixes == 0

    def test_reset(self, config):
        record_fix(config, build_diff("a", "b"))
        reset_stats(config)
        assert config.stats.total_fixes == 0
        assert load_config(config.path).stats.words_changed == 0

    def test_format_stats(self, config):
        config.stats.total_fixes = 4
        config.stats.characters_fixed = 12345
        config.stats.words_changed = 10
        rows = dict(format_stats(config.stats))
        assert rows["Characters"] == "12,345"
        assert rows["Avg words/fix"] == "2.5"

    def test_format_stats_without_fixes(self, config):
        assert dict(format_stats(config.stats))["Avg words/fix"] == "-"

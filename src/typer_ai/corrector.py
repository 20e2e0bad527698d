# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Correction service for Typer AI.

Sends text to the configured provider, diffs the result against the
input, and records usage statistics. Only one correction may be in
flight at a time.

Usage:
    from typer_ai.config import load_config
    from typer_ai.corrector import Corrector
    from typer_ai.keystore import default_secret_store

    corrector = Corrector(load_config(), default_secret_store())
    result = corrector.fix("their going to the store tomorow")
    print(result.corrected, result.diff.changed_count)
    corrector.close()
"""

import threading
from dataclasses import dataclass
from typing import Optional

from .config import Config
from .diff import DiffResult, build_diff
from .errors import CorrectionBusyError
from .keystore import SecretStore
from .providers import CorrectionProvider, create_provider
from .stats import record_fix
from .utils import log, truncate


@dataclass
class FixResult:
    """Outcome of one successful correction."""
    original: str
    corrected: str
    provider: str
    diff: DiffResult


class Corrector:
    """
    Unified correction interface.

    Wraps the provider selected in config.provider.default; switching the
    provider in the config takes effect on the next fix().
    """

    def __init__(
        self,
        config: Config,
        secrets: SecretStore,
        provider: Optional[CorrectionProvider] = None,
        record_stats: bool = True,
    ):
        self._config = config
        self._secrets = secrets
        self._provider = provider
        self._pinned = provider is not None
        self._record_stats = record_stats
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        """True while a correction is in flight."""
        return self._lock.locked()

    @property
    def provider(self) -> CorrectionProvider:
        """The provider the next fix() will use."""
        if self._pinned:
            return self._provider
        wanted = self._config.provider.default
        if self._provider is None or self._provider.id != wanted:
            if self._provider is not None:
                self._provider.close()
            self._provider = create_provider(wanted, self._config, self._secrets)
            log(f"Provider: {self._provider.name}", "INFO")
        return self._provider

    def fix(self, text: str) -> FixResult:
        """
        Correct text with the configured provider.

        Args:
            text: The text to correct. Leading and trailing whitespace is
                trimmed before sending.

        Returns:
            FixResult with the corrected text and its word diff.

        Raises:
            ValueError: If text is empty after trimming.
            CorrectionBusyError: If another correction is in flight.
            ProviderError: If the provider call failed.
        """
        trimmed = text.strip()
        if not trimmed:
            raise ValueError("Nothing to fix")

        if not self._lock.acquire(blocking=False):
            raise CorrectionBusyError("A correction is already in progress")
        try:
            provider = self.provider
            log(f"Fixing: {truncate(trimmed)}", "AI")
            corrected = provider.correct(trimmed, self._config.provider.prompt).strip()

            diff = build_diff(trimmed, corrected)
            if self._record_stats:
                record_fix(self._config, diff)

            log(f"{diff.changed_count} words changed", "OK")
            return FixResult(
                original=trimmed,
                corrected=corrected,
                provider=provider.name,
                diff=diff,
            )
        finally:
            self._lock.release()

    def close(self) -> None:
        """Clean up provider resources."""
        if self._provider is not None:
            self._provider.close()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Exception types for Typer AI.

Provider failures carry a short, user-facing message in ``str(e)``;
the CLI prints it as-is.
"""


class TyperError(Exception):
    """Base class for all Typer AI errors."""


class ProviderError(TyperError):
    """A correction provider could not return corrected text."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class MissingApiKeyError(ProviderError):
    """No API key is stored for the selected provider."""

    def __init__(self, provider: str, provider_id: str = ""):
        hint = f" Run: typer-ai key {provider_id}" if provider_id else ""
        super().__init__(f"No {provider} API key set.{hint}", provider)


class BadResponseError(ProviderError):
    """The provider answered, but not in the expected shape."""


class ProviderRequestError(ProviderError):
    """Connection, timeout or HTTP status failure talking to a provider."""

    def __init__(self, message: str, provider: str = "", status: int | None = None):
        super().__init__(message, provider)
        self.status = status


class CorrectionBusyError(TyperError):
    """A correction is already in flight."""


class SecretStoreError(TyperError):
    """Reading or writing a stored secret failed."""


class LoginItemError(TyperError):
    """Registering or removing the launch-at-login item failed."""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Base correction provider interface for Typer AI.

All providers must inherit from CorrectionProvider and implement
``correct``. Failures are raised as ProviderError subclasses.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, Union

import requests

from ..config import Config
from ..errors import BadResponseError, MissingApiKeyError, ProviderRequestError
from ..keystore import SecretStore
from ..utils import log

# Shared constants
ERROR_TRUNCATE_LENGTH = 80  # Consistent error message truncation
DEFAULT_CONNECT_TIMEOUT = 10  # Default connection timeout in seconds


class CorrectionProvider(ABC):
    """
    Abstract base class for LLM correction providers.

    Owns an HTTP session and reads its settings from the shared Config,
    so model or timeout changes apply to the next request.
    """

    def __init__(
        self,
        config: Config,
        secrets: SecretStore,
        session: Optional[requests.Session] = None,
    ):
        self._config = config
        self._secrets = secrets
        self._session = session or requests.Session()

    @property
    @abstractmethod
    def id(self) -> str:
        """Registry identifier, also the config section name."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the provider."""
        pass

    @property
    def secret_key(self) -> str:
        """Account name of this provider's API key in the secret store."""
        return f"{self.id}_api_key"

    @property
    def model(self) -> str:
        return getattr(self._config, self.id).model

    @abstractmethod
    def correct(self, text: str, prompt: str) -> str:
        """
        Rewrite text according to prompt.

        Args:
            text: The text to correct.
            prompt: Instruction for the model; the text follows it.

        Returns:
            The model's answer as returned, whitespace included.

        Raises:
            MissingApiKeyError: No key stored for this provider.
            ProviderRequestError: Connection, timeout or HTTP failure.
            BadResponseError: The response did not contain text.
        """
        pass

    def close(self) -> None:
        """Clean up resources."""
        self._session.close()

    # ─────────────────────────────────────────────────────────────────
    # Shared utilities
    # ─────────────────────────────────────────────────────────────────

    def _api_key(self) -> str:
        key = self._secrets.get(self.secret_key)
        if not key:
            raise MissingApiKeyError(self.name, self.id)
        return key

    def _get_timeout(self, timeout_config: int) -> Union[int, Tuple[int, None]]:
        """
        Get timeout value for requests.

        Args:
            timeout_config: Timeout from config (0 = unlimited read)

        Returns:
            Timeout value: int if configured, or (connect_timeout, None) for unlimited read
        """
        if timeout_config > 0:
            return timeout_config
        return (DEFAULT_CONNECT_TIMEOUT, None)  # (connect, read=unlimited)

    def _truncate_error(self, error: Any) -> str:
        """Truncate error message to consistent length."""
        return str(error)[:ERROR_TRUNCATE_LENGTH]

    def _post_json(self, url: str, payload: dict, **kwargs) -> Any:
        """POST payload as JSON and return the decoded response body."""
        timeout = self._get_timeout(getattr(self._config, self.id).timeout)
        try:
            r = self._session.post(url, json=payload, timeout=timeout, **kwargs)
            r.raise_for_status()
        except requests.exceptions.ConnectionError as e:
            log(f"{self.name} connection error: {e}", "ERR")
            raise ProviderRequestError(f"{self.name} not responding", self.name) from e
        except requests.exceptions.Timeout as e:
            log(f"{self.name} timeout", "ERR")
            raise ProviderRequestError(f"{self.name} request timed out", self.name) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            log(f"{self.name} HTTP error {status}: {self._truncate_error(e)}", "ERR")
            raise ProviderRequestError(
                f"{self.name} HTTP error {status or 'unknown'}", self.name, status
            ) from e
        except requests.exceptions.RequestException as e:
            log(f"Unexpected {self.name} error: {type(e).__name__}: {e}", "ERR")
            raise ProviderRequestError(self._truncate_error(e), self.name) from e

        try:
            return r.json()
        except ValueError as e:
            log(f"Invalid JSON response from {self.name}: {e}", "ERR")
            raise BadResponseError(f"Unexpected response from {self.name}.", self.name) from e

    def _bad_response(self) -> BadResponseError:
        return BadResponseError(f"Unexpected response from {self.name}.", self.name)

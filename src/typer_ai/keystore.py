# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
API key storage for Typer AI.

Keys live outside config.toml. On macOS they are generic passwords in the
login Keychain (service "com.typer.mac"), managed through the `security`
command-line tool. Elsewhere they are read from environment variables.

Usage:
    from typer_ai.keystore import default_secret_store

    store = default_secret_store()
    store.set("grok_api_key", "xai-...")
    key = store.get("grok_api_key")
"""

import os
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import SecretStoreError
from .utils import SUBPROCESS_TIMEOUT, log

KEYCHAIN_SERVICE = "com.typer.mac"
SECURITY_BIN = "/usr/bin/security"

# `security` exits with this code when the item does not exist
ITEM_NOT_FOUND = 44

ENV_PREFIX = "TYPER_"


class SecretStore(ABC):
    """Key-value storage for credentials."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if there is none."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key. An empty value removes the key."""
        pass

    def delete(self, key: str) -> None:
        self.set(key, "")


class KeychainSecretStore(SecretStore):
    """Generic-password items in the macOS login Keychain."""

    def __init__(self, service: str = KEYCHAIN_SERVICE):
        self._service = service

    def get(self, key: str) -> Optional[str]:
        result = self._run(
            "find-generic-password", "-s", self._service, "-a", key, "-w",
        )
        if result.returncode == ITEM_NOT_FOUND:
            return None
        if result.returncode != 0:
            raise SecretStoreError(f"Keychain read failed for {key}: {result.stderr.strip()}")
        value = result.stdout.rstrip("\n")
        return value or None

    def set(self, key: str, value: str) -> None:
        # security has no update verb: delete, then add
        result = self._run("delete-generic-password", "-s", self._service, "-a", key)
        if result.returncode not in (0, ITEM_NOT_FOUND):
            raise SecretStoreError(f"Keychain delete failed for {key}: {result.stderr.strip()}")
        if not value:
            log(f"Keychain: removed {key}", "INFO")
            return

        if "\n" in value or "\r" in value:
            raise SecretStoreError(f"Keychain write failed for {key}: value contains a line break")
        # Password travels on stdin, never in argv
        command = " ".join((
            "add-generic-password",
            "-s", _quote(self._service),
            "-a", _quote(key),
            "-w", _quote(value),
        ))
        result = self._run("-i", input=command + "\n")
        if result.returncode != 0 or result.stderr.strip():
            raise SecretStoreError(f"Keychain write failed for {key}: {result.stderr.strip()}")
        log(f"Keychain: saved {key}", "OK")

    def _run(self, *args: str, input: Optional[str] = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [SECURITY_BIN, *args], input=input,
                capture_output=True, text=True, timeout=SUBPROCESS_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise SecretStoreError(f"Keychain unavailable: {e}") from e


def _quote(arg: str) -> str:
    """Quote one argument for `security -i`, which splits its input like a shell."""
    return '"' + arg.replace("\\", "\\\\").replace('"', '\\"') + '"'


class EnvSecretStore(SecretStore):
    """Read-only lookup of TYPER_<KEY> environment variables."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    @staticmethod
    def variable_name(key: str) -> str:
        return ENV_PREFIX + key.upper()

    def get(self, key: str) -> Optional[str]:
        return self._environ.get(self.variable_name(key)) or None

    def set(self, key: str, value: str) -> None:
        raise SecretStoreError(
            f"Cannot store secrets on this platform. Set {self.variable_name(key)} instead."
        )


class MemorySecretStore(SecretStore):
    """In-process store, used by tests and embedders."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key) or None

    def set(self, key: str, value: str) -> None:
        if value:
            self._values[key] = value
        else:
            self._values.pop(key, None)


def default_secret_store() -> SecretStore:
    """Keychain on macOS, environment variables elsewhere."""
    if sys.platform == "darwin":
        return KeychainSecretStore()
    return EnvSecretStore()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Launch-at-login registration for Typer AI.

On macOS the app is registered as a per-user LaunchAgent
(~/Library/LaunchAgents/com.typer.mac.plist). On other platforms only
the preference is remembered in config.toml.
"""

import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from .config import Config, update_config_field
from .errors import LoginItemError
from .utils import SUBPROCESS_TIMEOUT, log

LAUNCHAGENT_LABEL = "com.typer.mac"
LAUNCHAGENT_DIR = Path.home() / "Library" / "LaunchAgents"

# launchd has a minimal PATH
LAUNCHD_PATH = "/opt/homebrew/bin:/usr/local/bin:/usr/bin:/bin:/usr/sbin:/sbin"


class LoginItemController(ABC):
    """Turns launch at login on and off."""

    @abstractmethod
    def is_enabled(self) -> bool:
        pass

    @abstractmethod
    def set_enabled(self, enabled: bool) -> None:
        """
        Enable or disable launch at login.

        Does nothing if already in the requested state.

        Raises:
            LoginItemError: If registration or removal failed.
        """
        pass


class LaunchAgentLoginItem(LoginItemController):
    """Per-user LaunchAgent with RunAtLoad."""

    def __init__(
        self,
        label: str = LAUNCHAGENT_LABEL,
        agent_dir: Optional[Path] = None,
        program_arguments: Optional[List[str]] = None,
    ):
        self._label = label
        self._plist = (agent_dir or LAUNCHAGENT_DIR) / f"{label}.plist"
        self._program_arguments = program_arguments or [sys.executable, "-m", "typer_ai"]

    @property
    def plist_path(self) -> Path:
        return self._plist

    def is_enabled(self) -> bool:
        return self._plist.exists()

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self.is_enabled():
            return
        if enabled:
            self._register()
        else:
            self._unregister()

    def _register(self) -> None:
        try:
            self._plist.parent.mkdir(parents=True, exist_ok=True)
            self._plist.write_text(self._plist_content(), encoding="utf-8")
        except OSError as e:
            raise LoginItemError(f"Cannot write {self._plist}: {e}") from e

        result = self._launchctl("load", str(self._plist))
        if result.returncode != 0:
            # Leave no half-registered agent behind
            self._plist.unlink(missing_ok=True)
            raise LoginItemError(f"launchctl load failed: {result.stderr.strip()}")
        log(f"Launch at login enabled ({self._label})", "OK")

    def _unregister(self) -> None:
        # unload fails harmlessly when the agent was never loaded
        self._launchctl("unload", str(self._plist))
        try:
            self._plist.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise LoginItemError(f"Cannot remove {self._plist}: {e}") from e
        log("Launch at login disabled", "OK")

    def _launchctl(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["launchctl", *args],
                capture_output=True, text=True, timeout=SUBPROCESS_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise LoginItemError(f"launchctl unavailable: {e}") from e

    def _plist_content(self) -> str:
        arguments = "\n".join(
            f"        <string>{escape(arg)}</string>" for arg in self._program_arguments
        )
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Label</key>
    <string>{escape(self._label)}</string>
    <key>ProgramArguments</key>
    <array>
{arguments}
    </array>
    <key>EnvironmentVariables</key>
    <dict>
        <key>PATH</key>
        <string>{LAUNCHD_PATH}</string>
    </dict>
    <key>RunAtLoad</key>
    <true/>
    <key>KeepAlive</key>
    <false/>
</dict>
</plist>
"""


class PreferenceLoginItem(LoginItemController):
    """Stores the choice in config.toml without registering anything."""

    def __init__(self, config: Config):
        self._config = config

    def is_enabled(self) -> bool:
        return self._config.general.launch_at_login

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self.is_enabled():
            return
        if not update_config_field(self._config, "general", "launch_at_login", enabled):
            raise LoginItemError("Could not save launch-at-login preference")


def default_login_item(config: Config) -> LoginItemController:
    """LaunchAgent on macOS, stored preference elsewhere."""
    if sys.platform == "darwin":
        return LaunchAgentLoginItem()
    return PreferenceLoginItem(config)

# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Configuration management for Typer AI.

Loads settings from ~/.typer/config.toml with sensible defaults.
The Config object is owned by the caller and passed to whatever needs it;
every mutation is written back with save_config() or update_config_field().
API keys are never stored here (see keystore.py).
"""

import fcntl
import os
import re
import sys
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlparse

CONFIG_DIR = Path.home() / ".typer"
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Available correction providers
PROVIDERS = ("grok", "gemini")
ProviderType = Literal["grok", "gemini"]

THEMES = ("system", "light", "dark")

GROK_MODELS = ("grok-4-1-fast-non-reasoning", "grok-3-mini")
GEMINI_MODELS = ("gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.5-flash-lite")

DEFAULT_PROMPT = (
    "Rewrite to fix grammar and improve clarity. "
    "Please only return the fixed text and nothing else:"
)
DEFAULT_GROK_URL = "https://api.x.ai/v1/chat/completions"
DEFAULT_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_TIMEOUT = 60

FONT_SIZE_MIN = 10
FONT_SIZE_MAX = 32

# Default configuration
DEFAULT_CONFIG = f"""# Typer AI Configuration
# Edit this file to customize behavior.
# API keys are not stored here. On macOS they live in the Keychain (`typer-ai key <provider>`),
# elsewhere they are read from TYPER_GROK_API_KEY / TYPER_GEMINI_API_KEY.

[provider]
# Provider used for corrections: "grok" or "gemini"
default = "grok"

# Instruction sent with every request. Your text is appended at the end.
prompt = "{DEFAULT_PROMPT}"

[grok]
# Options: {", ".join(GROK_MODELS)}
model = "{GROK_MODELS[0]}"
url = "{DEFAULT_GROK_URL}"

# Request timeout in seconds (0 = no read limit)
timeout = {DEFAULT_TIMEOUT}

[gemini]
# Options: {", ".join(GEMINI_MODELS)}
model = "{GEMINI_MODELS[0]}"
url = "{DEFAULT_GEMINI_URL}"

# Request timeout in seconds (0 = no read limit)
timeout = {DEFAULT_TIMEOUT}

[ui]
# Theme: "system", "light" or "dark"
theme = "system"

# Result font size in points ({FONT_SIZE_MIN}-{FONT_SIZE_MAX})
font_size = 14

# Highlight changed words in terminal output
highlight = true

[general]
# Launch at login (used when no LaunchAgent support is available)
launch_at_login = false

[stats]
# Usage counters, updated after every successful fix
total_fixes = 0
characters_fixed = 0
words_changed = 0
"""


@dataclass
class ProviderConfig:
    """Which provider to use and what to ask it."""
    default: ProviderType = "grok"
    prompt: str = DEFAULT_PROMPT


@dataclass
class GrokConfig:
    """xAI Grok settings."""
    model: str = GROK_MODELS[0]
    url: str = DEFAULT_GROK_URL
    timeout: int = DEFAULT_TIMEOUT


@dataclass
class GeminiConfig:
    """Google Gemini settings."""
    model: str = GEMINI_MODELS[0]
    url: str = DEFAULT_GEMINI_URL
    timeout: int = DEFAULT_TIMEOUT


@dataclass
class UIConfig:
    theme: str = "system"
    font_size: int = 14
    highlight: bool = True


@dataclass
class GeneralConfig:
    launch_at_login: bool = False


@dataclass
class UsageStats:
    """Running usage counters."""
    total_fixes: int = 0
    characters_fixed: int = 0
    words_changed: int = 0


@dataclass
class Config:
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    grok: GrokConfig = field(default_factory=GrokConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    general: GeneralConfig = field(default_factory=GeneralConfig)
    stats: UsageStats = field(default_factory=UsageStats)
    path: Path = CONFIG_FILE


# Sections persisted to TOML, in file order
SECTIONS = ("provider", "grok", "gemini", "ui", "general", "stats")


def _load_section(cls, data: dict, current):
    """Build a section dataclass, keeping current values for missing keys."""
    values = data if isinstance(data, dict) else {}
    return cls(**{
        f.name: values.get(f.name, getattr(current, f.name))
        for f in fields(cls)
    })


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from file, creating default if missing."""
    path = Path(path) if path is not None else CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        path.parent.chmod(0o700)
    except OSError:
        pass

    # Create default config if it doesn't exist
    if not path.exists():
        path.write_text(DEFAULT_CONFIG, encoding='utf-8')

    # Load and parse config
    data = {}
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Config parse error: {e}", file=sys.stderr)

    # Build config object with defaults
    config = Config(path=path)

    if 'provider' in data:
        config.provider = _load_section(ProviderConfig, data['provider'], config.provider)
    if 'grok' in data:
        config.grok = _load_section(GrokConfig, data['grok'], config.grok)
    if 'gemini' in data:
        config.gemini = _load_section(GeminiConfig, data['gemini'], config.gemini)
    if 'ui' in data:
        config.ui = _load_section(UIConfig, data['ui'], config.ui)
    if 'general' in data:
        config.general = _load_section(GeneralConfig, data['general'], config.general)
    if 'stats' in data:
        config.stats = _load_section(UsageStats, data['stats'], config.stats)

    # Validate and sanitize config values
    _validate_config(config)

    return config


def _is_valid_url(url: str) -> bool:
    """Check if a string is a valid HTTP/HTTPS URL."""
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.netloc)
    except (ValueError, AttributeError):
        return False


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _validate_config(config: Config):
    """Validate and sanitize configuration values."""
    # Provider validation
    if config.provider.default not in PROVIDERS:
        print(f"Config warning: Invalid provider '{config.provider.default}', using 'grok'", file=sys.stderr)
        config.provider.default = "grok"

    if not isinstance(config.provider.prompt, str) or not config.provider.prompt.strip():
        print("Config warning: prompt is empty, using default prompt", file=sys.stderr)
        config.provider.prompt = DEFAULT_PROMPT

    # URL validation
    if not _is_valid_url(config.grok.url):
        print(f"Config warning: Invalid grok URL '{config.grok.url}', using default", file=sys.stderr)
        config.grok.url = DEFAULT_GROK_URL

    if not _is_valid_url(config.gemini.url):
        print(f"Config warning: Invalid gemini URL '{config.gemini.url}', using default", file=sys.stderr)
        config.gemini.url = DEFAULT_GEMINI_URL

    # Models: unknown names only warn, empty ones fall back
    for name, section, known in (("grok", config.grok, GROK_MODELS), ("gemini", config.gemini, GEMINI_MODELS)):
        if not isinstance(section.model, str) or not section.model.strip():
            print(f"Config warning: {name} model is empty, using '{known[0]}'", file=sys.stderr)
            section.model = known[0]
        elif section.model not in known:
            print(f"Config warning: {name} model '{section.model}' is not a known model", file=sys.stderr)

        if not _is_count(section.timeout):
            print(f"Config warning: {name} timeout must be a non-negative integer, using {DEFAULT_TIMEOUT}", file=sys.stderr)
            section.timeout = DEFAULT_TIMEOUT

    # UI validation
    if config.ui.theme not in THEMES:
        print(f"Config warning: Invalid theme '{config.ui.theme}', using 'system'", file=sys.stderr)
        config.ui.theme = "system"

    if not isinstance(config.ui.font_size, int) or isinstance(config.ui.font_size, bool):
        print("Config warning: font_size must be an integer, using 14", file=sys.stderr)
        config.ui.font_size = 14
    elif not FONT_SIZE_MIN <= config.ui.font_size <= FONT_SIZE_MAX:
        clamped = min(max(config.ui.font_size, FONT_SIZE_MIN), FONT_SIZE_MAX)
        print(f"Config warning: font_size clamped to {clamped}", file=sys.stderr)
        config.ui.font_size = clamped

    if not isinstance(config.ui.highlight, bool):
        config.ui.highlight = True

    if not isinstance(config.general.launch_at_login, bool):
        config.general.launch_at_login = False

    # Counters never go negative
    for f in fields(UsageStats):
        if not _is_count(getattr(config.stats, f.name)):
            print(f"Config warning: stats.{f.name} is invalid, resetting to 0", file=sys.stderr)
            setattr(config.stats, f.name, 0)


# ---------------------------------------------------------------------------
# TOML section helpers
# ---------------------------------------------------------------------------

# Value forms tomllib accepts that can appear in this file, hand-edited or not
_TOML_VALUE = (
    r'"""[\s\S]*?"""'                  # multi-line basic string
    r"|'''[\s\S]*?'''"                 # multi-line literal string
    r'|"(?:[^"\\\n]|\\.)*"'            # basic string
    r"|'[^'\n]*'"                      # literal string
    r'|true|false'
    r'|[-+]?(?:0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|inf|nan'
    r'|[0-9][0-9_]*(?:\.[0-9_]+)?(?:[eE][-+]?[0-9_]+)?)'
)

_SECTION_HEADER = re.compile(r'\s*\[\s*([A-Za-z0-9_-]+)\s*\]\s*(?:#.*)?$')


def _replace_in_section(content: str, section: str, key: str, new_value: str) -> str:
    """Replace a key's value within a specific TOML section.

    new_value must already be serialized to its TOML string representation
    (e.g. '"quoted"' for strings, 'true'/'false' for bools, '42' for ints).

    If the key doesn't exist in the section, it is appended under the header.
    An existing key is always rewritten in place, never duplicated.
    """
    lines = content.splitlines(keepends=True)
    in_section = False
    section_header_idx = None
    key_line = re.compile(rf'(\s*{re.escape(key)}\s*=\s*)')
    for i, line in enumerate(lines):
        header = _SECTION_HEADER.match(line)
        if header:
            in_section = header.group(1) == section
            if in_section:
                section_header_idx = i
            continue
        if not in_section:
            continue
        prefix = key_line.match(line)
        if not prefix:
            continue

        # Multi-line strings may run past this line, so match against the rest of the file
        rest = "".join(lines[i:])
        value = re.compile(_TOML_VALUE).match(rest, prefix.end())
        if value:
            tail = rest[value.end():]
        else:
            # Unrecognised value (array, inline table): replace up to end of line
            eol = rest.find("\n")
            tail = rest[eol:] if eol != -1 else ""
        return "".join(lines[:i]) + prefix.group(1) + new_value + tail

    # Key not found in section - append it after the section header
    if section_header_idx is not None:
        new_line = f"{key} = {new_value}\n"
        lines.insert(section_header_idx + 1, new_line)
        return "".join(lines)

    # Section not found at all - append a new section at the end of the file
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    lines.append(f"\n[{section}]\n")
    lines.append(f"{key} = {new_value}\n")
    return "".join(lines)


def _serialize_toml_value(value) -> str:
    """Serialize a Python value to its TOML string representation."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(value)
    # String: escape backslashes, quotes and newlines, wrap in double quotes
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _write_locked(path: Path, transform) -> None:
    """Apply transform(content) -> content to the file under an exclusive lock."""
    fd = os.open(str(path), os.O_RDWR | os.O_CREAT, 0o644)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        content = path.read_text(encoding='utf-8')
        path.write_text(transform(content), encoding='utf-8')
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)


def save_config(config: Config) -> bool:
    """Persist every section of config to its TOML file, keeping comments."""
    def transform(content: str) -> str:
        for section in SECTIONS:
            section_obj = getattr(config, section)
            for f in fields(section_obj):
                value = _serialize_toml_value(getattr(section_obj, f.name))
                content = _replace_in_section(content, section, f.name, value)
        return content

    try:
        config.path.parent.mkdir(parents=True, exist_ok=True)
        _write_locked(config.path, transform)
        return True
    except OSError as e:
        print(f"Config write failed: {e}", file=sys.stderr)
        return False


def update_config_field(config: Config, section: str, key: str, value) -> bool:
    """Update a single config field in-memory AND persist to TOML.

    value may be a bool, int, float, or str. Serialization is handled
    automatically so callers pass Python-native values directly.
    """
    section_obj = getattr(config, section, None)
    if section_obj is None or not hasattr(section_obj, key):
        raise KeyError(f"Unknown config field: {section}.{key}")
    setattr(section_obj, key, value)
    try:
        toml_value = _serialize_toml_value(value)
        _write_locked(config.path, lambda content: _replace_in_section(content, section, key, toml_value))
        return True
    except OSError as e:
        print(f"Config write failed: {e}", file=sys.stderr)
        return False

"""
Typer AI - grammar and clarity fixes from the macOS menu bar or terminal

Paste text -> an LLM (Grok or Gemini) rewrites it -> changed words are highlighted.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("typer-ai")
except PackageNotFoundError:
    __version__ = "0.0.0"  # Not installed

from .cli import cli_main

__all__ = ["cli_main", "__version__"]

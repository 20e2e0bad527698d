# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Command-line front end for Typer AI.

Usage:
    typer-ai                      Status + help (default)
    typer-ai fix [text|-]         Correct text (args or stdin), show changed words
    typer-ai fix --copy ...       Also copy the corrected text to the clipboard
    typer-ai fix --plain ...      Print only the corrected text
    typer-ai fix -- --text        Everything after -- is text, even flag-like words
    typer-ai diff "a" "b"         Word diff of two strings, no provider call
    typer-ai provider             Show current + list available
    typer-ai provider <name>      Switch default provider
    typer-ai model [prov] [name]  Show or set a provider's model
    typer-ai key <prov> [--clear] Store or remove a provider's API key
    typer-ai prompt               Show the correction prompt
    typer-ai prompt set "text"    Replace the correction prompt
    typer-ai prompt reset         Restore the default prompt
    typer-ai theme [name]         Show or set theme (system, light, dark)
    typer-ai font-size [n]        Show or set result font size
    typer-ai stats [reset]        Show or reset usage statistics
    typer-ai login [on|off]       Show or toggle launch at login
    typer-ai config [path|edit]   Show config, print its path, or open in $EDITOR
    typer-ai version              Show version

Add -v / --verbose anywhere to see request logs.
"""

import getpass
import os
import subprocess
import sys
from typing import List, Optional

from . import utils
from .config import (
    DEFAULT_PROMPT,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    THEMES,
    Config,
    load_config,
    update_config_field,
)
from .corrector import Corrector
from .diff import build_diff, render_diff
from .errors import TyperError
from .keystore import default_secret_store
from .login_item import default_login_item
from .providers import PROVIDER_REGISTRY, get_provider_info
from .stats import format_stats, reset_stats
from .utils import (
    C_BOLD,
    C_CYAN,
    C_DIM,
    C_GREEN,
    C_RED,
    C_RESET,
    C_YELLOW,
    copy_to_clipboard,
)


def _fail(msg: str, usage: str = "") -> None:
    """Print an error (and optional usage line) to stderr and exit 1."""
    print(f"{C_RED}{msg}{C_RESET}", file=sys.stderr)
    if usage:
        print(f"{C_DIM}Usage: {usage}{C_RESET}", file=sys.stderr)
    sys.exit(1)


def _provider_arg(name: str, usage: str) -> str:
    if name not in PROVIDER_REGISTRY:
        available = ", ".join(PROVIDER_REGISTRY)
        _fail(f"Unknown provider: {name}. Available: {available}", usage)
    return name


def _use_highlight(config: Config) -> bool:
    return config.ui.highlight and sys.stdout.isatty()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_fix(args: List[str]):
    """Correct text with the default provider and show the word diff."""
    copy = plain = False
    # Options are only read before the text; "--" ends them explicitly
    words = list(args)
    while words and words[0] in ("--copy", "--plain"):
        option = words.pop(0)
        copy = copy or option == "--copy"
        plain = plain or option == "--plain"
    if words and words[0] == "--":
        words.pop(0)

    if not words or words == ["-"]:
        if sys.stdin.isatty():
            _fail("No text given", "typer-ai fix \"text\"  (or pipe text on stdin)")
        text = sys.stdin.read()
    else:
        text = " ".join(words)

    config = load_config()
    corrector = Corrector(config, default_secret_store())
    try:
        result = corrector.fix(text)
    except (ValueError, TyperError) as e:
        _fail(str(e))
    finally:
        corrector.close()

    if plain:
        print(result.corrected)
    else:
        print(render_diff(result.diff, highlight=_use_highlight(config)))
        changed = result.diff.changed_count
        noun = "word" if changed == 1 else "words"
        print(f"{C_DIM}{changed} {noun} changed · {result.provider}{C_RESET}", file=sys.stderr)

    if copy and copy_to_clipboard(result.corrected):
        print(f"{C_GREEN}Copied to clipboard{C_RESET}", file=sys.stderr)


def cmd_diff(args: List[str]):
    """Show the word diff between two strings."""
    if len(args) != 2:
        _fail("diff takes exactly two arguments", "typer-ai diff \"original\" \"corrected\"")
    config = load_config()
    diff = build_diff(args[0], args[1])
    print(render_diff(diff, highlight=_use_highlight(config)))
    print(f"{C_DIM}{diff.changed_count} changed · {len(diff.alignment)} unchanged{C_RESET}", file=sys.stderr)


def cmd_provider(args: List[str]):
    """Show or switch the default provider."""
    config = load_config()
    current = config.provider.default

    if not args:
        print(f"  {C_BOLD}Providers{C_RESET}")
        for pid, info in PROVIDER_REGISTRY.items():
            marker = f"{C_GREEN}●{C_RESET}" if pid == current else " "
            model = getattr(config, pid).model
            print(f"  {marker} {C_CYAN}{pid:<8}{C_RESET} {info.name:<18} {C_DIM}{model}{C_RESET}")
        return

    new = _provider_arg(args[0], "typer-ai provider [grok|gemini]")
    if new == current:
        print(f"{C_DIM}Already using {new}{C_RESET}")
        return
    if not update_config_field(config, "provider", "default", new):
        _fail("Could not save config")
    print(f"{C_GREEN}Provider:{C_RESET} {PROVIDER_REGISTRY[new].name}")


def cmd_model(args: List[str]):
    """Show or set a provider's model."""
    usage = "typer-ai model [grok|gemini] [model]"
    config = load_config()

    if not args:
        for pid in PROVIDER_REGISTRY:
            print(f"  {C_CYAN}{pid:<8}{C_RESET} {getattr(config, pid).model}")
        return

    pid = _provider_arg(args[0], usage)
    info = get_provider_info(pid)
    current = getattr(config, pid).model

    if len(args) == 1:
        for model in info.models:
            marker = f"{C_GREEN}●{C_RESET}" if model == current else " "
            print(f"  {marker} {model}")
        if current not in info.models:
            print(f"  {C_GREEN}●{C_RESET} {current} {C_DIM}(custom){C_RESET}")
        return

    model = args[1].strip()
    if not model:
        _fail("Model name cannot be empty", usage)
    if model not in info.models:
        print(f"{C_YELLOW}Note: '{model}' is not a known {info.name} model{C_RESET}", file=sys.stderr)
    if not update_config_field(config, pid, "model", model):
        _fail("Could not save config")
    print(f"{C_GREEN}{info.name} model:{C_RESET} {model}")


def cmd_key(args: List[str]):
    """Store or clear a provider's API key."""
    usage = "typer-ai key <grok|gemini> [--clear]"
    if not args:
        _fail("Which provider?", usage)

    pid = _provider_arg(args[0], usage)
    name = PROVIDER_REGISTRY[pid].name
    store = default_secret_store()
    account = f"{pid}_api_key"

    try:
        if "--clear" in args[1:]:
            store.delete(account)
            print(f"{C_GREEN}Removed {name} API key{C_RESET}")
            return

        value = getpass.getpass(f"{name} API key (input hidden): ").strip()
        if not value:
            _fail("No key entered, nothing changed")
        store.set(account, value)
    except TyperError as e:
        _fail(str(e))
    print(f"{C_GREEN}Saved {name} API key{C_RESET}")


def cmd_prompt(args: List[str]):
    """Show, replace or reset the correction prompt."""
    usage = "typer-ai prompt [set \"text\"|reset]"
    config = load_config()

    if not args:
        print(config.provider.prompt)
        return

    if args[0] == "set":
        new = " ".join(args[1:]).strip()
        if not new:
            _fail("Prompt cannot be empty", usage)
    elif args[0] == "reset":
        new = DEFAULT_PROMPT
    else:
        _fail(f"Unknown prompt subcommand: {args[0]}", usage)

    if not update_config_field(config, "provider", "prompt", new):
        _fail("Could not save config")
    print(f"{C_GREEN}Prompt updated{C_RESET}")


def cmd_theme(args: List[str]):
    """Show or set the theme."""
    config = load_config()
    if not args:
        for theme in THEMES:
            marker = f"{C_GREEN}●{C_RESET}" if theme == config.ui.theme else " "
            print(f"  {marker} {theme}")
        return
    if args[0] not in THEMES:
        _fail(f"Unknown theme: {args[0]}", f"typer-ai theme [{'|'.join(THEMES)}]")
    if not update_config_field(config, "ui", "theme", args[0]):
        _fail("Could not save config")
    print(f"{C_GREEN}Theme:{C_RESET} {args[0]}")


def cmd_font_size(args: List[str]):
    """Show or set the result font size."""
    usage = f"typer-ai font-size [{FONT_SIZE_MIN}-{FONT_SIZE_MAX}]"
    config = load_config()
    if not args:
        print(config.ui.font_size)
        return
    try:
        size = int(args[0])
    except ValueError:
        _fail(f"Not a number: {args[0]}", usage)
    if not FONT_SIZE_MIN <= size <= FONT_SIZE_MAX:
        _fail(f"Font size must be between {FONT_SIZE_MIN} and {FONT_SIZE_MAX}", usage)
    if not update_config_field(config, "ui", "font_size", size):
        _fail("Could not save config")
    print(f"{C_GREEN}Font size:{C_RESET} {size}")


def cmd_stats(args: List[str]):
    """Show or reset usage statistics."""
    config = load_config()
    if args and args[0] == "reset":
        reset_stats(config)
        print(f"{C_GREEN}Statistics reset{C_RESET}")
        return
    if args:
        _fail(f"Unknown stats subcommand: {args[0]}", "typer-ai stats [reset]")

    rows = format_stats(config.stats)
    width = max(len(label) for label, _ in rows)
    print()
    for label, value in rows:
        print(f"  {C_DIM}{label:<{width}}{C_RESET}  {value}")
    print()


def cmd_login(args: List[str]):
    """Show or toggle launch at login."""
    usage = "typer-ai login [on|off]"
    config = load_config()
    controller = default_login_item(config)

    if not args:
        state = f"{C_GREEN}on{C_RESET}" if controller.is_enabled() else f"{C_DIM}off{C_RESET}"
        print(f"  Launch at login: {state}")
        return

    if args[0] not in ("on", "off"):
        _fail(f"Unknown login option: {args[0]}", usage)
    try:
        controller.set_enabled(args[0] == "on")
    except TyperError as e:
        _fail(f"Login item error: {e}")
    print(f"{C_GREEN}Launch at login {args[0]}{C_RESET}")


def cmd_config(args: List[str]):
    """Show, edit, or print path to config."""
    config = load_config()

    if not args or args[0] == "show":
        def _on_off(v): return f"{C_GREEN}on{C_RESET}" if v else f"{C_DIM}off{C_RESET}"
        info = get_provider_info(config.provider.default)
        print()
        print(f"  {C_DIM}Provider{C_RESET}    {C_CYAN}{info.name}{C_RESET}  {C_DIM}({getattr(config, info.id).model}){C_RESET}")
        print(f"  {C_DIM}Prompt{C_RESET}      {utils.truncate(config.provider.prompt)}")
        print(f"  {C_DIM}Theme{C_RESET}       {config.ui.theme}")
        print(f"  {C_DIM}Font size{C_RESET}   {config.ui.font_size}")
        print(f"  {C_DIM}Highlight{C_RESET}   {_on_off(config.ui.highlight)}")
        print()
        print(f"  {C_DIM}{config.path}{C_RESET}")
        print()
        return

    if args[0] == "edit":
        editor = os.environ.get("EDITOR", "open")
        if editor == "open":
            subprocess.run(["open", str(config.path)])
        else:
            os.execvp(editor, [editor, str(config.path)])
        return

    if args[0] == "path":
        print(config.path)
        return

    _fail(f"Unknown config subcommand: {args[0]}", "typer-ai config [edit|path]")


def cmd_version():
    """Show version."""
    from . import __version__
    print(f"Typer AI {__version__}")


def _print_help():
    """Print grouped help listing."""
    groups = [
        ("Text", [
            ("typer-ai fix [text|-]",      "Correct text, highlight changed words"),
            ("typer-ai diff \"a\" \"b\"",  "Word diff of two strings (offline)"),
        ]),
        ("Providers", [
            ("typer-ai provider [name]",   "Show or switch default provider"),
            ("typer-ai model [prov] [m]",  "Show or set a provider's model"),
            ("typer-ai key <prov>",        "Store a provider's API key (--clear to remove)"),
            ("typer-ai prompt [set|reset]", "Show or change the correction prompt"),
        ]),
        ("Settings", [
            ("typer-ai theme [name]",      "Show or set theme"),
            ("typer-ai font-size [n]",     "Show or set result font size"),
            ("typer-ai login [on|off]",    "Launch at login"),
            ("typer-ai config [edit|path]", "Show config, or open in $EDITOR"),
            ("typer-ai stats [reset]",     "Usage statistics"),
        ]),
    ]
    width = max(len(c) for _, cmds in groups for c, _ in cmds)
    for group_name, cmds in groups:
        print(f"  {C_BOLD}{group_name}{C_RESET}")
        for cmd, desc in cmds:
            print(f"    {C_CYAN}{cmd:<{width}}{C_RESET}  {C_DIM}{desc}{C_RESET}")
        print()


def cmd_default():
    """Default: status + help."""
    config = load_config()
    secrets = default_secret_store()
    info = get_provider_info(config.provider.default)

    try:
        has_key = bool(secrets.get(f"{info.id}_api_key"))
    except TyperError:
        has_key = False
    key_state = f"{C_GREEN}set{C_RESET}" if has_key else f"{C_YELLOW}missing{C_RESET}"

    print()
    print(f"  {C_BOLD}╭────────────────────────────────────────╮{C_RESET}")
    print(f"  {C_BOLD}│{C_RESET}  {C_CYAN}Typer AI{C_RESET} · grammar and clarity fixes   {C_BOLD}│{C_RESET}")
    print(f"  {C_BOLD}╰────────────────────────────────────────╯{C_RESET}")
    print()
    print(f"  Provider: {C_CYAN}{info.name}{C_RESET}  {C_DIM}{getattr(config, info.id).model}{C_RESET}")
    print(f"  API key:  {key_state}")
    print(f"  Fixes:    {config.stats.total_fixes:,}")
    print(f"  Config:   {C_DIM}{config.path}{C_RESET}")
    print()

    _print_help()


def cli_main(argv: Optional[List[str]] = None):
    """Entry point for the typer-ai CLI."""
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = any(a in ("-v", "--verbose") for a in args)
    args = [a for a in args if a not in ("-v", "--verbose")]
    utils.VERBOSE = verbose

    if not args:
        cmd_default()
        return

    cmd = args[0]
    rest = args[1:]

    if cmd == "fix":
        cmd_fix(rest)
    elif cmd == "diff":
        cmd_diff(rest)
    elif cmd == "provider":
        cmd_provider(rest)
    elif cmd == "model":
        cmd_model(rest)
    elif cmd == "key":
        cmd_key(rest)
    elif cmd == "prompt":
        cmd_prompt(rest)
    elif cmd == "theme":
        cmd_theme(rest)
    elif cmd == "font-size":
        cmd_font_size(rest)
    elif cmd == "stats":
        cmd_stats(rest)
    elif cmd == "login":
        cmd_login(rest)
    elif cmd == "config":
        cmd_config(rest)
    elif cmd == "version":
        cmd_version()
    elif cmd in ("-h", "--help", "help"):
        _print_help()
    else:
        print(f"{C_RED}Unknown command: {cmd}{C_RESET}", file=sys.stderr)
        print(f"{C_DIM}Run 'typer-ai' for usage.{C_RESET}", file=sys.stderr)
        sys.exit(1)

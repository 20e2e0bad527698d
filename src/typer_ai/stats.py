"""
Usage statistics for Typer AI.

Counters live in the [stats] section of config.toml and are updated
after every successful fix.
"""

from typing import List, Tuple

from .config import Config, UsageStats, save_config
from .diff import DiffResult


def record_fix(config: Config, diff: DiffResult, save: bool = True) -> UsageStats:
    """Add one fix to the running counters and persist them."""
    stats = config.stats
    stats.total_fixes += 1
    stats.characters_fixed += diff.original_chars
    stats.words_changed += max(0, diff.changed_count)
    if save:
        save_config(config)
    return stats


def reset_stats(config: Config, save: bool = True) -> UsageStats:
    config.stats = UsageStats()
    if save:
        save_config(config)
    return config.stats


def format_stats(stats: UsageStats) -> List[Tuple[str, str]]:
    """Label/value rows for display."""
    if stats.total_fixes:
        average = f"{stats.words_changed / stats.total_fixes:.1f}"
    else:
        average = "-"
    return [
        ("Fixes", f"{stats.total_fixes:,}"),
        ("Characters", f"{stats.characters_fixed:,}"),
        ("Words changed", f"{stats.words_changed:,}"),
        ("Avg words/fix", average),
    ]

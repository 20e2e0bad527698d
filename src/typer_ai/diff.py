# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Word-level diff between original and corrected text.

Text is split on single spaces (not general whitespace), the longest
common subsequence of the two word lists is computed, and every word of
the corrected text is tagged as changed or unchanged for highlighting.

Usage:
    from typer_ai.diff import build_diff, render_diff

    diff = build_diff("The cat sat on mat", "The cat sat on the mat")
    diff.changed_count   # 1
    print(render_diff(diff))
"""

from dataclasses import dataclass, field
from typing import List

from .utils import C_BG_GREEN, C_RESET

WORD_SEPARATOR = " "


@dataclass(frozen=True)
class AnnotatedToken:
    """A word of the corrected text and whether it differs from the original."""
    token: str
    changed: bool


@dataclass
class DiffResult:
    """Everything the presentation layer needs for one correction.

    original_chars is len() of the original text, i.e. Unicode code points.
    A user-perceived character built from several code points (an accented
    letter in decomposed form, a flag emoji) counts more than once.
    """
    original_words: List[str]
    result_words: List[str]
    alignment: List[str]
    tokens: List[AnnotatedToken] = field(default_factory=list)
    changed_count: int = 0
    original_chars: int = 0

    @property
    def text(self) -> str:
        """The corrected text, rebuilt from its tokens."""
        return WORD_SEPARATOR.join(t.token for t in self.tokens)

    def changed_tokens(self) -> List[str]:
        return [t.token for t in self.tokens if t.changed]


def tokenize(text: str) -> List[str]:
    """Split on the literal space character. Empty tokens are kept."""
    return text.split(WORD_SEPARATOR)


def compute_alignment(a: List[str], b: List[str]) -> List[str]:
    """
    Longest common subsequence of two word lists.

    Standard dynamic-programming table, reconstructed backwards from the
    bottom-right corner. When skipping a word, moving up (dropping from
    ``a``) wins ties.

    Returns:
        Matched words in left-to-right order. Repeated words may appear
        more than once.
    """
    m, n = len(a), len(b)
    if m == 0 or n == 0:
        return []

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    common: List[str] = []
    i, j = m, n
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            common.append(a[i - 1])
            i -= 1
            j -= 1
        elif dp[i - 1][j] >= dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    common.reverse()
    return common


def annotate(result_words: List[str], alignment: List[str]) -> List[AnnotatedToken]:
    """
    Tag each result word as changed or unchanged.

    A single greedy pass: a word is unchanged only if it equals the next
    unconsumed alignment word. This can misattribute repeated words that
    were reordered; highlighting depends on that exact behavior.
    """
    tokens: List[AnnotatedToken] = []
    cursor = 0
    for word in result_words:
        if cursor < len(alignment) and alignment[cursor] == word:
            cursor += 1
            tokens.append(AnnotatedToken(word, changed=False))
        else:
            tokens.append(AnnotatedToken(word, changed=True))
    return tokens


def count_changed_words(original_words: List[str], result_words: List[str]) -> int:
    """Number of result words not covered by the alignment, never negative."""
    alignment = compute_alignment(original_words, result_words)
    return max(0, len(result_words) - len(alignment))


def build_diff(original_text: str, result_text: str) -> DiffResult:
    """Tokenize, align once, annotate and count."""
    original_words = tokenize(original_text)
    result_words = tokenize(result_text)
    alignment = compute_alignment(original_words, result_words)

    return DiffResult(
        original_words=original_words,
        result_words=result_words,
        alignment=alignment,
        tokens=annotate(result_words, alignment),
        changed_count=max(0, len(result_words) - len(alignment)),
        original_chars=len(original_text),
    )


def render_diff(diff: DiffResult, highlight: bool = True) -> str:
    """Join tokens with single spaces, changed words on a green background."""
    if not highlight:
        return diff.text

    parts = []
    for t in diff.tokens:
        if t.changed and t.token:
            parts.append(f"{C_BG_GREEN}{t.token}{C_RESET}")
        else:
            parts.append(t.token)
    return WORD_SEPARATOR.join(parts)

# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Unit tests for utility functions in utils.py.

pbcopy is never run; subprocess.run is patched.
"""

import subprocess
from unittest.mock import patch

from typer_ai import utils


# ---------------------------------------------------------------------------
# truncate
# ---------------------------------------------------------------------------

class TestTruncate:
    def test_short_string_unchanged(self):
        assert utils.truncate("hello") == "hello"

    def test_long_string_truncated_with_ellipsis(self):
        text = "x" * 100
        result = utils.truncate(text, 10)
        assert result == "x" * 10 + "..."

    def test_exact_length_unchanged(self):
        text = "x" * utils.LOG_TRUNCATE
        assert utils.truncate(text) == text

    def test_empty_string_unchanged(self):
        assert utils.truncate("") == ""


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------

class TestLog:
    def test_writes_to_stderr(self, capsys):
        with patch.object(utils, "VERBOSE", True):
            utils.log("hello there", "OK")
        captured = capsys.readouterr()
        assert "hello there" in captured.err
        assert captured.out == ""

    def test_quiet_hides_info(self, capsys):
        with patch.object(utils, "VERBOSE", False):
            utils.log("chatty", "INFO")
            utils.log("also chatty", "AI")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_errors(self, capsys):
        with patch.object(utils, "VERBOSE", False):
            utils.log("broken", "ERR")
            utils.log("careful", "WARN")
        err = capsys.readouterr().err
        assert "broken" in err and "careful" in err

    def test_unknown_level_still_prints(self, capsys):
        with patch.object(utils, "VERBOSE", True):
            utils.log("odd", "NOPE")
        assert "odd" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# copy_to_clipboard
# ---------------------------------------------------------------------------

class TestCopyToClipboard:
    def test_pipes_text_to_pbcopy(self):
        with patch("typer_ai.utils.subprocess.run") as run:
            assert utils.copy_to_clipboard("Grüße") is True
        args, kwargs = run.call_args
        assert args[0] == ["pbcopy"]
        assert kwargs["input"] == "Grüße".encode()

    def test_missing_pbcopy_returns_false(self):
        with patch("typer_ai.utils.subprocess.run", side_effect=FileNotFoundError("pbcopy")):
            assert utils.copy_to_clipboard("x") is False

    def test_pbcopy_failure_returns_false(self):
        err = subprocess.CalledProcessError(1, ["pbcopy"])
        with patch("typer_ai.utils.subprocess.run", side_effect=err):
            assert utils.copy_to_clipboard("x") is False

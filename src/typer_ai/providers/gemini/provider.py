# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Google Gemini provider implementation.

Uses the generateContent endpoint; the prompt and text are sent as a
single user part.
"""

from ...utils import log
from ..base import CorrectionProvider


class GeminiProvider(CorrectionProvider):
    """Correction provider using the Gemini generateContent API."""

    @property
    def id(self) -> str:
        return "gemini"

    @property
    def name(self) -> str:
        return "Gemini"

    def endpoint(self) -> str:
        config = self._config.gemini
        return f"{config.url.rstrip('/')}/{config.model}:generateContent"

    def correct(self, text: str, prompt: str) -> str:
        """Fix text using Gemini."""
        api_key = self._api_key()

        log(f"Gemini request: {self._config.gemini.model} ({len(text)} chars)", "AI")

        payload = {
            "contents": [
                {"parts": [{"text": f"{prompt}\n\n{text}"}]}
            ]
        }

        data = self._post_json(
            self.endpoint(),
            payload,
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
        )

        try:
            content = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            log("Gemini response missing candidates[0].content.parts[0].text", "WARN")
            raise self._bad_response()
        if not isinstance(content, str):
            raise self._bad_response()

        log(f"Gemini complete: {len(text)} -> {len(content)} chars", "OK")
        return content

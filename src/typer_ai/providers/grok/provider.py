# SPDX-License-Identifier: MIT
# Copyright (c) 2025-2026 Soroush Yousefpour
"""
Grok (xAI) provider implementation.

Uses the OpenAI-compatible chat completions endpoint.
"""

from ...utils import log
from ..base import CorrectionProvider


class GrokProvider(CorrectionProvider):
    """Correction provider using xAI's chat completions API."""

    @property
    def id(self) -> str:
        return "grok"

    @property
    def name(self) -> str:
        return "Grok"

    def correct(self, text: str, prompt: str) -> str:
        """Fix text using Grok."""
        api_key = self._api_key()
        config = self._config.grok

        log(f"Grok request: {config.model} ({len(text)} chars)", "AI")

        # Build request payload (OpenAI chat format)
        payload = {
            "model": config.model,
            "messages": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": text},
            ],
        }

        data = self._post_json(
            config.url,
            payload,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

        # Parse chat completion response
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            log("Grok response missing choices[0].message.content", "WARN")
            raise self._bad_response()
        if not isinstance(content, str):
            raise self._bad_response()

        log(f"Grok complete: {len(text)} -> {len(content)} chars", "OK")
        return content

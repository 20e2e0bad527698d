"""
Gemini provider for text correction.

Uses Google's Generative Language API.
"""

from .provider import GeminiProvider

__all__ = ["GeminiProvider"]

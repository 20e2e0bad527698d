"""
Grok provider for text correction.

Uses xAI's hosted chat completions API.
"""

from .provider import GrokProvider

__all__ = ["GrokProvider"]

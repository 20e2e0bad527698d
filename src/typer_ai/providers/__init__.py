"""
Text correction providers for Typer AI.

To add a new provider:
1. Create a new folder under providers/ with __init__.py and provider.py
2. Add a config section for it in config.py
3. Add an entry to PROVIDER_REGISTRY below

Usage:
    from typer_ai.providers import create_provider

    provider = create_provider("grok", config, secrets)
    corrected = provider.correct("some text", config.provider.prompt)
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import requests

from ..config import GEMINI_MODELS, GROK_MODELS, Config
from ..keystore import SecretStore
from .base import CorrectionProvider

ProviderFactory = Callable[[Config, SecretStore, Optional[requests.Session]], CorrectionProvider]


@dataclass
class ProviderInfo:
    """Metadata for a correction provider."""
    id: str                    # Config identifier (e.g., "grok")
    name: str                  # Display name (e.g., "Grok (xAI)")
    description: str           # Short description for menus
    models: Tuple[str, ...]    # Known model names, first is the default
    factory: ProviderFactory   # Function to create instance


def _create_grok(config: Config, secrets: SecretStore, session: Optional[requests.Session]) -> CorrectionProvider:
    from .grok import GrokProvider
    return GrokProvider(config, secrets, session)


def _create_gemini(config: Config, secrets: SecretStore, session: Optional[requests.Session]) -> CorrectionProvider:
    from .gemini import GeminiProvider
    return GeminiProvider(config, secrets, session)


# ============================================================================
# PROVIDER REGISTRY - Add new providers here
# ============================================================================
PROVIDER_REGISTRY: Dict[str, ProviderInfo] = {
    "grok": ProviderInfo(
        id="grok",
        name="Grok (xAI)",
        description="xAI chat completions",
        models=GROK_MODELS,
        factory=_create_grok,
    ),
    "gemini": ProviderInfo(
        id="gemini",
        name="Gemini (Google)",
        description="Google Generative Language API",
        models=GEMINI_MODELS,
        factory=_create_gemini,
    ),
}


def create_provider(
    provider_id: str,
    config: Config,
    secrets: SecretStore,
    session: Optional[requests.Session] = None,
) -> CorrectionProvider:
    """
    Factory function to create a correction provider instance.

    Args:
        provider_id: Provider ID from PROVIDER_REGISTRY
        config: Shared configuration
        secrets: Where the provider's API key is stored
        session: Optional HTTP session to reuse

    Returns:
        An instance of the requested provider.

    Raises:
        ValueError: If provider_id is not recognized.
    """
    if provider_id not in PROVIDER_REGISTRY:
        available = ", ".join(PROVIDER_REGISTRY.keys())
        raise ValueError(f"Unknown provider: {provider_id}. Available: {available}")

    return PROVIDER_REGISTRY[provider_id].factory(config, secrets, session)


def get_provider_info(provider_id: str) -> Optional[ProviderInfo]:
    """Get metadata for a provider."""
    return PROVIDER_REGISTRY.get(provider_id)


__all__ = [
    "CorrectionProvider",
    "ProviderInfo",
    "PROVIDER_REGISTRY",
    "create_provider",
    "get_provider_info",
]

"""
Mashup AI Generator Clients
"""
from .base import BaseGenerator, GeneratorResult
from .gemini import GeminiGenerator

PROVIDERS = {
    "gemini": GeminiGenerator,
}


def get_generator(provider: str = "gemini") -> BaseGenerator:
    """
    Factory function to get the appropriate generator.

    Args:
        provider: 'gemini' (only Gemini is currently supported)

    Returns:
        BaseGenerator instance
    """
    provider = provider.lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Use one of: {', '.join(PROVIDERS)}.")
    return PROVIDERS[provider]()


__all__ = ["get_generator", "GeneratorResult", "BaseGenerator", "GeminiGenerator", "PROVIDERS"]

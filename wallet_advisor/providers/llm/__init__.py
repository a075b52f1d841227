from typing import Any, Dict, Type, Optional

from .base import LLMProvider, LLMMessage, LLMResponse, LLMProviderError
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider

PROVIDER_ALIAS_MAP: Dict[str, str] = {
    "claude": "anthropic",
    "gpt": "openai",
}

PROVIDER_DISPLAY_NAMES: Dict[str, str] = {
    "anthropic": "Anthropic Claude",
    "openai": "OpenAI",
}


def canonical_provider_name(name: str) -> str:
    """Normalize provider aliases to their canonical identifier."""

    return PROVIDER_ALIAS_MAP.get(name.lower(), name.lower())


# Registry of available LLM providers
PROVIDER_REGISTRY: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


class LLMProviderFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create_provider(
        provider_name: str,
        api_key: str,
        model: Optional[str] = None,
        **kwargs,
    ) -> LLMProvider:
        provider_key = canonical_provider_name(provider_name)
        if provider_key not in PROVIDER_REGISTRY:
            available_providers = ", ".join(PROVIDER_REGISTRY.keys())
            raise ValueError(
                f"Unsupported provider '{provider_name}'. "
                f"Available providers: {available_providers}"
            )

        if not model:
            raise ValueError(f"No model provided for provider '{provider_key}'.")

        return PROVIDER_REGISTRY[provider_key](api_key=api_key, model=model, **kwargs)


def _api_key_for(provider: str) -> Optional[str]:
    from ...config import settings  # Local import to avoid circular dependency

    if provider == "anthropic":
        return settings.anthropic_api_key
    if provider == "openai":
        return settings.openai_api_key
    return None


def get_llm_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    **kwargs,
) -> LLMProvider:
    """Instantiate the configured LLM provider.

    Raises ValueError when the provider is unknown or has no API key.
    """

    from ...config import settings

    provider_input = (provider_name or "").strip().lower() or None
    model_input = (model or "").strip() or None

    resolved_provider = canonical_provider_name(provider_input or settings.llm_provider)
    if provider_input is None and model_input:
        detected_provider = settings.resolve_provider_for_model(model_input)
        if detected_provider:
            resolved_provider = canonical_provider_name(detected_provider)

    api_key = _api_key_for(resolved_provider)
    if not api_key:
        raise ValueError(f"No API key configured for provider: {resolved_provider}")

    resolved_model = model_input or settings.llm_model
    allowed_ids = {
        entry.get("id")
        for entry in settings.provider_models_catalog.get(resolved_provider, [])
        if entry.get("id")
    }
    if allowed_ids and resolved_model not in allowed_ids:
        resolved_model = settings.resolve_default_model(resolved_provider)

    if resolved_provider == "openai":
        kwargs.setdefault("base_url", settings.openai_base_url)
    kwargs.setdefault("timeout", settings.advice_timeout_seconds)

    return LLMProviderFactory.create_provider(
        provider_name=resolved_provider,
        api_key=api_key,
        model=resolved_model,
        **kwargs,
    )


def get_available_providers() -> Dict[str, Dict[str, Any]]:
    """Return metadata about supported LLM providers and whether they have keys."""

    from ...config import settings

    providers_info: Dict[str, Dict[str, Any]] = {}
    for provider_name in PROVIDER_REGISTRY:
        display_name = PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name.title())
        providers_info[provider_name] = {
            "status": "available" if _api_key_for(provider_name) else "unconfigured",
            "display_name": display_name,
            "default_model": settings.resolve_default_model(provider_name),
        }
    return providers_info


__all__ = [
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "LLMProviderError",
    "AnthropicProvider",
    "OpenAIProvider",
    "LLMProviderFactory",
    "get_available_providers",
    "get_llm_provider",
    "PROVIDER_REGISTRY",
    "canonical_provider_name",
]

import os

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.openai_api_key:
            fallback = os.getenv("OPENAI_KEY") or os.getenv("AI_SDK_OPENAI_API_KEY")
            if fallback:
                object.__setattr__(self, "openai_api_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8787, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Agent Identity
    agent_name: str = Field(default="wallet-exposure-advisor", description="Agent name shown in the manifest")
    agent_version: str = Field(default="1.0.0", description="Agent version string")
    agent_description: str = Field(
        default="AI-powered wallet exposure analyzer with rebalancing advice for EVM and Starknet wallets",
        description="Agent description shown in the manifest",
    )

    # Payments (informational, verification happens upstream)
    payments_receivable_address: str = Field(
        default="",
        description="Address that receives payment for paid entrypoints",
    )
    payments_network: str = Field(default="base", description="Network payments settle on")
    default_price: str = Field(
        default="0.10",
        validation_alias=AliasChoices("default_price", "DEFAULT_PRICE"),
        description="Price in USD charged per analyze-wallet call",
    )

    # Balance Sources
    blockscout_urls: Dict[str, str] = Field(
        default_factory=lambda: {
            "ethereum": "https://eth.blockscout.com",
            "arbitrum": "https://arbitrum.blockscout.com",
            "base": "https://base.blockscout.com",
            "optimism": "https://optimism.blockscout.com",
            "polygon": "https://polygon.blockscout.com",
            "gnosis": "https://gnosis.blockscout.com",
        },
        description="Blockscout instance per chain",
    )
    hyperliquid_rpc_url: str = Field(
        default="https://rpc.hyperliquid.xyz/evm",
        description="JSON-RPC endpoint for the Hyperliquid EVM",
    )
    starknet_rpc_url: str = Field(
        default="https://starknet-mainnet.public.blastapi.io/rpc/v0_7",
        description="JSON-RPC endpoint for Starknet mainnet",
    )

    # Price Source
    defillama_coins_url: str = Field(
        default="https://coins.llama.fi",
        description="DefiLlama coins API base URL",
    )

    # Timeouts
    provider_timeout_seconds: float = Field(default=15.0, gt=0, description="HTTP timeout for a single provider call")
    chain_timeout_seconds: float = Field(default=20.0, gt=0, description="Upper bound for fetching one chain's balances")
    advice_timeout_seconds: float = Field(default=30.0, gt=0, description="Upper bound for the advice generation call")

    # LLM Provider Settings
    llm_provider: str = Field(default="openai", description="Default LLM provider")
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible API base URL")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")

    # LLM Configuration
    llm_model: str = Field(default="gpt-4o-mini", description="Default LLM model")
    max_tokens: int = Field(default=1200, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.4, description="LLM temperature setting")
    provider_models_catalog: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=lambda: {
            "openai": [
                {
                    "id": "gpt-4o-mini",
                    "label": "GPT-4o mini",
                    "description": "Fast, inexpensive advice generation.",
                    "default": True,
                },
            ],
            "anthropic": [
                {
                    "id": "claude-sonnet-4-20250514",
                    "label": "Claude Sonnet 4",
                    "description": "Balanced depth and latency for daily use.",
                    "default": True,
                },
            ],
        },
        description="Provider models metadata",
    )

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["anthropic", "claude"]:
            return self.has_anthropic_key
        elif self.llm_provider.lower() in ["openai", "gpt"]:
            return self.has_openai_key
        return False

    def resolve_default_model(self, provider: str) -> str:
        provider_lower = provider.lower()
        options = self.provider_models_catalog.get(provider_lower, [])
        for option in options:
            if bool(option.get("default")):
                return option.get("id", self.llm_model)
        if options:
            return options[0].get("id", self.llm_model)
        return self.llm_model

    def resolve_provider_for_model(self, model_id: str) -> Optional[str]:
        target = (model_id or "").strip().lower()
        if not target:
            return None
        for provider, options in self.provider_models_catalog.items():
            for option in options:
                option_id = option.get("id")
                if option_id and option_id.lower() == target:
                    return provider
        return None


# Global settings instance
settings = Settings()

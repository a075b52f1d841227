from typing import Literal

from pydantic import BaseModel, Field, field_validator

RequestChain = Literal["ethereum", "base", "arbitrum", "starknet", "hyperliquid", "all"]


class AnalyzeWalletInput(BaseModel):
    address: str = Field(min_length=1, description="Wallet address to analyze")
    chain: RequestChain = Field(default="ethereum", description="Chain to query, or 'all' for every supported chain")

    @field_validator("address")
    @classmethod
    def _strip_address(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Wallet address is required")
        return value


class AnalyzeWalletRequest(BaseModel):
    input: AnalyzeWalletInput = Field(description="Entrypoint input payload")

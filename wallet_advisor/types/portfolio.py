from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.portfolio.models import HoldingCategory, RiskLevel


class PortfolioHolding(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    symbol: str = Field(description="Token symbol (e.g. ETH, USDC)")
    balance: str = Field(description="Human readable balance summed across chains")
    value_usd: float = Field(description="Total value in USD")
    percentage: float = Field(description="Share of total portfolio value, 0-100")
    category: HoldingCategory = Field(description="Risk bucket for the symbol")
    chains: List[str] = Field(default_factory=list, exclude=True, description="Chains holding this symbol")


class PortfolioAnalysis(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    total_value_usd: float = Field(description="Total portfolio value in USD")
    holdings: List[PortfolioHolding] = Field(description="Holdings ordered by value, largest first")
    risk_level: RiskLevel = Field(description="Risk tier derived from stablecoin share and concentration")
    stablecoin_percentage: float = Field(description="Share of value held in stablecoins")
    volatile_percentage: float = Field(description="Share of value held in anything that is not a stablecoin")
    concentration_risk: bool = Field(description="Whether a single holding exceeds half of the portfolio")
    advice: str = Field(default="", description="Rebalancing advice, attached last")

    @property
    def top_holding(self) -> PortfolioHolding | None:
        return self.holdings[0] if self.holdings else None

    def with_advice(self, advice: str) -> "PortfolioAnalysis":
        return self.model_copy(update={"advice": advice})

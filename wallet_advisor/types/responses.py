from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .portfolio import PortfolioHolding
from ..core.portfolio.models import RiskLevel


class AnalyzeWalletOutput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    address: str = Field(description="Wallet address that was analyzed")
    chain: str = Field(description="Requested chain, or a label listing the chains that returned data")
    total_value_usd: float = Field(description="Total portfolio value in USD")
    holdings: List[PortfolioHolding] = Field(description="Holdings ordered by value, largest first")
    risk_level: RiskLevel = Field(description="Risk tier")
    stablecoin_percentage: float = Field(description="Share of value held in stablecoins")
    volatile_percentage: float = Field(description="Share of value held outside stablecoins")
    concentration_risk: bool = Field(description="Whether a single holding exceeds half of the portfolio")
    advice: str = Field(description="Rebalancing advice")


class AnalyzeWalletResponse(BaseModel):
    output: AnalyzeWalletOutput = Field(description="Entrypoint output payload")


class HealthOutput(BaseModel):
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Time of the check")
    version: str = Field(description="Agent version")


class HealthResponse(BaseModel):
    output: HealthOutput = Field(description="Entrypoint output payload")


class EntrypointInfo(BaseModel):
    key: str = Field(description="Entrypoint identifier")
    description: str = Field(description="What the entrypoint does")
    price: str | None = Field(default=None, description="Price in USD, None when free")
    network: str | None = Field(default=None, description="Payment network for paid entrypoints")


class AgentManifest(BaseModel):
    name: str
    version: str
    description: str
    payments_receivable_address: str | None = Field(default=None, description="Address receiving payments")
    entrypoints: List[EntrypointInfo] = Field(default_factory=list)
    links: Dict[str, Any] = Field(default_factory=dict)

from .balances import TokenBalance, WalletBalances
from .portfolio import PortfolioHolding, PortfolioAnalysis
from .requests import AnalyzeWalletInput, AnalyzeWalletRequest
from .responses import (
    AgentManifest,
    AnalyzeWalletOutput,
    AnalyzeWalletResponse,
    EntrypointInfo,
    HealthOutput,
    HealthResponse,
)

__all__ = [
    "TokenBalance",
    "WalletBalances",
    "PortfolioHolding",
    "PortfolioAnalysis",
    "AnalyzeWalletInput",
    "AnalyzeWalletRequest",
    "AnalyzeWalletOutput",
    "AnalyzeWalletResponse",
    "HealthOutput",
    "HealthResponse",
    "EntrypointInfo",
    "AgentManifest",
]

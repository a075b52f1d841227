from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..types.balances import WalletBalances

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def format_units(raw: int, decimals: int) -> str:
    """Scale an integer base-unit amount to an exact decimal string."""
    if decimals <= 0:
        return str(raw)
    sign = "-" if raw < 0 else ""
    digits = str(abs(raw)).rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: float = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class BalanceProvider(Provider):
    """Provider for per-chain wallet balances"""

    @abstractmethod
    def supports(self, chain: str) -> bool:
        """Whether this provider can serve the chain"""
        pass

    @abstractmethod
    async def get_wallet_balances(self, address: str, chain: str) -> WalletBalances:
        """Native and token balances for an address on one chain"""
        pass


class PriceProvider(Provider):
    """Provider for token price data"""

    @abstractmethod
    async def get_token_prices(
        self, tokens: Iterable[Tuple[str, str]]
    ) -> Mapping[Tuple[str, str], Dict[str, Any]]:
        """Prices for (chain, token address) pairs; unknown tokens are absent"""
        pass

    @abstractmethod
    async def get_eth_price(self) -> Optional[float]:
        """Current ETH spot price in USD"""
        pass

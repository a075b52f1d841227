"""
Portfolio Pipeline Models

Records passed between the normalizer, aggregator and analyzer. All of them
are built fresh for one request and never mutated after construction.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class HoldingCategory(str, Enum):
    """Risk bucket a token symbol belongs to."""
    NATIVE = "native"
    STABLECOIN = "stablecoin"
    DEFI = "defi"
    VOLATILE = "volatile"


class RiskLevel(str, Enum):
    """Portfolio risk tier."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


@dataclass(frozen=True)
class RawBalanceEntry:
    """One token or native-coin balance on one chain, as reported by a balance source."""
    chain: str
    symbol: str
    decimal_balance: str
    token_address: Optional[str] = None
    decimals: int = 18
    raw_balance: int = 0
    usd_price: Optional[float] = None

    @property
    def price_key(self) -> str:
        """Key used for price lookups: contract address when known, else symbol."""
        if self.token_address:
            return self.token_address.lower()
        return self.symbol


@dataclass(frozen=True)
class NormalizedHolding:
    """A priced balance that survived the dust filter."""
    symbol: str
    chain: str
    balance: Decimal
    value_usd: float


@dataclass(frozen=True)
class AggregatedHolding:
    """One row per grouping key after merging across chains."""
    symbol: str
    total_balance: Decimal
    total_value_usd: float
    contributing_chains: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_normalized(cls, holding: NormalizedHolding) -> "AggregatedHolding":
        return cls(
            symbol=holding.symbol,
            total_balance=holding.balance,
            total_value_usd=holding.value_usd,
            contributing_chains=(holding.chain,),
        )


def format_balance(balance: Decimal) -> str:
    """Render a Decimal balance without exponent notation or trailing zeros."""
    text = format(balance, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


__all__ = [
    "HoldingCategory",
    "RiskLevel",
    "RawBalanceEntry",
    "NormalizedHolding",
    "AggregatedHolding",
    "format_balance",
]

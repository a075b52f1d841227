"""
Chain registry.

Static metadata for every chain the advisor can read balances from, and the
rules for expanding a request's chain tag into the chains actually queried.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

ALL_CHAINS = "all"


@dataclass(frozen=True)
class ChainConfig:
    """Where and how to read one chain's balances."""
    name: str
    chain_id: Optional[int]
    native_symbol: Optional[str]
    source: str  # "blockscout", "rpc" or "starknet"
    requestable: bool = False

    @property
    def is_evm(self) -> bool:
        return self.source in ("blockscout", "rpc")


CHAIN_REGISTRY: Dict[str, ChainConfig] = {
    "ethereum": ChainConfig("ethereum", 1, "ETH", "blockscout", requestable=True),
    "arbitrum": ChainConfig("arbitrum", 42161, "ETH", "blockscout", requestable=True),
    "base": ChainConfig("base", 8453, "ETH", "blockscout", requestable=True),
    "optimism": ChainConfig("optimism", 10, "ETH", "blockscout"),
    "polygon": ChainConfig("polygon", 137, "POL", "blockscout"),
    "gnosis": ChainConfig("gnosis", 100, "xDAI", "blockscout"),
    "hyperliquid": ChainConfig("hyperliquid", 998, "ETH", "rpc", requestable=True),
    "starknet": ChainConfig("starknet", None, None, "starknet", requestable=True),
}

EVM_CHAINS: List[str] = [name for name, cfg in CHAIN_REGISTRY.items() if cfg.is_evm]
REQUESTABLE_CHAINS: List[str] = [name for name, cfg in CHAIN_REGISTRY.items() if cfg.requestable]


def chain_label(requested: str, queried: List[str]) -> str:
    """Display label echoed back in the report."""
    if requested != ALL_CHAINS:
        return requested
    if not queried:
        return ALL_CHAINS
    return f"{ALL_CHAINS} ({', '.join(queried)})"


__all__ = [
    "ALL_CHAINS",
    "ChainConfig",
    "CHAIN_REGISTRY",
    "EVM_CHAINS",
    "REQUESTABLE_CHAINS",
    "chain_label",
]

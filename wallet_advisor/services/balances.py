"""
Multi-chain balance fetching.

Every chain is fetched concurrently and bounded by a timeout. A chain that
errors or times out becomes a failed ``ChainOutcome``; it never cancels its
siblings and never raises out of ``fetch_balances``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import structlog

from ..config import Settings, settings as default_settings
from ..errors import UnsupportedChainError
from ..providers.base import BalanceProvider
from ..providers.blockscout import BlockscoutProvider
from ..providers.evm_rpc import EvmRpcProvider
from ..providers.starknet import StarknetProvider
from ..types.balances import WalletBalances

logger = structlog.stdlib.get_logger(__name__)


@dataclass(frozen=True)
class ChainOutcome:
    """Result of fetching one chain: balances on success, a reason on failure."""
    chain: str
    balances: Optional[WalletBalances] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.balances is not None

    @classmethod
    def success(cls, balances: WalletBalances) -> "ChainOutcome":
        return cls(chain=balances.chain, balances=balances)

    @classmethod
    def failure(cls, chain: str, reason: str) -> "ChainOutcome":
        return cls(chain=chain, error=reason)


def default_providers(config: Settings = default_settings) -> List[BalanceProvider]:
    return [BlockscoutProvider(config), EvmRpcProvider(config), StarknetProvider(config)]


def provider_for_chain(chain: str, providers: Sequence[BalanceProvider]) -> BalanceProvider:
    for provider in providers:
        if provider.supports(chain):
            return provider
    raise UnsupportedChainError(chain)


async def fetch_chain(
    address: str,
    chain: str,
    providers: Sequence[BalanceProvider],
    timeout_s: float,
) -> ChainOutcome:
    try:
        provider = provider_for_chain(chain, providers)
        balances = await asyncio.wait_for(provider.get_wallet_balances(address, chain), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("chain_fetch_timeout", chain=chain, timeout_s=timeout_s)
        return ChainOutcome.failure(chain, f"timed out after {timeout_s:g}s")
    except Exception as e:
        logger.warning("chain_fetch_failed", chain=chain, error=str(e))
        return ChainOutcome.failure(chain, str(e) or e.__class__.__name__)

    logger.debug(
        "chain_fetched",
        chain=chain,
        tokens=len(balances.token_balances),
        total_usd=balances.total_usd_value,
    )
    return ChainOutcome.success(balances)


async def fetch_balances(
    address: str,
    chains: Sequence[str],
    providers: Optional[Sequence[BalanceProvider]] = None,
    config: Settings = default_settings,
) -> List[ChainOutcome]:
    """Fetch every chain in parallel; outcomes come back in ``chains`` order."""
    providers = list(providers) if providers is not None else default_providers(config)
    return list(await asyncio.gather(*(
        fetch_chain(address, chain, providers, config.chain_timeout_seconds)
        for chain in chains
    )))


def failures_by_chain(outcomes: Sequence[ChainOutcome]) -> Dict[str, str]:
    return {o.chain: o.error or "unknown error" for o in outcomes if not o.ok}


def format_balances_summary(balances: Sequence[WalletBalances]) -> str:
    """Plain-text per-chain breakdown with a grand total on top."""
    lines: List[str] = []
    grand_total = 0.0

    for chain in balances:
        native = chain.native_balance
        native_amount = float(native.formatted_balance) if native else 0.0
        has_value = bool(chain.total_usd_value and chain.total_usd_value > 0.01)
        if not has_value and not chain.token_balances and native_amount <= 0:
            continue

        lines.append(f"\n=== {chain.chain.upper()} ===")
        if chain.total_usd_value:
            lines.append(f"Total: ${chain.total_usd_value:.2f}")
            grand_total += chain.total_usd_value

        if native and native_amount > 0.0001:
            native_line = f"{native.symbol}: {native_amount:.4f}"
            if native.usd_value:
                native_line += f" (${native.usd_value:.2f})"
            lines.append(native_line)

        for token in chain.token_balances:
            token_line = f"{token.symbol}: {float(token.formatted_balance):.4f}"
            if token.usd_value:
                token_line += f" (${token.usd_value:.2f})"
            lines.append(token_line)

    if grand_total > 0:
        lines.insert(0, f"GRAND TOTAL: ${grand_total:.2f}")

    return "\n".join(lines)


__all__ = [
    "ChainOutcome",
    "default_providers",
    "provider_for_chain",
    "fetch_chain",
    "fetch_balances",
    "failures_by_chain",
    "format_balances_summary",
]

"""Turn per-chain balance records into priced holdings."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, List, Optional

from .models import NormalizedHolding, RawBalanceEntry
from ...types.balances import WalletBalances

logger = logging.getLogger(__name__)

DUST_THRESHOLD_USD = 0.01

# Priced at 1.0 regardless of oracle output
PINNED_STABLECOINS = frozenset({"USDC", "USDT", "DAI", "FRAX", "LUSD", "USDbC", "BUSD"})

# Priced with the ETH spot price
ETH_VARIANTS = frozenset({"ETH", "WETH"})

PriceLookup = Callable[[str, str], Optional[float]]


def to_raw_entries(balances: WalletBalances) -> List[RawBalanceEntry]:
    """Flatten one chain's native and token balances into raw entries."""
    return [
        RawBalanceEntry(
            chain=balances.chain,
            symbol=token.symbol,
            decimal_balance=token.formatted_balance,
            token_address=token.address or None,
            decimals=token.decimals,
            raw_balance=token.balance,
            usd_price=token.usd_price,
        )
        for token in balances.all_balances()
    ]


def _no_prices(chain: str, key: str) -> Optional[float]:
    return None


def resolve_price(
    entry: RawBalanceEntry,
    eth_price: float,
    price_lookup: PriceLookup = _no_prices,
) -> float:
    """Pick the USD price for an entry.

    Order: pinned stablecoin, ETH variant (when the ETH price is known),
    price attached by the balance source, external lookup. Unpriced entries
    resolve to 0.
    """
    if entry.symbol in PINNED_STABLECOINS:
        return 1.0
    if entry.symbol in ETH_VARIANTS and eth_price > 0:
        return eth_price
    if entry.usd_price:
        return entry.usd_price
    looked_up = price_lookup(entry.chain, entry.price_key)
    return looked_up or 0.0


def normalize_entry(
    entry: RawBalanceEntry,
    eth_price: float,
    price_lookup: PriceLookup = _no_prices,
) -> Optional[NormalizedHolding]:
    try:
        balance = Decimal(entry.decimal_balance)
    except InvalidOperation:
        balance = None
    if balance is None or not balance.is_finite():
        logger.warning(
            "Skipping %s on %s: unparseable balance %r",
            entry.symbol, entry.chain, entry.decimal_balance,
        )
        return None

    price = resolve_price(entry, eth_price, price_lookup)
    value_usd = max(float(balance) * price, 0.0)
    if value_usd <= DUST_THRESHOLD_USD:
        return None

    return NormalizedHolding(
        symbol=entry.symbol,
        chain=entry.chain,
        balance=balance,
        value_usd=value_usd,
    )


def normalize_balances(
    entries: Iterable[RawBalanceEntry],
    eth_price: float = 0.0,
    price_lookup: PriceLookup = _no_prices,
) -> List[NormalizedHolding]:
    """Price every entry and drop dust.

    Entries with no resolvable price are valued at 0 and therefore dropped;
    they never reach the report.
    """
    holdings: List[NormalizedHolding] = []
    for entry in entries:
        holding = normalize_entry(entry, eth_price, price_lookup)
        if holding is not None:
            holdings.append(holding)
    return holdings


__all__ = [
    "DUST_THRESHOLD_USD",
    "PINNED_STABLECOINS",
    "ETH_VARIANTS",
    "PriceLookup",
    "to_raw_entries",
    "resolve_price",
    "normalize_entry",
    "normalize_balances",
]

"""Merge holdings of the same symbol across chains."""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Callable, Dict, Iterable, List

from .models import AggregatedHolding, NormalizedHolding

# Enough digits for a uint256 amount at any decimals count
BALANCE_PRECISION = 96

GroupingKey = Callable[[NormalizedHolding], str]


def by_symbol(holding: NormalizedHolding) -> str:
    """Exact, case-sensitive ticker match.

    Two different contracts sharing a ticker (a bridged USDC and a native
    USDC, or an impostor token) land in the same row.
    """
    return holding.symbol


def aggregate_holdings(
    holdings: Iterable[NormalizedHolding],
    key: GroupingKey = by_symbol,
) -> List[AggregatedHolding]:
    """Collapse normalized holdings into one row per grouping key.

    Balances and USD values are summed; contributing chains keep the order in
    which they were first seen. Output order follows first appearance of each
    key and carries no other meaning.
    """
    order: List[str] = []
    symbols: Dict[str, str] = {}
    balances: Dict[str, Decimal] = {}
    values: Dict[str, float] = {}
    chains: Dict[str, List[str]] = {}

    for holding in holdings:
        group = key(holding)
        if group not in balances:
            order.append(group)
            symbols[group] = holding.symbol
            balances[group] = Decimal("0")
            values[group] = 0.0
            chains[group] = []
        with localcontext() as ctx:
            ctx.prec = BALANCE_PRECISION
            balances[group] += holding.balance
        values[group] += holding.value_usd
        if holding.chain not in chains[group]:
            chains[group].append(holding.chain)

    return [
        AggregatedHolding(
            symbol=symbols[group],
            total_balance=balances[group],
            total_value_usd=values[group],
            contributing_chains=tuple(chains[group]),
        )
        for group in order
    ]


__all__ = ["GroupingKey", "by_symbol", "aggregate_holdings"]

"""
Portfolio Analyzer

Turns aggregated holdings into percentages, categories and a risk tier.
Pure and deterministic: identical holdings always produce the same analysis.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import AggregatedHolding, HoldingCategory, RiskLevel, format_balance
from ...types.portfolio import PortfolioAnalysis, PortfolioHolding

CONCENTRATION_THRESHOLD_PCT = 50.0

CATEGORY_TABLE: Dict[str, HoldingCategory] = {
    **{s: HoldingCategory.STABLECOIN for s in ("USDC", "USDT", "DAI", "FRAX", "LUSD", "USDbC", "BUSD")},
    **{s: HoldingCategory.NATIVE for s in ("ETH", "STRK", "BTC", "WBTC", "WETH")},
    **{s: HoldingCategory.DEFI for s in ("AAVE", "UNI", "LINK", "CRV", "LDO", "ARB", "OP", "MKR", "COMP")},
}


def categorize_token(symbol: str) -> HoldingCategory:
    """Look the symbol up in the category table; anything unknown is volatile."""
    return CATEGORY_TABLE.get(symbol, HoldingCategory.VOLATILE)


def calculate_risk_level(stablecoin_pct: float, concentration_risk: bool) -> RiskLevel:
    # First match wins
    if stablecoin_pct >= 50:
        return RiskLevel.LOW
    if stablecoin_pct >= 30 and not concentration_risk:
        return RiskLevel.MEDIUM
    if stablecoin_pct >= 10:
        return RiskLevel.HIGH
    return RiskLevel.VERY_HIGH


def _percentage(value: float, total: float) -> float:
    return value / total * 100 if total > 0 else 0.0


def build_holdings(holdings: Sequence[AggregatedHolding], total_value_usd: float) -> List[PortfolioHolding]:
    enriched = [
        PortfolioHolding(
            symbol=h.symbol,
            balance=format_balance(h.total_balance),
            value_usd=h.total_value_usd,
            percentage=_percentage(h.total_value_usd, total_value_usd),
            category=categorize_token(h.symbol),
            chains=list(h.contributing_chains),
        )
        for h in holdings
    ]
    # sorted() is stable, ties keep input order
    return sorted(enriched, key=lambda h: h.value_usd, reverse=True)


def analyze_portfolio(holdings: Iterable[AggregatedHolding]) -> PortfolioAnalysis:
    """Build the analysis (without advice) for a set of aggregated holdings."""
    rows = list(holdings)
    total_value_usd = sum(h.total_value_usd for h in rows)

    enriched = build_holdings(rows, total_value_usd)

    stablecoin_percentage = sum(
        h.percentage for h in enriched if h.category == HoldingCategory.STABLECOIN
    )
    volatile_percentage = sum(
        h.percentage for h in enriched if h.category != HoldingCategory.STABLECOIN
    )
    concentration_risk = any(h.percentage > CONCENTRATION_THRESHOLD_PCT for h in enriched)

    return PortfolioAnalysis(
        total_value_usd=total_value_usd,
        holdings=enriched,
        risk_level=calculate_risk_level(stablecoin_percentage, concentration_risk),
        stablecoin_percentage=stablecoin_percentage,
        volatile_percentage=volatile_percentage,
        concentration_risk=concentration_risk,
    )


__all__ = [
    "CATEGORY_TABLE",
    "CONCENTRATION_THRESHOLD_PCT",
    "categorize_token",
    "calculate_risk_level",
    "build_holdings",
    "analyze_portfolio",
]

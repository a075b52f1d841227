"""
Advice Orchestrator

Asks an external text generator for rebalancing advice and falls back to a
rule-based composer when the generator is missing, fails, times out or
returns nothing. ``generate_advice`` never raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from .models import RiskLevel
from .prompt import ADVISOR_ANALYSIS_TEMPLATE, ADVISOR_SYSTEM_PROMPT
from ...providers.llm.base import LLMMessage, LLMProvider
from ...types.portfolio import PortfolioAnalysis

logger = logging.getLogger(__name__)

TOP_HOLDINGS_IN_PROMPT = 10
DEFAULT_ADVICE_TIMEOUT_S = 30.0

_RISK_HEADLINES = {
    RiskLevel.VERY_HIGH: (
        "⚠️ **High Risk Portfolio** (risk level: very-high): Your exposure to volatile "
        "assets is significant with minimal stablecoin buffer."
    ),
    RiskLevel.HIGH: (
        "⚡ **Elevated Risk** (risk level: high): Consider increasing stablecoin "
        "allocation to reduce volatility impact."
    ),
    RiskLevel.MEDIUM: (
        "📊 **Balanced Risk** (risk level: medium): Your portfolio has reasonable "
        "diversification but could be optimized."
    ),
    RiskLevel.LOW: (
        "🛡️ **Conservative Portfolio** (risk level: low): Strong stablecoin position "
        "provides good downside protection."
    ),
}


class AdviceGenerator(Protocol):
    async def generate(self, system_prompt: str, prompt: str) -> str:
        ...


class LLMAdviceGenerator:
    """Adapts an LLM provider to the advice generator interface."""

    def __init__(self, provider: LLMProvider, max_tokens: int = 1200, temperature: Optional[float] = None):
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, prompt: str) -> str:
        response = await self.provider.generate_response(
            messages=[
                LLMMessage(role="system", content=system_prompt),
                LLMMessage(role="user", content=prompt),
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return response.content or ""


def format_holdings_summary(analysis: PortfolioAnalysis, limit: int = TOP_HOLDINGS_IN_PROMPT) -> str:
    return "\n".join(
        f"- {h.symbol}: {h.percentage:.1f}% (${h.value_usd:.2f})"
        for h in analysis.holdings[:limit]
    )


def build_advice_prompt(analysis: PortfolioAnalysis, chain_label: str) -> str:
    return ADVISOR_ANALYSIS_TEMPLATE.format(
        chain=chain_label,
        total_value=analysis.total_value_usd,
        risk_level=analysis.risk_level.value,
        stablecoin_pct=analysis.stablecoin_percentage,
        volatile_pct=analysis.volatile_percentage,
        concentration="YES - Single asset > 50%" if analysis.concentration_risk else "No",
        holdings=format_holdings_summary(analysis) or "- (no priced holdings)",
    )


def compose_fallback_advice(analysis: PortfolioAnalysis) -> str:
    """Rule-based advice built only from the analysis fields."""
    lines: List[str] = [_RISK_HEADLINES[analysis.risk_level]]

    top = analysis.top_holding
    if analysis.concentration_risk and top is not None:
        lines.append(
            f"\n🎯 **Concentration Alert**: {top.symbol} represents {top.percentage:.1f}% "
            "of your portfolio. Consider diversifying to reduce single-asset risk."
        )

    lines.append("\n**Suggested Allocation:**")
    if analysis.stablecoin_percentage < 20:
        lines.append("- Increase stablecoins to 20-30% for market volatility protection")
    if analysis.volatile_percentage > 80:
        lines.append("- Reduce volatile asset exposure to ~70% maximum")
    if analysis.stablecoin_percentage >= 20 and analysis.volatile_percentage <= 80:
        lines.append(
            f"- Current split ({analysis.stablecoin_percentage:.1f}% stablecoins / "
            f"{analysis.volatile_percentage:.1f}% volatile) is within range; rebalance if it drifts"
        )

    lines.append("\n**Action Items:**")
    lines.append("- Set stop-losses on volatile positions")
    lines.append("- Consider DCA (Dollar Cost Average) for new entries")
    if analysis.total_value_usd > 10000:
        lines.append("- Review security: hardware wallet recommended for this portfolio size")

    return "\n".join(lines)


async def generate_advice(
    analysis: PortfolioAnalysis,
    chain_label: str,
    generator: Optional[AdviceGenerator] = None,
    timeout_s: float = DEFAULT_ADVICE_TIMEOUT_S,
) -> str:
    """Return generated advice verbatim, or the rule-based fallback."""
    if generator is None:
        logger.info("No advice generator configured, using fallback advice")
        return compose_fallback_advice(analysis)

    prompt = build_advice_prompt(analysis, chain_label)
    try:
        text = await asyncio.wait_for(generator.generate(ADVISOR_SYSTEM_PROMPT, prompt), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("Advice generation timed out after %.1fs, using fallback advice", timeout_s)
        return compose_fallback_advice(analysis)
    except Exception as e:
        logger.warning("LLM error, using fallback advice: %s", e)
        return compose_fallback_advice(analysis)

    if not isinstance(text, str) or not text.strip():
        logger.warning("Advice generator returned empty text, using fallback advice")
        return compose_fallback_advice(analysis)
    return text


__all__ = [
    "AdviceGenerator",
    "LLMAdviceGenerator",
    "format_holdings_summary",
    "build_advice_prompt",
    "compose_fallback_advice",
    "generate_advice",
]

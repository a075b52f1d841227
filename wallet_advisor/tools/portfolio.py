import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from ..config import Settings, settings as default_settings
from ..core.portfolio.advisor import AdviceGenerator, LLMAdviceGenerator, generate_advice
from ..core.portfolio.aggregator import aggregate_holdings
from ..core.portfolio.analyzer import analyze_portfolio
from ..core.portfolio.models import AggregatedHolding, RawBalanceEntry
from ..core.portfolio.normalizer import (
    ETH_VARIANTS,
    PINNED_STABLECOINS,
    PriceLookup,
    normalize_balances,
    to_raw_entries,
)
from ..errors import PortfolioUnavailableError
from ..providers.base import BalanceProvider, PriceProvider, ZERO_ADDRESS
from ..providers.defillama import DefiLlamaProvider
from ..providers.llm import LLMProvider, get_llm_provider
from ..services.address import normalize_chain, resolve_chains
from ..services.balances import failures_by_chain, fetch_balances
from ..services.chains import ALL_CHAINS, chain_label
from ..types import AnalyzeWalletOutput

logger = structlog.stdlib.get_logger(__name__)

# Sentinel: build the advice generator from settings
_FROM_SETTINGS: Any = object()


def _needs_lookup(entry: RawBalanceEntry) -> bool:
    if entry.symbol in PINNED_STABLECOINS or entry.symbol in ETH_VARIANTS:
        return False
    if entry.usd_price:
        return False
    return bool(entry.token_address) and entry.token_address != ZERO_ADDRESS


async def load_prices(
    entries: Sequence[RawBalanceEntry],
    price_provider: PriceProvider,
) -> Tuple[float, PriceLookup]:
    """ETH spot price and a lookup for tokens the balance source left unpriced.

    A failed price call degrades to "no price known" rather than failing the
    request.
    """
    wanted = [(e.chain, e.price_key) for e in entries if _needs_lookup(e)]

    eth_result, token_result = await asyncio.gather(
        price_provider.get_eth_price(),
        price_provider.get_token_prices(wanted),
        return_exceptions=True,
    )

    eth_price = 0.0
    if isinstance(eth_result, BaseException):
        logger.warning("eth_price_unavailable", error=str(eth_result))
    elif eth_result:
        eth_price = float(eth_result)

    prices: Dict[Tuple[str, str], Dict[str, Any]] = {}
    if isinstance(token_result, BaseException):
        logger.warning("token_prices_unavailable", error=str(token_result), tokens=len(wanted))
    else:
        prices = dict(token_result)

    def lookup(chain: str, key: str) -> Optional[float]:
        return (prices.get((chain, key.lower())) or {}).get("price")

    return eth_price, lookup


def build_advice_generator(config: Settings = default_settings) -> Tuple[Optional[AdviceGenerator], Optional[LLMProvider]]:
    """LLM-backed generator from settings, or (None, None) when no key is configured."""
    if not config.has_llm_key:
        return None, None
    try:
        provider = get_llm_provider()
    except ValueError as e:
        logger.warning("advice_generator_unavailable", error=str(e))
        return None, None
    generator = LLMAdviceGenerator(provider, max_tokens=config.max_tokens, temperature=config.temperature)
    return generator, provider


async def analyze_wallet(
    address: str,
    chain: str = "ethereum",
    *,
    balance_providers: Optional[Sequence[BalanceProvider]] = None,
    price_provider: Optional[PriceProvider] = None,
    advice_generator: Optional[AdviceGenerator] = _FROM_SETTINGS,
    config: Settings = default_settings,
) -> AnalyzeWalletOutput:
    """Fetch, price, aggregate and analyze a wallet, then attach advice.

    Raises UnsupportedChainError / InvalidAddressError for bad input and
    PortfolioUnavailableError when no chain returned balances.
    """
    start_time = datetime.now()
    requested = normalize_chain(chain)
    chains = resolve_chains(address, requested)

    log = logger.bind(address=address, chain=requested)
    log.info("analyze_wallet_started", chains=chains)

    outcomes = await fetch_balances(address, chains, balance_providers, config)
    succeeded = [o.balances for o in outcomes if o.ok]
    failures = failures_by_chain(outcomes)
    if not succeeded:
        raise PortfolioUnavailableError(failures)
    if failures:
        log.warning("partial_chain_failure", failed=failures)

    entries: List[RawBalanceEntry] = [e for b in succeeded for e in to_raw_entries(b)]
    eth_price, lookup = await load_prices(entries, price_provider or DefiLlamaProvider(config))
    holdings = normalize_balances(entries, eth_price, lookup)

    if requested == ALL_CHAINS:
        aggregated = aggregate_holdings(holdings)
    else:
        aggregated = [AggregatedHolding.from_normalized(h) for h in holdings]

    analysis = analyze_portfolio(aggregated)
    label = chain_label(requested, [b.chain for b in succeeded])

    owned_provider: Optional[LLMProvider] = None
    if advice_generator is _FROM_SETTINGS:
        advice_generator, owned_provider = build_advice_generator(config)
    try:
        advice = await generate_advice(analysis, label, advice_generator, config.advice_timeout_seconds)
    finally:
        if owned_provider is not None:
            await owned_provider.close()

    analysis = analysis.with_advice(advice)

    latency_ms = int((datetime.now() - start_time).total_seconds() * 1000)
    log.info(
        "analyze_wallet_completed",
        total_value_usd=round(analysis.total_value_usd, 2),
        holdings=len(analysis.holdings),
        risk_level=analysis.risk_level.value,
        latency_ms=latency_ms,
    )

    return AnalyzeWalletOutput(
        address=address,
        chain=label,
        total_value_usd=analysis.total_value_usd,
        holdings=analysis.holdings,
        risk_level=analysis.risk_level,
        stablecoin_percentage=analysis.stablecoin_percentage,
        volatile_percentage=analysis.volatile_percentage,
        concentration_risk=analysis.concentration_risk,
        advice=analysis.advice,
    )

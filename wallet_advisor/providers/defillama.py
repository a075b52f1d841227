import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from ..config import Settings, settings as default_settings
from ..errors import PriceSourceError
from .base import PriceProvider

# Our chain slug -> DefiLlama chain prefix
DEFILLAMA_CHAIN_NAMES: Dict[str, str] = {
    "ethereum": "ethereum",
    "arbitrum": "arbitrum",
    "base": "base",
    "optimism": "optimism",
    "polygon": "polygon",
    "gnosis": "xdai",
    "hyperliquid": "hyperliquid",
    "starknet": "starknet",
}
_CHAINS_BY_LLAMA_NAME = {v: k for k, v in DEFILLAMA_CHAIN_NAMES.items()}

ETH_COIN_KEY = "coingecko:ethereum"
MAX_COINS_PER_REQUEST = 50

PriceKey = Tuple[str, str]

logger = logging.getLogger(__name__)


class DefiLlamaProvider(PriceProvider):
    """DefiLlama coins API (free, no key) for spot prices"""

    name = "defillama"

    def __init__(self, config: Settings = default_settings):
        self.base_url = config.defillama_coins_url.rstrip("/")
        self.timeout_s = config.provider_timeout_seconds

    async def ready(self) -> bool:
        return bool(self.base_url)

    async def health_check(self) -> Dict[str, Any]:
        try:
            price = await self.get_eth_price()
            if price:
                return {"status": "healthy"}
            return {"status": "degraded", "reason": "ETH price missing from response"}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _fetch_coins(self, client: httpx.AsyncClient, coin_keys: List[str]) -> Dict[str, Any]:
        response = await client.get(
            f"{self.base_url}/prices/current/{','.join(coin_keys)}",
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise PriceSourceError(f"DefiLlama returned malformed JSON: {e}") from e
        coins = data.get("coins") if isinstance(data, dict) else None
        return coins or {}

    async def get_token_prices(self, tokens: Iterable[PriceKey]) -> Dict[PriceKey, Dict[str, Any]]:
        """Prices keyed by (chain, lowercased token address)

        Tokens on chains DefiLlama does not index, tokens it has no price for,
        and tokens in a batch whose request failed are absent from the result.
        Raises PriceSourceError only when every batch failed.
        """
        coin_keys: List[str] = []
        for chain, token_address in tokens:
            llama_chain = DEFILLAMA_CHAIN_NAMES.get(chain)
            if llama_chain and token_address:
                key = f"{llama_chain}:{token_address}"
                if key not in coin_keys:
                    coin_keys.append(key)
        if not coin_keys:
            return {}

        batches = [
            coin_keys[i:i + MAX_COINS_PER_REQUEST]
            for i in range(0, len(coin_keys), MAX_COINS_PER_REQUEST)
        ]
        async with httpx.AsyncClient() as client:
            results = await asyncio.gather(
                *(self._fetch_coins(client, batch) for batch in batches),
                return_exceptions=True,
            )

        prices: Dict[PriceKey, Dict[str, Any]] = {}
        failures: List[BaseException] = []
        for batch, coins in zip(batches, results):
            if isinstance(coins, BaseException):
                if not isinstance(coins, (httpx.HTTPError, PriceSourceError)):
                    raise coins
                logger.warning("DefiLlama batch of %d coins failed: %s", len(batch), coins)
                failures.append(coins)
                continue
            for key, price_data in coins.items():
                llama_chain, _, address = key.partition(":")
                chain = _CHAINS_BY_LLAMA_NAME.get(llama_chain.lower())
                price = (price_data or {}).get("price")
                if not chain or not address or not price:
                    continue
                prices[(chain, address.lower())] = {
                    "price": float(price),
                    "symbol": price_data.get("symbol"),
                    "confidence": price_data.get("confidence", 0.99),
                }

        if len(failures) == len(batches):
            raise PriceSourceError(f"DefiLlama price request failed: {failures[0]}") from failures[0]
        return prices

    async def get_eth_price(self) -> Optional[float]:
        try:
            async with httpx.AsyncClient() as client:
                coins = await self._fetch_coins(client, [ETH_COIN_KEY])
        except httpx.HTTPError as e:
            raise PriceSourceError(f"DefiLlama ETH price request failed: {e}") from e
        price = (coins.get(ETH_COIN_KEY) or {}).get("price")
        return float(price) if price else None

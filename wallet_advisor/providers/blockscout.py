import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..errors import BalanceSourceError
from ..services.chains import CHAIN_REGISTRY
from ..types.balances import TokenBalance, WalletBalances
from .base import BalanceProvider, ZERO_ADDRESS, format_units
from .token_list import NFT_TOKEN_TYPES, is_likely_spam_token

logger = logging.getLogger(__name__)


def _parse_price(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) and price > 0 else None


def _parse_int(value: Any, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _value_of(token: TokenBalance) -> Optional[float]:
    if token.usd_price and token.balance > 0:
        return float(token.formatted_balance) * token.usd_price
    return None


class BlockscoutProvider(BalanceProvider):
    """Blockscout v2 API provider; discovers every fungible token an address holds"""

    name = "blockscout"

    def __init__(self, config: Settings = default_settings):
        self.urls: Dict[str, str] = {k: v.rstrip("/") for k, v in config.blockscout_urls.items()}
        self.timeout_s = config.provider_timeout_seconds

    def supports(self, chain: str) -> bool:
        return chain in self.urls and chain in CHAIN_REGISTRY

    async def ready(self) -> bool:
        return bool(self.urls)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "unavailable", "reason": "No Blockscout instances configured"}

        base_url = self.urls.get("ethereum") or next(iter(self.urls.values()))
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{base_url}/api/v2/stats", timeout=self.timeout_s)
                response.raise_for_status()
                return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Any:
        response = await client.get(url, timeout=self.timeout_s)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise BalanceSourceError(f"Blockscout returned malformed JSON from {url}: {e}") from e

    def _parse_native(self, chain: str, data: Optional[Dict[str, Any]]) -> TokenBalance:
        native_symbol = CHAIN_REGISTRY[chain].native_symbol or "ETH"
        data = data or {}
        raw = _parse_int(data.get("coin_balance"))
        native = TokenBalance(
            address=ZERO_ADDRESS,
            symbol=native_symbol,
            name=native_symbol,
            decimals=18,
            balance=raw,
            formatted_balance=format_units(raw, 18),
            usd_price=_parse_price(data.get("exchange_rate")),
        )
        native.usd_value = _value_of(native)
        return native

    def _parse_tokens(self, chain: str, items: Optional[List[Dict[str, Any]]]) -> List[TokenBalance]:
        tokens: List[TokenBalance] = []
        for item in items or []:
            token = item.get("token") or {}
            if token.get("type") in NFT_TOKEN_TYPES:
                continue

            symbol = token.get("symbol") or ""
            name = token.get("name") or ""
            if is_likely_spam_token(symbol, name):
                logger.debug("Skipping likely spam token %s (%s) on %s", symbol, name, chain)
                continue

            raw = _parse_int(item.get("value"))
            if raw <= 0:
                continue

            decimals = _parse_int(token.get("decimals"), default=18)
            balance = TokenBalance(
                address=token.get("address_hash") or token.get("address") or "",
                symbol=symbol or "???",
                name=name or "Unknown",
                decimals=decimals,
                balance=raw,
                formatted_balance=format_units(raw, decimals),
                usd_price=_parse_price(token.get("exchange_rate")),
                logo_url=token.get("icon_url"),
            )
            balance.usd_value = _value_of(balance)
            tokens.append(balance)

        tokens.sort(key=lambda t: t.usd_value or 0.0, reverse=True)
        return tokens

    async def get_wallet_balances(self, address: str, chain: str) -> WalletBalances:
        """Native balance plus every non-zero fungible token balance"""
        if not self.supports(chain):
            raise BalanceSourceError(f"No Blockscout API for chain: {chain}")

        base_url = self.urls[chain]
        async with httpx.AsyncClient() as client:
            # 404 means the indexer has never seen the address: an empty wallet
            address_data = await self._get_json(client, f"{base_url}/api/v2/addresses/{address}")
            token_data = await self._get_json(client, f"{base_url}/api/v2/addresses/{address}/token-balances")

        if token_data is not None and not isinstance(token_data, list):
            raise BalanceSourceError(f"Unexpected token-balances payload from Blockscout ({chain})")

        native = self._parse_native(chain, address_data)
        tokens = self._parse_tokens(chain, token_data)

        total = sum(t.usd_value or 0.0 for t in [native, *tokens])
        return WalletBalances(
            chain=chain,
            chain_id=CHAIN_REGISTRY[chain].chain_id,
            address=address,
            native_balance=native,
            token_balances=tokens,
            total_usd_value=total if total > 0 else None,
        )

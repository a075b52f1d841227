"""JSON-RPC balance source for EVM chains that have no indexer."""

import logging
from typing import Any, Dict, List

import httpx

from ..config import Settings, settings as default_settings
from ..errors import BalanceSourceError
from ..services.chains import CHAIN_REGISTRY
from ..types.balances import TokenBalance, WalletBalances
from .base import BalanceProvider, ZERO_ADDRESS, format_units
from .token_list import RPC_TOKEN_LISTS

logger = logging.getLogger(__name__)

# keccak("balanceOf(address)")[:4]
BALANCE_OF_SELECTOR = "0x70a08231"


def encode_balance_of(owner: str) -> str:
    return BALANCE_OF_SELECTOR + owner.lower().removeprefix("0x").rjust(64, "0")


def _hex_to_int(value: Any) -> int:
    if not value or value == "0x":
        return 0
    return int(value, 16)


class EvmRpcProvider(BalanceProvider):
    """Reads the native balance and a fixed token list over eth_call"""

    name = "evm_rpc"

    def __init__(self, config: Settings = default_settings):
        self.rpc_urls: Dict[str, str] = {"hyperliquid": config.hyperliquid_rpc_url}
        self.timeout_s = config.provider_timeout_seconds

    def supports(self, chain: str) -> bool:
        return chain in self.rpc_urls

    async def ready(self) -> bool:
        return any(self.rpc_urls.values())

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "unavailable", "reason": "No RPC endpoints configured"}
        try:
            async with httpx.AsyncClient() as client:
                chain = next(iter(self.rpc_urls))
                await self._rpc(client, chain, "eth_chainId", [])
            return {"status": "healthy"}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _rpc(self, client: httpx.AsyncClient, chain: str, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": 1}
        response = await client.post(
            self.rpc_urls[chain],
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        data = response.json()
        if "error" in data:
            raise BalanceSourceError(f"{chain} RPC error: {data['error']}")
        return data.get("result")

    async def get_wallet_balances(self, address: str, chain: str) -> WalletBalances:
        if not self.supports(chain):
            raise BalanceSourceError(f"No RPC config for chain: {chain}")

        config = CHAIN_REGISTRY[chain]
        tokens: List[TokenBalance] = []

        async with httpx.AsyncClient() as client:
            native_raw = _hex_to_int(await self._rpc(client, chain, "eth_getBalance", [address, "latest"]))

            for token in RPC_TOKEN_LISTS.get(chain, []):
                try:
                    result = await self._rpc(
                        client,
                        chain,
                        "eth_call",
                        [{"to": token["address"], "data": encode_balance_of(address)}, "latest"],
                    )
                    raw = _hex_to_int(result)
                except (httpx.HTTPError, BalanceSourceError, ValueError) as e:
                    logger.warning("Error fetching %s on %s: %s", token["symbol"], chain, e)
                    continue

                if raw > 0:
                    tokens.append(TokenBalance(
                        address=token["address"],
                        symbol=token["symbol"],
                        name=token["name"],
                        decimals=token["decimals"],
                        balance=raw,
                        formatted_balance=format_units(raw, token["decimals"]),
                    ))

        native = TokenBalance(
            address=ZERO_ADDRESS,
            symbol=config.native_symbol or "ETH",
            name=config.native_symbol or "ETH",
            decimals=18,
            balance=native_raw,
            formatted_balance=format_units(native_raw, 18),
        )

        return WalletBalances(
            chain=chain,
            chain_id=config.chain_id,
            address=address,
            native_balance=native,
            token_balances=tokens,
        )

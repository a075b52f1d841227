"""Starknet balance source: ERC-20 balanceOf calls over the node JSON-RPC API."""

import logging
from typing import Any, Dict, List

import httpx

from ..config import Settings, settings as default_settings
from ..errors import BalanceSourceError
from ..types.balances import TokenBalance, WalletBalances
from .base import BalanceProvider, format_units
from .token_list import STARKNET_TOKENS

logger = logging.getLogger(__name__)

# starknet_keccak("balanceOf")
BALANCE_OF_SELECTOR = "0x2e4263afad30923c891518314c3c95dbe830a16874e8abc5777a9a20b54c76e"


def decode_uint256(result: List[str]) -> int:
    """Combine a (low, high) felt pair into one integer.

    Older token contracts return a single felt instead.
    """
    if not result:
        return 0
    low = int(result[0], 16)
    high = int(result[1], 16) if len(result) > 1 else 0
    return low + (high << 128)


class StarknetProvider(BalanceProvider):
    """Reads a fixed list of Starknet tokens for an account"""

    name = "starknet"

    def __init__(self, config: Settings = default_settings):
        self.rpc_url = config.starknet_rpc_url
        self.timeout_s = config.provider_timeout_seconds

    def supports(self, chain: str) -> bool:
        return chain == "starknet"

    async def ready(self) -> bool:
        return bool(self.rpc_url)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "unavailable", "reason": "Starknet RPC not configured"}
        try:
            async with httpx.AsyncClient() as client:
                await self._rpc(client, "starknet_chainId", [])
            return {"status": "healthy"}
        except Exception as e:
            return {"status": "error", "reason": str(e)}

    async def _rpc(self, client: httpx.AsyncClient, method: str, params: Any) -> Any:
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": 1}
        response = await client.post(self.rpc_url, json=payload, timeout=self.timeout_s)
        response.raise_for_status()
        data = response.json()
        if "error" in data:
            raise BalanceSourceError(f"Starknet RPC error: {data['error']}")
        return data.get("result")

    async def _balance_of(self, client: httpx.AsyncClient, token_address: str, account: str) -> int:
        result = await self._rpc(
            client,
            "starknet_call",
            {
                "request": {
                    "contract_address": token_address,
                    "entry_point_selector": BALANCE_OF_SELECTOR,
                    "calldata": [account],
                },
                "block_id": "latest",
            },
        )
        return decode_uint256(result or [])

    async def get_wallet_balances(self, address: str, chain: str = "starknet") -> WalletBalances:
        if not self.supports(chain):
            raise BalanceSourceError(f"Starknet provider cannot serve chain: {chain}")

        tokens: List[TokenBalance] = []
        failures = 0
        async with httpx.AsyncClient() as client:
            for token in STARKNET_TOKENS:
                try:
                    raw = await self._balance_of(client, token["address"], address)
                except (httpx.HTTPError, BalanceSourceError, ValueError) as e:
                    failures += 1
                    logger.warning("Error fetching %s on Starknet: %s", token["symbol"], e)
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

        if failures == len(STARKNET_TOKENS):
            raise BalanceSourceError("Every Starknet balanceOf call failed")

        return WalletBalances(chain="starknet", address=address, token_balances=tokens)

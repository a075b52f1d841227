"""Helpers for normalizing chain identifiers and validating wallet addresses."""

from __future__ import annotations

import re
from typing import List

from .chains import ALL_CHAINS, CHAIN_REGISTRY, EVM_CHAINS, REQUESTABLE_CHAINS
from ..errors import InvalidAddressError, UnsupportedChainError

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
# Felts are at most 252 bits; wallets usually print them zero-padded to 64 hex chars
_STARKNET_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{1,64}$")

_CHAIN_ALIASES = {
    "eth": "ethereum",
    "ethereum": "ethereum",
    "mainnet": "ethereum",
    "arb": "arbitrum",
    "arbitrum-one": "arbitrum",
    "base-mainnet": "base",
    "strk": "starknet",
    "sn": "starknet",
    "hyperevm": "hyperliquid",
    "hl": "hyperliquid",
    "*": ALL_CHAINS,
}


def normalize_chain(chain: str | None) -> str:
    """Collapse user-provided chain identifiers into canonical slugs."""

    if not chain:
        return "ethereum"
    cleaned = chain.lower().strip()
    return _CHAIN_ALIASES.get(cleaned, cleaned)


def is_supported_chain(chain: str) -> bool:
    """Return True if the chain may be requested directly (or is 'all')."""

    return chain == ALL_CHAINS or chain in REQUESTABLE_CHAINS


def is_evm_address(address: str) -> bool:
    return bool(_EVM_ADDRESS_RE.fullmatch(address or ""))


def is_valid_starknet_address(address: str) -> bool:
    if not _STARKNET_ADDRESS_RE.fullmatch(address or ""):
        return False
    return int(address, 16) > 0


def is_valid_address_for_chain(address: str, chain: str) -> bool:
    if not address:
        return False
    if chain == "starknet":
        return is_valid_starknet_address(address)
    if chain == ALL_CHAINS:
        return is_evm_address(address) or is_valid_starknet_address(address)
    config = CHAIN_REGISTRY.get(chain)
    if config is not None and config.is_evm:
        return is_evm_address(address)
    return False


def resolve_chains(address: str, chain: str) -> List[str]:
    """Expand a requested chain tag into the chains to query.

    'all' means every EVM chain for a 20-byte address, Starknet otherwise.
    Raises UnsupportedChainError or InvalidAddressError.
    """

    if not is_supported_chain(chain):
        raise UnsupportedChainError(chain)
    if not is_valid_address_for_chain(address, chain):
        raise InvalidAddressError(address, chain)
    if chain != ALL_CHAINS:
        return [chain]
    if is_evm_address(address):
        return list(EVM_CHAINS)
    return ["starknet"]


__all__ = [
    "normalize_chain",
    "is_supported_chain",
    "is_evm_address",
    "is_valid_starknet_address",
    "is_valid_address_for_chain",
    "resolve_chains",
]

import pytest

from wallet_advisor.errors import InvalidAddressError, UnsupportedChainError
from wallet_advisor.services.address import (
    is_supported_chain,
    is_valid_address_for_chain,
    normalize_chain,
    resolve_chains,
)
from wallet_advisor.services.chains import EVM_CHAINS, chain_label

EVM_ADDRESS = "0x1234567890abcdef1234567890ABCDEF12345678"
STARKNET_ADDRESS = "0x04a3f2d9d57f25de1ba3b2c2f5a1d1f6e6b4a0c7e1d3b9f8a2c4e6d8f0a1b2c3"


def test_normalize_chain_defaults_to_ethereum():
    assert normalize_chain(None) == "ethereum"
    assert normalize_chain("") == "ethereum"
    assert normalize_chain(" Ethereum ") == "ethereum"


def test_normalize_chain_aliases():
    assert normalize_chain("eth") == "ethereum"
    assert normalize_chain("ARB") == "arbitrum"
    assert normalize_chain("strk") == "starknet"
    assert normalize_chain("hl") == "hyperliquid"
    assert normalize_chain("ALL") == "all"


def test_supported_chain_flags():
    for chain in ("ethereum", "base", "arbitrum", "starknet", "hyperliquid", "all"):
        assert is_supported_chain(chain) is True
    # Queried under "all" but not requestable on their own
    assert is_supported_chain("optimism") is False
    assert is_supported_chain("solana") is False


def test_address_validation_evm():
    assert is_valid_address_for_chain(EVM_ADDRESS, "ethereum") is True
    assert is_valid_address_for_chain(EVM_ADDRESS, "hyperliquid") is True
    assert is_valid_address_for_chain(EVM_ADDRESS[:-1], "base") is False
    assert is_valid_address_for_chain(STARKNET_ADDRESS, "arbitrum") is False


def test_address_validation_starknet():
    assert is_valid_address_for_chain(STARKNET_ADDRESS, "starknet") is True
    assert is_valid_address_for_chain("0x123", "starknet") is True
    assert is_valid_address_for_chain("0x0", "starknet") is False
    assert is_valid_address_for_chain("0x" + "f" * 65, "starknet") is False
    assert is_valid_address_for_chain("not-hex", "starknet") is False


def test_resolve_single_chain():
    assert resolve_chains(EVM_ADDRESS, "base") == ["base"]


def test_resolve_all_for_evm_address():
    chains = resolve_chains(EVM_ADDRESS, "all")
    assert chains == EVM_CHAINS
    assert "starknet" not in chains
    assert chains[:3] == ["ethereum", "arbitrum", "base"]


def test_resolve_all_for_starknet_address():
    assert resolve_chains(STARKNET_ADDRESS, "all") == ["starknet"]


def test_resolve_rejects_unknown_chain():
    with pytest.raises(UnsupportedChainError):
        resolve_chains(EVM_ADDRESS, "solana")


def test_resolve_rejects_mismatched_address():
    with pytest.raises(InvalidAddressError) as exc_info:
        resolve_chains("vitalik.eth", "ethereum")
    assert exc_info.value.chain == "ethereum"


def test_chain_label():
    assert chain_label("base", ["base"]) == "base"
    assert chain_label("all", ["ethereum", "base"]) == "all (ethereum, base)"
    assert chain_label("all", []) == "all"

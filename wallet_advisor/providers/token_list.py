"""
Static token lists for chains without an indexer, plus spam heuristics
"""

from typing import Dict, List

# Balances are read one contract at a time on these chains
RPC_TOKEN_LISTS: Dict[str, List[dict]] = {
    "hyperliquid": [
        {"address": "0x5e105266db42f78fa814322bce7f388b4c2e61eb", "symbol": "hbUSDT", "name": "Hyperbeat USDT", "decimals": 18},
        {"address": "0xb8ce59fc3717ada4c02eadf9682a9e934f625ebb", "symbol": "USDC", "name": "USD Coin", "decimals": 6},
        {"address": "0x4200000000000000000000000000000000000006", "symbol": "WETH", "name": "Wrapped ETH", "decimals": 18},
    ],
}

STARKNET_TOKENS: List[dict] = [
    {"address": "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7", "symbol": "ETH", "name": "Ether", "decimals": 18},
    {"address": "0x04718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d", "symbol": "STRK", "name": "Starknet Token", "decimals": 18},
    {"address": "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8", "symbol": "USDC", "name": "USD Coin", "decimals": 6},
    {"address": "0x068f5c6a61780768455de69077e07e89787839bf8166decfbf92b645209c0fb8", "symbol": "USDT", "name": "Tether USD", "decimals": 6},
    {"address": "0x00da114221cb83fa859dbdb4c44beeaa0bb37c7537ad5ae66fe5e0efd20e6eb3", "symbol": "DAI", "name": "Dai Stablecoin", "decimals": 18},
    {"address": "0x03fe2b97c1fd336e750087d68b9b867997fd64a2661ff3ca5a7c771641e8e7ac", "symbol": "WBTC", "name": "Wrapped BTC", "decimals": 8},
]

# Token types that are not fungible balances
NFT_TOKEN_TYPES = {"ERC-721", "ERC-1155", "ERC-404"}

_SPAM_SYMBOL_PATTERNS = ("claim", "visit", "t.me")
_SPAM_NAME_PATTERNS = ("claim", "visit", "airdrop", "t.me", "reward")


def is_likely_spam_token(symbol: str, name: str) -> bool:
    """
    Detect airdropped scam tokens by the bait text they carry in symbol or name
    """
    symbol_lower = (symbol or "").lower()
    name_lower = (name or "").lower()

    if any(pattern in symbol_lower for pattern in _SPAM_SYMBOL_PATTERNS):
        return True
    if any(pattern in name_lower for pattern in _SPAM_NAME_PATTERNS):
        return True

    # Very long names are often spam
    if len(name or "") > 50:
        return True

    return False

"""Error taxonomy surfaced by the analysis pipeline and its collaborators."""

from typing import Dict, Optional


class WalletAdvisorError(Exception):
    """Base exception for wallet analysis failures"""
    pass


class UnsupportedChainError(WalletAdvisorError):
    """Raised when a chain tag has no balance source"""

    def __init__(self, chain: str):
        self.chain = chain
        super().__init__(f"Unsupported chain: {chain}")


class InvalidAddressError(WalletAdvisorError):
    """Raised when an address cannot belong to the selected chain"""

    def __init__(self, address: str, chain: str):
        self.address = address
        self.chain = chain
        super().__init__(f"Invalid wallet address format for {chain}")


class PortfolioUnavailableError(WalletAdvisorError):
    """Raised when no queried chain returned balances"""

    def __init__(self, failures: Optional[Dict[str, str]] = None):
        self.failures = dict(failures or {})
        reasons = "; ".join(f"{chain}: {reason}" for chain, reason in self.failures.items())
        message = "No balances could be fetched"
        if reasons:
            message = f"{message} ({reasons})"
        super().__init__(message)


class ProviderError(Exception):
    """Base exception for data provider errors"""
    pass


class BalanceSourceError(ProviderError):
    """Raised when a balance source returns an unusable response"""
    pass


class PriceSourceError(ProviderError):
    """Raised when the price source returns an unusable response"""
    pass

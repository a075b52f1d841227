"""Wallet exposure advisor: multi-chain holdings, risk tiers and rebalancing advice."""

__version__ = "1.0.0"

#!/usr/bin/env python3
"""Command line access to the wallet exposure advisor"""

import argparse
import asyncio
import json
from typing import List, Optional

from wallet_advisor.errors import WalletAdvisorError
from wallet_advisor.logging_config import setup_logging
from wallet_advisor.services.address import normalize_chain, resolve_chains
from wallet_advisor.services.balances import fetch_balances, format_balances_summary
from wallet_advisor.services.chains import ALL_CHAINS
from wallet_advisor.tools.portfolio import analyze_wallet
from wallet_advisor.types import AnalyzeWalletOutput


def print_analysis(output: AnalyzeWalletOutput) -> None:
    """Pretty print an analysis report"""
    print("\n📊 Wallet Exposure Report")
    print("=" * 50)
    print(f"Address: {output.address}")
    print(f"Chain: {output.chain}")
    print(f"Total Value: ${output.total_value_usd:,.2f} USD")
    print(f"Risk Level: {output.risk_level.value}")
    print(f"Stablecoins: {output.stablecoin_percentage:.1f}%  Volatile: {output.volatile_percentage:.1f}%")
    if output.concentration_risk:
        print("Concentration: single asset above 50%")

    if output.holdings:
        print("\nHoldings:")
        print("-" * 50)
        for i, holding in enumerate(output.holdings, 1):
            print(
                f"{i:2d}. {holding.symbol:<8} {holding.balance:>20} "
                f"${holding.value_usd:>12,.2f} {holding.percentage:5.1f}% {holding.category.value}"
            )

    print("\nAdvice:")
    print(output.advice)


async def cli_balances(address: str, chains: Optional[List[str]] = None) -> int:
    """Per-chain balance breakdown without analysis"""
    try:
        resolved: List[str] = []
        for chain in chains or [ALL_CHAINS]:
            for name in resolve_chains(address, normalize_chain(chain)):
                if name not in resolved:
                    resolved.append(name)
    except WalletAdvisorError as e:
        print(f"❌ Error: {e}")
        return 1
    print(f"🔍 Fetching balances for {address} on {', '.join(resolved)}...")

    outcomes = await fetch_balances(address, resolved)
    print(format_balances_summary([o.balances for o in outcomes if o.ok]))

    for outcome in outcomes:
        if not outcome.ok:
            print(f"⚠️  {outcome.chain}: {outcome.error}")
    return 0


async def cli_analyze(address: str, chain: str, as_json: bool = False) -> int:
    try:
        output = await analyze_wallet(address, chain)
    except WalletAdvisorError as e:
        print(f"❌ Error: {e}")
        return 1

    if as_json:
        print(json.dumps(output.model_dump(mode="json", by_alias=True), indent=2))
    else:
        print_analysis(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wallet Exposure Advisor CLI")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a wallet and print advice")
    analyze_parser.add_argument("address", help="Wallet address")
    analyze_parser.add_argument("chain", nargs="?", default="ethereum", help="Chain or 'all' (default: ethereum)")
    analyze_parser.add_argument("--json", action="store_true", help="Print the raw JSON report")

    balances_parser = subparsers.add_parser("balances", help="Print per-chain balances")
    balances_parser.add_argument("address", help="Wallet address")
    balances_parser.add_argument("chains", nargs="*", help="Chains to query, or 'all' (default: all)")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, json_logs=False)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "analyze":
        return await cli_analyze(args.address, args.chain, as_json=args.json)
    if args.command == "balances":
        return await cli_balances(args.address, args.chains)

    parser.print_help()
    return 1


def run() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()

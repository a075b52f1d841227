from typing import List, Optional
from pydantic import BaseModel, Field


class TokenBalance(BaseModel):
    address: str = Field(description="Token contract address (zero address for the native coin)")
    symbol: str = Field(description="Token symbol (e.g. ETH, USDC)")
    name: str = Field(default="", description="Full token name")
    decimals: int = Field(default=18, description="Token decimal places")
    balance: int = Field(description="Raw balance in base units")
    formatted_balance: str = Field(description="Exact human readable balance")
    usd_price: Optional[float] = Field(default=None, description="Price per token in USD when the source reports one")
    usd_value: Optional[float] = Field(default=None, description="Total value in USD when priced")
    logo_url: Optional[str] = Field(default=None, description="Token icon")


class WalletBalances(BaseModel):
    chain: str = Field(description="Chain identifier")
    chain_id: Optional[int] = Field(default=None, description="Numeric chain id for EVM chains")
    address: str = Field(description="Wallet address")
    native_balance: Optional[TokenBalance] = Field(default=None, description="Native coin balance, absent on Starknet")
    token_balances: List[TokenBalance] = Field(default_factory=list, description="Non-zero token balances")
    total_usd_value: Optional[float] = Field(default=None, description="Sum of priced balances")

    def all_balances(self) -> List[TokenBalance]:
        balances = [self.native_balance] if self.native_balance is not None else []
        return balances + list(self.token_balances)

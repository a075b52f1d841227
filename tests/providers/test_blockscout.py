from datetime import timedelta

import pytest

from wallet_advisor.config import Settings
from wallet_advisor.errors import BalanceSourceError
from wallet_advisor.providers import blockscout as bs

ADDRESS = "0x" + "12" * 20


class _DummyResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.elapsed = timedelta(milliseconds=12)

    def raise_for_status(self):
        return None

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _DummyClient:
    routes = {}
    requested = []

    def __init__(self, *_, **__):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, timeout=None):
        _DummyClient.requested.append(url)
        for suffix, response in _DummyClient.routes.items():
            if url.endswith(suffix):
                return response
        return _DummyResponse(None, status_code=404)


@pytest.fixture
def client(monkeypatch):
    _DummyClient.routes = {}
    _DummyClient.requested = []
    monkeypatch.setattr(bs.httpx, "AsyncClient", _DummyClient)
    return _DummyClient


def token_item(symbol, value, decimals="18", token_type="ERC-20", name=None, rate=None, address="0xtoken"):
    return {
        "value": value,
        "token": {
            "address_hash": address,
            "symbol": symbol,
            "name": name or symbol,
            "decimals": decimals,
            "type": token_type,
            "exchange_rate": rate,
        },
    }


@pytest.mark.asyncio
async def test_parses_native_and_fungible_tokens(client):
    client.routes = {
        f"/addresses/{ADDRESS}": _DummyResponse({"coin_balance": str(2 * 10**18), "exchange_rate": "3000.5"}),
        f"/addresses/{ADDRESS}/token-balances": _DummyResponse([
            token_item("USDC", "2500000", decimals="6", rate="1.0", address="0xA0b8"),
            token_item("LINK", str(3 * 10**18), rate=None),
            token_item("APE", "1", token_type="ERC-721"),
            token_item("FREE", "1000", name="Visit freetokens.xyz to claim"),
            token_item("ZERO", "0"),
        ]),
    }

    provider = bs.BlockscoutProvider(Settings())
    balances = await provider.get_wallet_balances(ADDRESS, "base")

    assert balances.chain == "base"
    assert balances.chain_id == 8453
    assert balances.native_balance.symbol == "ETH"
    assert balances.native_balance.formatted_balance == "2"
    assert balances.native_balance.usd_value == pytest.approx(6001.0)

    assert [t.symbol for t in balances.token_balances] == ["USDC", "LINK"]
    usdc = balances.token_balances[0]
    assert usdc.address == "0xA0b8"
    assert usdc.formatted_balance == "2.5"
    assert usdc.usd_value == pytest.approx(2.5)
    assert balances.token_balances[1].usd_price is None
    assert balances.total_usd_value == pytest.approx(6003.5)
    assert client.requested[0].startswith("https://base.blockscout.com/api/v2/addresses/")


@pytest.mark.asyncio
async def test_unknown_address_is_an_empty_wallet(client):
    provider = bs.BlockscoutProvider(Settings())

    balances = await provider.get_wallet_balances(ADDRESS, "ethereum")

    assert balances.token_balances == []
    assert balances.native_balance.balance == 0
    assert balances.total_usd_value is None


@pytest.mark.asyncio
async def test_polygon_native_symbol(client):
    client.routes = {f"/addresses/{ADDRESS}": _DummyResponse({"coin_balance": "5000000000000000000"})}

    balances = await bs.BlockscoutProvider(Settings()).get_wallet_balances(ADDRESS, "polygon")

    assert balances.native_balance.symbol == "POL"
    assert balances.native_balance.formatted_balance == "5"


@pytest.mark.asyncio
async def test_malformed_json_raises(client):
    client.routes = {f"/addresses/{ADDRESS}": _DummyResponse(ValueError("bad json"))}

    with pytest.raises(BalanceSourceError):
        await bs.BlockscoutProvider(Settings()).get_wallet_balances(ADDRESS, "arbitrum")


@pytest.mark.asyncio
async def test_unexpected_token_payload_raises(client):
    client.routes = {f"/addresses/{ADDRESS}/token-balances": _DummyResponse({"items": []})}

    with pytest.raises(BalanceSourceError):
        await bs.BlockscoutProvider(Settings()).get_wallet_balances(ADDRESS, "arbitrum")


def test_supports_only_configured_chains():
    provider = bs.BlockscoutProvider(Settings())
    assert provider.supports("gnosis") is True
    assert provider.supports("starknet") is False
    assert provider.supports("hyperliquid") is False


@pytest.mark.asyncio
async def test_non_finite_exchange_rates_are_ignored(client):
    client.routes = {
        f"/addresses/{ADDRESS}": _DummyResponse({"coin_balance": str(10**18), "exchange_rate": "NaN"}),
        f"/addresses/{ADDRESS}/token-balances": _DummyResponse([
            token_item("WEIRD", str(10**18), rate="Infinity"),
        ]),
    }

    balances = await bs.BlockscoutProvider(Settings()).get_wallet_balances(ADDRESS, "ethereum")

    assert balances.native_balance.usd_price is None
    weird = balances.token_balances[0]
    assert weird.usd_price is None
    assert weird.usd_value is None
    assert balances.total_usd_value is None

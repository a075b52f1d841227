import httpx
import pytest

from wallet_advisor.config import Settings
from wallet_advisor.errors import PriceSourceError
from wallet_advisor.providers import defillama


class _DummyResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


class _DummyClient:
    payload = {}
    urls = []
    error = None
    failing_key = None

    def __init__(self, *_, **__):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, timeout=None):
        _DummyClient.urls.append(url)
        if _DummyClient.error is not None:
            raise _DummyClient.error
        if _DummyClient.failing_key and _DummyClient.failing_key in url:
            raise httpx.ConnectError("boom")
        return _DummyResponse(_DummyClient.payload)


@pytest.fixture
def client(monkeypatch):
    _DummyClient.payload = {}
    _DummyClient.urls = []
    _DummyClient.error = None
    _DummyClient.failing_key = None
    monkeypatch.setattr(defillama.httpx, "AsyncClient", _DummyClient)
    return _DummyClient


@pytest.mark.asyncio
async def test_token_prices_keyed_by_chain_and_lowercased_address(client):
    client.payload = {
        "coins": {
            "ethereum:0xAbC": {"price": 2.5, "symbol": "ABC", "confidence": 0.9},
            "xdai:0xdef": {"price": 0.75, "symbol": "DEF"},
            "ethereum:0xnoprice": {"price": 0},
        }
    }

    prices = await defillama.DefiLlamaProvider(Settings()).get_token_prices(
        [("ethereum", "0xAbC"), ("gnosis", "0xdef"), ("ethereum", "0xnoprice"), ("solana", "x")]
    )

    assert prices == {
        ("ethereum", "0xabc"): {"price": 2.5, "symbol": "ABC", "confidence": 0.9},
        ("gnosis", "0xdef"): {"price": 0.75, "symbol": "DEF", "confidence": 0.99},
    }
    assert client.urls == [
        "https://coins.llama.fi/prices/current/ethereum:0xAbC,xdai:0xdef,ethereum:0xnoprice"
    ]


@pytest.mark.asyncio
async def test_large_requests_are_batched(client):
    tokens = [("base", f"0x{i:040x}") for i in range(defillama.MAX_COINS_PER_REQUEST + 1)]

    await defillama.DefiLlamaProvider(Settings()).get_token_prices(tokens)

    assert len(client.urls) == 2


@pytest.mark.asyncio
async def test_no_tokens_means_no_request(client):
    assert await defillama.DefiLlamaProvider(Settings()).get_token_prices([]) == {}
    assert client.urls == []


@pytest.mark.asyncio
async def test_eth_price(client):
    client.payload = {"coins": {"coingecko:ethereum": {"price": 3456.78}}}
    assert await defillama.DefiLlamaProvider(Settings()).get_eth_price() == 3456.78


@pytest.mark.asyncio
async def test_http_errors_become_price_source_errors(client):
    client.error = httpx.ConnectError("connection refused")

    with pytest.raises(PriceSourceError):
        await defillama.DefiLlamaProvider(Settings()).get_eth_price()


@pytest.mark.asyncio
async def test_failed_batch_keeps_prices_from_other_batches(client):
    tokens = [("ethereum", f"0x{i:x}") for i in range(60)]
    client.payload = {"coins": {f"ethereum:0x{i:x}": {"price": 1.5} for i in range(50)}}
    # 0x3b (index 59) only appears in the second batch
    client.failing_key = "ethereum:0x3b"

    prices = await defillama.DefiLlamaProvider(Settings()).get_token_prices(tokens)

    assert len(client.urls) == 2
    assert len(prices) == 50
    assert prices[("ethereum", "0x0")]["price"] == 1.5


@pytest.mark.asyncio
async def test_every_batch_failing_raises(client):
    client.error = httpx.ConnectError("connection refused")

    with pytest.raises(PriceSourceError):
        await defillama.DefiLlamaProvider(Settings()).get_token_prices([("base", "0xabc")])

from fastapi.testclient import TestClient

from wallet_advisor.config import settings
from wallet_advisor.core.portfolio.models import HoldingCategory, RiskLevel
from wallet_advisor.errors import InvalidAddressError, PortfolioUnavailableError
from wallet_advisor.main import app
from wallet_advisor.types import AnalyzeWalletOutput, PortfolioHolding

client = TestClient(app)

ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


def _sample_output(address, chain):
    return AnalyzeWalletOutput(
        address=address,
        chain=chain,
        total_value_usd=10000.0,
        holdings=[
            PortfolioHolding(
                symbol="ETH",
                balance="4",
                value_usd=8000.0,
                percentage=80.0,
                category=HoldingCategory.NATIVE,
                chains=["ethereum"],
            ),
            PortfolioHolding(
                symbol="USDC",
                balance="2000",
                value_usd=2000.0,
                percentage=20.0,
                category=HoldingCategory.STABLECOIN,
                chains=["ethereum"],
            ),
        ],
        risk_level=RiskLevel.HIGH,
        stablecoin_percentage=20.0,
        volatile_percentage=80.0,
        concentration_risk=True,
        advice="Add stablecoins.",
    )


def test_analyze_wallet_returns_camel_case_report(monkeypatch):
    captured = {}

    async def fake_analyze(address, chain):
        captured.update(address=address, chain=chain)
        return _sample_output(address, chain)

    monkeypatch.setattr("wallet_advisor.api.entrypoints.analyze_wallet", fake_analyze)

    resp = client.post(
        "/entrypoints/analyze-wallet/invoke",
        json={"input": {"address": f"  {ADDRESS} ", "chain": "base"}},
    )

    assert resp.status_code == 200
    assert captured == {"address": ADDRESS, "chain": "base"}

    output = resp.json()["output"]
    assert output["totalValueUsd"] == 10000.0
    assert output["riskLevel"] == "high"
    assert output["stablecoinPercentage"] == 20.0
    assert output["volatilePercentage"] == 80.0
    assert output["concentrationRisk"] is True
    assert output["advice"] == "Add stablecoins."
    assert output["holdings"][0] == {
        "symbol": "ETH",
        "balance": "4",
        "valueUsd": 8000.0,
        "percentage": 80.0,
        "category": "native",
    }


def test_analyze_wallet_defaults_to_ethereum(monkeypatch):
    async def fake_analyze(address, chain):
        return _sample_output(address, chain)

    monkeypatch.setattr("wallet_advisor.api.entrypoints.analyze_wallet", fake_analyze)

    resp = client.post("/entrypoints/analyze-wallet/invoke", json={"input": {"address": ADDRESS}})

    assert resp.status_code == 200
    assert resp.json()["output"]["chain"] == "ethereum"


def test_unknown_chain_rejected_by_schema():
    resp = client.post(
        "/entrypoints/analyze-wallet/invoke",
        json={"input": {"address": ADDRESS, "chain": "solana"}},
    )
    assert resp.status_code == 422


def test_blank_address_rejected_by_schema():
    resp = client.post("/entrypoints/analyze-wallet/invoke", json={"input": {"address": "   "}})
    assert resp.status_code == 422


def test_invalid_address_maps_to_400(monkeypatch):
    async def fake_analyze(address, chain):
        raise InvalidAddressError(address, chain)

    monkeypatch.setattr("wallet_advisor.api.entrypoints.analyze_wallet", fake_analyze)

    resp = client.post(
        "/entrypoints/analyze-wallet/invoke",
        json={"input": {"address": "0x1234", "chain": "ethereum"}},
    )

    assert resp.status_code == 400
    assert "Invalid wallet address" in resp.json()["detail"]


def test_balance_outage_maps_to_502(monkeypatch):
    async def fake_analyze(address, chain):
        raise PortfolioUnavailableError({"ethereum": "timed out after 20s"})

    monkeypatch.setattr("wallet_advisor.api.entrypoints.analyze_wallet", fake_analyze)

    resp = client.post("/entrypoints/analyze-wallet/invoke", json={"input": {"address": ADDRESS}})

    assert resp.status_code == 502
    assert "ethereum: timed out after 20s" in resp.json()["detail"]


def test_unexpected_error_maps_to_500(monkeypatch):
    async def fake_analyze(address, chain):
        raise RuntimeError("boom")

    monkeypatch.setattr("wallet_advisor.api.entrypoints.analyze_wallet", fake_analyze)

    resp = client.post("/entrypoints/analyze-wallet/invoke", json={"input": {"address": ADDRESS}})

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to analyze wallet: boom"


def test_health_entrypoint():
    resp = client.post("/entrypoints/health/invoke")

    assert resp.status_code == 200
    output = resp.json()["output"]
    assert output["status"] == "healthy"
    assert output["version"] == settings.agent_version
    assert output["timestamp"]


def test_manifest_lists_entrypoints():
    resp = client.get("/")

    assert resp.status_code == 200
    manifest = resp.json()
    assert manifest["name"] == settings.agent_name
    entrypoints = {e["key"]: e for e in manifest["entrypoints"]}
    assert entrypoints["analyze-wallet"]["price"] == settings.default_price
    assert entrypoints["analyze-wallet"]["network"] == settings.payments_network
    assert entrypoints["health"]["price"] is None


def test_request_id_header_is_returned():
    resp = client.post("/entrypoints/health/invoke", headers={"X-Request-ID": "req-123"})
    assert resp.headers.get("X-Request-ID") == "req-123"


def test_entrypoint_key_from_path():
    from wallet_advisor.middleware.logging_middleware import entrypoint_key

    assert entrypoint_key("/entrypoints/analyze-wallet/invoke") == "analyze-wallet"
    assert entrypoint_key("/healthz") is None
    assert entrypoint_key("/entrypoints/") is None


def test_healthz_reports_degraded_source(monkeypatch):
    class _Source:
        def __init__(self, status):
            self.status = status

        async def health_check(self):
            return {"status": self.status}

    monkeypatch.setattr(
        "wallet_advisor.api.health._data_sources",
        lambda: {"blockscout": _Source("healthy"), "defillama": _Source("error")},
    )

    resp = client.get("/healthz")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "degraded"
    assert body["available_providers"] == 1
    assert body["total_providers"] == 2
    assert set(body["llm"]) == {"openai", "anthropic"}

import httpx
import pytest

from wallet_advisor.config import settings
from wallet_advisor.providers.llm import (
    OpenAIProvider,
    canonical_provider_name,
    get_available_providers,
    get_llm_provider,
)
from wallet_advisor.providers.llm.base import (
    LLMMessage,
    LLMProviderAPIError,
    LLMProviderAuthError,
    LLMProviderRateLimitError,
)


def _provider_with(handler):
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o-mini", base_url="https://llm.example/v1")
    provider._client = httpx.AsyncClient(
        base_url=provider.base_url,
        transport=httpx.MockTransport(handler),
    )
    return provider


@pytest.mark.asyncio
async def test_openai_chat_completion():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = request.read().decode()
        return httpx.Response(
            200,
            json={
                "model": "gpt-4o-mini",
                "choices": [{"message": {"content": "Diversify."}, "finish_reason": "stop"}],
                "usage": {"total_tokens": 42},
            },
        )

    provider = _provider_with(handler)
    response = await provider.generate_response(
        [LLMMessage(role="system", content="advisor"), LLMMessage(role="user", content="wallet")],
        max_tokens=100,
        temperature=0.4,
    )
    await provider.close()

    assert response.content == "Diversify."
    assert response.tokens_used == 42
    assert seen["path"] == "/v1/chat/completions"
    assert '"max_tokens":100' in seen["body"].replace(" ", "")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error",
    [(401, LLMProviderAuthError), (429, LLMProviderRateLimitError), (500, LLMProviderAPIError)],
)
async def test_openai_error_mapping(status, error):
    provider = _provider_with(lambda request: httpx.Response(status, text="nope"))

    with pytest.raises(error):
        await provider.generate_response([LLMMessage(role="user", content="hi")])
    await provider.close()


def test_provider_aliases():
    assert canonical_provider_name("GPT") == "openai"
    assert canonical_provider_name("claude") == "anthropic"


def test_get_llm_provider_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")

    with pytest.raises(ValueError):
        get_llm_provider("openai")


def test_available_providers_report_key_status(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
    monkeypatch.setattr(settings, "anthropic_api_key", "")

    providers = get_available_providers()

    assert providers["openai"]["status"] == "available"
    assert providers["anthropic"]["status"] == "unconfigured"
    assert providers["openai"]["default_model"] == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_openai_refusal_yields_no_content():
    provider = _provider_with(
        lambda request: httpx.Response(
            200,
            json={"choices": [{"message": {"content": None, "refusal": "I can't help with that."}}]},
        )
    )

    response = await provider.generate_response([LLMMessage(role="user", content="wallet")])
    await provider.close()

    assert response.content is None


@pytest.mark.asyncio
async def test_openai_content_parts_are_joined():
    provider = _provider_with(
        lambda request: httpx.Response(
            200,
            json={"choices": [{"message": {"content": [{"type": "text", "text": "Hold "}, {"type": "text", "text": "USDC."}]}}]},
        )
    )

    response = await provider.generate_response([LLMMessage(role="user", content="wallet")])
    await provider.close()

    assert response.content == "Hold USDC."


@pytest.mark.asyncio
async def test_anthropic_moves_system_prompt_out_of_messages():
    from types import SimpleNamespace

    from wallet_advisor.providers.llm import AnthropicProvider

    captured = {}

    class _Messages:
        async def create(self, **params):
            captured.update(params)
            return SimpleNamespace(
                content=[SimpleNamespace(text="Trim ETH to 60%.")],
                usage=SimpleNamespace(output_tokens=7),
                stop_reason="end_turn",
            )

    provider = AnthropicProvider(api_key="sk-ant-test", model="claude-sonnet-4-20250514")
    provider.client = SimpleNamespace(messages=_Messages())

    response = await provider.generate_response(
        [LLMMessage(role="system", content="advisor"), LLMMessage(role="user", content="wallet")],
        max_tokens=300,
    )

    assert response.content == "Trim ETH to 60%."
    assert response.tokens_used == 7
    assert captured["system"] == "advisor"
    assert captured["messages"] == [{"role": "user", "content": "wallet"}]
    assert captured["max_tokens"] == 300

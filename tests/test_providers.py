import json

import httpx
import pytest

from app.modules.generation.config import GenerationConfig
from app.modules.generation.errors import ConfigurationError, FailureKind, ProviderError
from app.modules.generation.providers import (
    GeminiClient,
    HuggingFaceClient,
    extract_gemini_text,
    text_payload,
)


def _http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_hf_call_posts_with_bearer_token(config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"generated_text": "hello"}])

    async with _http(handler) as http:
        out = await HuggingFaceClient(config, http).call(
            "google/flan-t5-large", text_payload("hi", max_new_tokens=10, temperature=0.0)
        )

    assert out == [{"generated_text": "hello"}]
    assert seen["url"] == "https://api-inference.huggingface.co/models/google/flan-t5-large"
    assert seen["auth"] == "Bearer hf-test-key"
    assert seen["body"] == {"inputs": "hi", "parameters": {"max_new_tokens": 10, "temperature": 0.0}}


async def test_hf_non_json_body_is_returned_as_text(config):
    async with _http(lambda r: httpx.Response(200, text="plain words")) as http:
        assert await HuggingFaceClient(config, http).call("m", {"inputs": "x"}) == "plain words"


async def test_hf_error_carries_status_model_and_body(config):
    async with _http(lambda r: httpx.Response(404, text="Model not found")) as http:
        with pytest.raises(ProviderError) as info:
            await HuggingFaceClient(config, http).call("org/missing", {"inputs": "x"})

    err = info.value
    assert err.status == 404
    assert err.kind is FailureKind.NOT_FOUND
    assert err.model == "org/missing"
    assert err.body == "Model not found"
    assert "org/missing" in str(err)


async def test_hf_transport_failure_has_no_status(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _http(handler) as http:
        with pytest.raises(ProviderError) as info:
            await HuggingFaceClient(config, http).call("m", {"inputs": "x"})
    assert info.value.status is None
    assert info.value.kind is FailureKind.TRANSPORT


async def test_missing_credentials_fail_before_any_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    config = GenerationConfig()
    async with _http(handler) as http:
        with pytest.raises(ConfigurationError):
            await HuggingFaceClient(config, http).call("m", {"inputs": "x"})
        with pytest.raises(ConfigurationError):
            await GeminiClient(config, http).generate_text("hi")
    assert calls == []


async def test_gemini_generate_text_puts_key_in_query(config_with_gemini):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.url.params.get("key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": [{"content": "answer text"}]})

    async with _http(handler) as http:
        out = await GeminiClient(config_with_gemini, http).generate_text("prompt", max_output_tokens=50)

    assert out == "answer text"
    assert seen["path"] == "/v1beta2/models/gemini-1.5-flash:generateText"
    assert seen["key"] == "gm-test-key"
    assert seen["body"]["prompt"] == {"text": "prompt"}
    assert seen["body"]["maxOutputTokens"] == 50


async def test_gemini_auth_failure(config_with_gemini):
    async with _http(lambda r: httpx.Response(403, text="denied")) as http:
        with pytest.raises(ProviderError) as info:
            await GeminiClient(config_with_gemini, http).generate_text("prompt")
    assert info.value.kind is FailureKind.AUTH


def test_extract_gemini_text_fallbacks():
    assert extract_gemini_text({"output": [{"content": "legacy"}]}) == "legacy"
    assert extract_gemini_text({"candidates": []}) == '{"candidates":[]}'


def test_extract_gemini_text_serializes_structured_content():
    parts = {"candidates": [{"content": {"parts": [{"text": "hi"}]}}]}
    assert extract_gemini_text(parts) == '{"parts":[{"text":"hi"}]}'
    assert extract_gemini_text({"output": [{"content": ["a", "b"]}]}) == '["a","b"]'

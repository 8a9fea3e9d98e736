import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from openai import APIConnectionError
from pydantic import SecretStr

from docwarden.llm.base import StreamChunk
from docwarden.llm.openai import GroqModel, OpenAIModel


@pytest.fixture
def mock_openai_client():
    client = AsyncMock()
    return client


def _stream_of(*chunks):
    async def async_iter(self):
        for chunk in chunks:
            yield chunk

    mock_stream = AsyncMock()
    mock_stream.__aiter__ = async_iter
    return mock_stream


def _content_chunk(content, finish_reason=None):
    chunk = MagicMock()
    chunk.usage = None
    chunk.choices = [
        MagicMock(delta=MagicMock(content=content), finish_reason=finish_reason)
    ]
    return chunk


def _make_model(client) -> OpenAIModel:
    model = OpenAIModel(
        id="gpt-4o-mini",
        name="gpt-4o-mini",
        api_key="test-key",
        temperature=0.7,
        max_tokens=100,
    )
    model.client = client
    return model


@pytest.mark.asyncio
async def test_openai_model_arun_stream_basic(mock_openai_client):
    model = _make_model(mock_openai_client)
    mock_openai_client.chat.completions.create = AsyncMock(
        return_value=_stream_of(_content_chunk("Hello"))
    )

    messages = [{"role": "user", "content": "Hello"}]
    chunks = []
    async for chunk in model.arun_stream(messages):
        chunks.append(chunk)

    assert len(chunks) == 1
    assert chunks[0].content == "Hello"
    mock_openai_client.chat.completions.create.assert_called_once()
    params = mock_openai_client.chat.completions.create.call_args.kwargs
    assert params["model"] == "gpt-4o-mini"
    assert params["stream"] is True
    assert params["max_tokens"] == 100


@pytest.mark.asyncio
async def test_openai_model_arun_stream_with_usage(mock_openai_client):
    model = _make_model(mock_openai_client)

    from types import SimpleNamespace

    usage_chunk = MagicMock()
    usage_chunk.usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5)
    usage_chunk.choices = []

    mock_openai_client.chat.completions.create = AsyncMock(
        return_value=_stream_of(_content_chunk("Hi", finish_reason="stop"), usage_chunk)
    )

    chunks = [c async for c in model.arun_stream([{"role": "user", "content": "x"}])]

    assert chunks[0].content == "Hi"
    assert chunks[0].finish_reason == "stop"
    assert chunks[1].usage == {"input_tokens": 10, "output_tokens": 5}


@pytest.mark.asyncio
async def test_openai_model_acomplete_joins_content(mock_openai_client):
    model = _make_model(mock_openai_client)
    mock_openai_client.chat.completions.create = AsyncMock(
        return_value=_stream_of(_content_chunk("Hello, "), _content_chunk("world"))
    )

    text = await model.acomplete([{"role": "user", "content": "x"}])

    assert text == "Hello, world"


@pytest.mark.asyncio
async def test_openai_model_non_retryable_error_raised_once(mock_openai_client):
    model = _make_model(mock_openai_client)
    mock_openai_client.chat.completions.create = AsyncMock(
        side_effect=ValueError("bad request")
    )

    with pytest.raises(ValueError):
        async for _ in model.arun_stream([{"role": "user", "content": "x"}]):
            pass

    assert mock_openai_client.chat.completions.create.call_count == 1


@pytest.mark.asyncio
async def test_openai_model_retries_connection_errors(mock_openai_client):
    model = _make_model(mock_openai_client)
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    mock_openai_client.chat.completions.create = AsyncMock(
        side_effect=[
            APIConnectionError(request=request),
            _stream_of(_content_chunk("recovered")),
        ]
    )

    text = await model.acomplete([{"role": "user", "content": "x"}])

    assert text == "recovered"
    assert mock_openai_client.chat.completions.create.call_count == 2


def test_model_rejects_invalid_temperature():
    with pytest.raises(ValueError):
        OpenAIModel(id="m", name="m", api_key="test-key", temperature=3.0)


@patch("docwarden.llm.openai.settings")
def test_groq_model_defaults_from_settings(mock_settings):
    mock_settings.groq_model_name = "llama3-8b-8192"
    mock_settings.groq_api_key = SecretStr("gsk-test")
    mock_settings.groq_base_url = "https://api.groq.com/openai/v1"
    mock_settings.groq_temperature = 0.7
    mock_settings.groq_max_tokens = 1000

    model = GroqModel()

    assert model.id == "llama3-8b-8192"
    assert model.provider == "groq"
    assert model.api_key == "gsk-test"
    assert model.base_url == "https://api.groq.com/openai/v1"
    assert model.max_tokens == 1000


def test_stream_chunk_defaults():
    chunk = StreamChunk()
    assert chunk.content is None
    assert chunk.usage is None

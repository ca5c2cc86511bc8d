"""Unit tests for the OpenAI provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import OpenAIError

from xiq.exceptions import ConfigurationError, LLMProviderError
from xiq.llm.openai_provider import OpenAIProvider
from xiq.models.llm import ChatMessage, LLMRequest


@pytest.fixture
def request_model():
    return LLMRequest(
        model="gpt-5-mini",
        messages=[
            ChatMessage(role="system", content="sys"),
            ChatMessage(role="user", content="hi"),
        ],
    )


@pytest.fixture
def mock_client():
    client = MagicMock()
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = '  {"iq": 110}\n'
    response.usage.prompt_tokens = 30
    response.usage.completion_tokens = 8
    response.model = "gpt-5-mini-2025"
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    def test_should_return_provider_name(self):
        """Test provider name."""
        assert OpenAIProvider(api_key="k").get_name() == "openai"

    @pytest.mark.asyncio
    async def test_should_complete_request(self, request_model, mock_client):
        """Test successful completion."""
        with patch("xiq.llm.openai_provider.AsyncOpenAI", return_value=mock_client):
            response = await OpenAIProvider(api_key="k").complete(request_model)

        assert response.content == '{"iq": 110}'
        assert response.total_tokens == 38
        assert response.model == "gpt-5-mini-2025"
        mock_client.chat.completions.create.assert_awaited_once_with(
            model="gpt-5-mini",
            messages=[
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "hi"},
            ],
        )

    @pytest.mark.asyncio
    async def test_should_reuse_client(self, request_model, mock_client):
        """Test client is created once."""
        with patch(
            "xiq.llm.openai_provider.AsyncOpenAI", return_value=mock_client
        ) as factory:
            provider = OpenAIProvider(api_key="k")
            await provider.complete(request_model)
            await provider.complete(request_model)

        factory.assert_called_once_with(api_key="k")

    @pytest.mark.asyncio
    async def test_should_wrap_api_errors(self, request_model, mock_client):
        """Test OpenAI errors become LLMProviderError."""
        mock_client.chat.completions.create.side_effect = OpenAIError("boom")

        with patch("xiq.llm.openai_provider.AsyncOpenAI", return_value=mock_client):
            with pytest.raises(LLMProviderError, match="OpenAI API call failed"):
                await OpenAIProvider(api_key="k").complete(request_model)

    @pytest.mark.asyncio
    async def test_should_require_api_key(self, request_model):
        """Test missing key."""
        with pytest.raises(ConfigurationError):
            await OpenAIProvider(api_key="").complete(request_model)

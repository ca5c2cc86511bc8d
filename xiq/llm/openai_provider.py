"""
OpenAI LLM provider implementation.

Sandi Metz Principles:
- Single Responsibility: OpenAI API interaction
- Small methods: Each method < 10 lines
- Dependency Injection: API key injected
"""

from openai import AsyncOpenAI, OpenAIError

from xiq.exceptions import ConfigurationError, LLMProviderError
from xiq.llm.provider import BaseLLMProvider
from xiq.models.llm import LLMRequest, LLMResponse
from xiq.utils.logger import get_logger, log_llm_call

logger = get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI implementation of LLM provider.

    The client is created lazily and reused across requests.
    """

    def __init__(self, api_key: str):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
        """
        self._api_key = api_key
        self._client: AsyncOpenAI | None = None

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using OpenAI.

        Args:
            request: LLM request

        Returns:
            LLM response

        Raises:
            LLMProviderError: If API call fails
        """
        try:
            return await self._make_api_call(request)
        except OpenAIError as e:
            error_msg = self._build_error_message(e, "OpenAI API call failed")
            logger.error("OpenAI error", error=str(e))
            raise LLMProviderError(error_msg) from e

    async def _make_api_call(self, request: LLMRequest) -> LLMResponse:
        """
        Make OpenAI API call.

        Args:
            request: LLM request

        Returns:
            LLM response
        """
        client = self._get_client()

        response = await client.chat.completions.create(
            model=request.model,
            messages=[message.model_dump() for message in request.messages],
        )

        content = response.choices[0].message.content if response.choices else None
        llm_response = LLMResponse(
            content=(content or "").strip(),
            prompt_tokens=response.usage.prompt_tokens if response.usage else 0,
            completion_tokens=(
                response.usage.completion_tokens if response.usage else 0
            ),
            model=response.model or request.model,
        )

        log_llm_call(
            provider="openai",
            model=llm_response.model,
            tokens=llm_response.total_tokens,
        )

        return llm_response

    def get_name(self) -> str:
        return "openai"

    def _get_client(self) -> AsyncOpenAI:
        """
        Get or create OpenAI client.

        Returns:
            OpenAI async client

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not self._api_key:
            raise ConfigurationError(
                "Missing OpenAI API key. Set OPENAI_API_KEY in your environment."
            )
        if not self._client:
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

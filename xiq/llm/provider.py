"""
LLM provider base class and interface.

Sandi Metz Principles:
- Single Responsibility: Provider abstraction
- Interface Segregation: Minimal provider interface
- Dependency Inversion: Depend on abstraction, not concrete classes
"""

from abc import ABC, abstractmethod

from xiq.models.llm import LLMRequest, LLMResponse


class BaseLLMProvider(ABC):
    """
    Chat-completion backend used by the score estimator.

    Implementations turn transport failures into LLMProviderError.
    """

    @abstractmethod
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion for a chat request.

        Args:
            request: LLM request

        Returns:
            LLM response

        Raises:
            LLMProviderError: If completion fails
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """
        Get provider name.

        Returns:
            Provider name (e.g., "openai")
        """
        pass

    def _build_error_message(self, error: Exception, context: str) -> str:
        """
        Build error message with context.

        Args:
            error: The exception that occurred
            context: Context description

        Returns:
            Formatted error message
        """
        return f"{context}: {type(error).__name__} - {str(error)}"

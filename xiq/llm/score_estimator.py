"""
Score estimation from a single post.

Sandi Metz Principles:
- Single Responsibility: Prompt the model and parse its answer
- Dependency Injection: Provider injected
"""

from typing import Tuple

from xiq.llm.provider import BaseLLMProvider
from xiq.llm.score_parser import ScoreParser
from xiq.models.llm import ChatMessage, LLMRequest, LLMResponse
from xiq.models.score import SCORE_MAX, SCORE_MIN, ParsedScore
from xiq.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an intentionally cheeky but harmless IQ estimator. "
    "Always reply with only compact JSON."
)


def build_user_prompt(post_text: str) -> str:
    """
    Build the user prompt for a post.

    Args:
        post_text: Post text (may include emojis/URLs)

    Returns:
        Prompt text
    """
    return (
        "Given this user's latest post, return ONLY a JSON object with two fields:\n"
        f'{{"iq": <integer {SCORE_MIN}-{SCORE_MAX}>, '
        '"explanation": "a single short sentence of playful justification"}.\n'
        "Constraints:\n"
        f'- "iq" must be an integer between {SCORE_MIN} and {SCORE_MAX} inclusive.\n'
        "- Keep explanation under 120 characters.\n"
        "Latest post text (may include emojis/URLs):\n"
        f'"""{post_text}"""'
    )


class ScoreEstimator:
    """Derives a bounded score from post text with a generative model."""

    def __init__(self, provider: BaseLLMProvider, model: str):
        """
        Initialize estimator.

        Args:
            provider: LLM provider
            model: Model name
        """
        self._provider = provider
        self._model = model

    async def estimate(self, post_text: str) -> Tuple[ParsedScore, LLMResponse]:
        """
        Estimate score for post text.

        Args:
            post_text: Post text

        Returns:
            Parsed score and the raw model response

        Raises:
            LLMProviderError: If the model call fails
            DerivationError: If no score can be recovered
        """
        request = LLMRequest(
            model=self._model,
            messages=[
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=build_user_prompt(post_text)),
            ],
        )
        response = await self._provider.complete(request)
        logger.debug("Score model output", text=response.content[:200])

        parsed = ScoreParser.parse(response.content)
        if parsed.from_fallback:
            logger.info("Score recovered by numeric fallback", score=parsed.score)
        return parsed, response

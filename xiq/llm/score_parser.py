"""
Score parser for model output.

Sandi Metz Principles:
- Single Responsibility: Turn raw model text into a bounded score
- Small methods: Each method < 10 lines
- Pure functions: No side effects
"""

import json
import math
import re
from typing import Any, Optional

from xiq.exceptions import DerivationError
from xiq.models.score import SCORE_MAX, SCORE_MIN, ParsedScore
from xiq.utils.handles import clamp

NUMBER_PATTERN = re.compile(r"\b(\d{2,3})\b")


class ScoreParser:
    """
    Parser for score model output.

    Strict JSON first, then the first two or three digit number in the
    raw text. Every recovered score is clamped.
    """

    @staticmethod
    def parse(raw_text: str) -> ParsedScore:
        """
        Parse raw model output.

        Args:
            raw_text: Model output

        Returns:
            Clamped score with optional explanation

        Raises:
            DerivationError: If no integer can be recovered
        """
        text = raw_text.strip()
        payload = ScoreParser._load_json(text)

        if payload is not None:
            score = ScoreParser._coerce(payload.get("iq"))
            explanation = payload.get("explanation")
            if score is not None:
                return ParsedScore(
                    score=score,
                    explanation=explanation if isinstance(explanation, str) else None,
                )
            # Valid JSON without a usable score is treated like a parse failure.

        match = NUMBER_PATTERN.search(text)
        if match:
            return ParsedScore(score=ScoreParser._clamp(int(match.group(1))), from_fallback=True)

        raise DerivationError("Failed to extract IQ from model output")

    @staticmethod
    def _load_json(text: str) -> Optional[dict]:
        try:
            payload = json.loads(text)
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    @staticmethod
    def _coerce(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return ScoreParser._clamp(round(number))

    @staticmethod
    def _clamp(value: int) -> int:
        return clamp(value, SCORE_MIN, SCORE_MAX)

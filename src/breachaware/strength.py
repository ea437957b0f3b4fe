"""
Strength evaluator contract and the zxcvbn adapter.

The heuristic itself lives in the zxcvbn library; this module only
adapts its result into a StrengthVerdict.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import inspect
import logging
from typing import Any, Awaitable, Iterable, Mapping, Protocol

from zxcvbn import zxcvbn

from breachaware.errors import StrengthEvaluationError
from breachaware.models import StrengthVerdict

logger = logging.getLogger(__name__)

# zxcvbn refuses passwords longer than this
ZXCVBN_MAX_LENGTH = 72


class StrengthEvaluator(Protocol):
    """Anything that scores a password the way zxcvbn does.

    Returns ``{"score": int, "feedback": {"warning": str | None,
    "suggestions": list[str]}}`` or an awaitable of that mapping.
    """

    def __call__(self, password: str) -> Mapping[str, Any] | Awaitable[Mapping[str, Any]]:
        ...


class ZxcvbnEvaluator:
    """Strength evaluator backed by the zxcvbn library."""

    def __init__(self, user_inputs: Iterable[str] = ()):
        """Initialize evaluator.

        Args:
            user_inputs: Site or user specific words to penalize
                (e.g. the username or the site name)
        """
        self.user_inputs = list(user_inputs)

    def __call__(self, password: str) -> Mapping[str, Any]:
        return zxcvbn(password[:ZXCVBN_MAX_LENGTH], user_inputs=self.user_inputs)


async def evaluate_strength(evaluator: StrengthEvaluator, password: str) -> StrengthVerdict:
    """Run an evaluator and convert its result.

    Raises:
        StrengthEvaluationError: if the evaluator raises or returns
            something that is not a valid strength result.
    """
    try:
        result = evaluator(password)
        if inspect.isawaitable(result):
            result = await result
        return StrengthVerdict.from_result(result)
    except StrengthEvaluationError:
        raise
    except Exception as e:
        logger.warning(f"Strength evaluator raised {type(e).__name__}")
        # External code: the exception text is not trusted to be password-free
        raise StrengthEvaluationError(f"Strength evaluation failed ({type(e).__name__})") from e

"""
BreachAware password check pipeline.

Scores password strength locally with zxcvbn and checks breach exposure
against Pwned Passwords using k-anonymity, reconciling both into one
generation-fenced state.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "1.0.0"

from breachaware.errors import (
    BreachAwareError,
    HashingError,
    MalformedResponseError,
    RemoteLookupError,
    StrengthEvaluationError,
)
from breachaware.models import (
    BreachRecord,
    BreachStatus,
    BreachVerdict,
    Phase,
    PipelineState,
    PrefixSuffixPair,
    RiskLevel,
    StrengthVerdict,
)
from breachaware.config import CheckerConfig
from breachaware.client import PwnedPasswordsClient, check_password_sync
from breachaware.coordinator import VerdictCoordinator

__all__ = [
    "__version__",
    "BreachAwareError",
    "HashingError",
    "MalformedResponseError",
    "RemoteLookupError",
    "StrengthEvaluationError",
    "BreachRecord",
    "BreachStatus",
    "BreachVerdict",
    "Phase",
    "PipelineState",
    "PrefixSuffixPair",
    "RiskLevel",
    "StrengthVerdict",
    "CheckerConfig",
    "PwnedPasswordsClient",
    "check_password_sync",
    "VerdictCoordinator",
]

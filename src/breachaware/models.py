"""
Data models for the password check pipeline.

None of these types ever expose the candidate password or the private
part of its digest through repr() or to_dict().

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class RiskLevel(str, Enum):
    """Risk level based on password exposure."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BreachStatus(str, Enum):
    """Outcome of the breach half of a generation."""

    UNKNOWN = "unknown"
    CLEAN = "clean"
    BREACHED = "breached"
    LOOKUP_FAILED = "lookup_failed"


class Phase(str, Enum):
    """Coordinator phase for the current generation."""

    IDLE = "idle"
    EVALUATING = "evaluating"
    RESOLVED = "resolved"
    RESOLVED_WITH_LOOKUP_ERROR = "resolved_with_lookup_error"


@dataclass(frozen=True)
class PrefixSuffixPair:
    """SHA-1 digest split for the k-anonymity range query.

    Only ``prefix`` is ever sent to the remote service.
    """

    prefix: str
    suffix: str = field(repr=False)

    @property
    def digest(self) -> str:
        """Full 40-character digest."""
        return self.prefix + self.suffix


@dataclass(frozen=True)
class BreachRecord:
    """One SUFFIX:COUNT line of a range response."""

    suffix: str
    count: int


@dataclass(frozen=True)
class BreachVerdict:
    """Result of checking a password against Pwned Passwords."""

    status: BreachStatus = BreachStatus.UNKNOWN
    occurrences: int = 0
    error: str | None = None

    @classmethod
    def unknown(cls) -> "BreachVerdict":
        return cls()

    @classmethod
    def clean(cls) -> "BreachVerdict":
        return cls(status=BreachStatus.CLEAN)

    @classmethod
    def breached(cls, occurrences: int) -> "BreachVerdict":
        return cls(status=BreachStatus.BREACHED, occurrences=occurrences)

    @classmethod
    def failed(cls, error: str) -> "BreachVerdict":
        return cls(status=BreachStatus.LOOKUP_FAILED, error=error)

    @property
    def is_pwned(self) -> bool:
        """Check if password was found in breaches."""
        return self.status == BreachStatus.BREACHED

    @property
    def is_known(self) -> bool:
        """True once a lookup has definitively answered clean or breached."""
        return self.status in (BreachStatus.CLEAN, BreachStatus.BREACHED)

    @property
    def risk_level(self) -> RiskLevel | None:
        """Determine risk level based on occurrences.

        None while the status is unknown or the lookup failed, so an
        unanswered check can never read as safe.
        """
        if not self.is_known:
            return None
        if self.occurrences == 0:
            return RiskLevel.SAFE
        elif self.occurrences < 10:
            return RiskLevel.LOW
        elif self.occurrences < 100:
            return RiskLevel.MEDIUM
        elif self.occurrences < 10000:
            return RiskLevel.HIGH
        else:
            return RiskLevel.CRITICAL

    @property
    def risk_description(self) -> str:
        """Get human-readable risk description."""
        if self.status == BreachStatus.LOOKUP_FAILED:
            return "Breach status unknown: the breach database could not be checked."
        if self.status == BreachStatus.UNKNOWN:
            return "Breach check has not completed yet."
        descriptions = {
            RiskLevel.SAFE: "This password has not been found in any known data breaches.",
            RiskLevel.LOW: f"This password has been seen {self.occurrences} times in data breaches. Consider changing it.",
            RiskLevel.MEDIUM: f"This password has been seen {self.occurrences} times. You should change it.",
            RiskLevel.HIGH: f"This password has been seen {self.occurrences:,} times! Change it immediately.",
            RiskLevel.CRITICAL: f"This password has been seen {self.occurrences:,} times! It's extremely common and must be changed.",
        }
        return descriptions[self.risk_level]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        risk = self.risk_level
        return {
            "status": self.status.value,
            "is_pwned": self.is_pwned,
            "occurrences": self.occurrences,
            "risk_level": risk.value if risk else None,
            "risk_description": self.risk_description,
            "error": self.error,
        }


STRENGTH_LABELS = ("very weak", "weak", "fair", "strong", "very strong")


@dataclass(frozen=True)
class StrengthVerdict:
    """Score and guidance from the strength evaluator."""

    score: int
    warning: str | None = None
    suggestions: tuple[str, ...] = ()

    @classmethod
    def from_result(cls, result: Mapping[str, Any]) -> "StrengthVerdict":
        """Build from an evaluator result of the zxcvbn shape.

        Raises:
            ValueError: if the result is missing fields or the score is
                outside 0-4.
        """
        try:
            score = result["score"]
            feedback = result.get("feedback") or {}
            warning = feedback.get("warning") or None
            suggestions = feedback.get("suggestions") or ()
            if isinstance(suggestions, str):
                raise TypeError("suggestions must be a sequence of strings")
            suggestions = tuple(str(s) for s in suggestions)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Unusable strength result: {e!r}") from e

        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 4:
            raise ValueError(f"Strength score out of range: {score!r}")

        return cls(score=score, warning=warning, suggestions=suggestions)

    @property
    def label(self) -> str:
        """Human-readable name for the score."""
        return STRENGTH_LABELS[self.score]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "label": self.label,
            "warning": self.warning,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class PipelineState:
    """Externally observable snapshot owned by the coordinator.

    ``breach`` and ``strength`` always belong to the same generation.
    """

    generation: int = 0
    phase: Phase = Phase.IDLE
    # Never rendered, logged or serialized
    candidate: str = field(default="", repr=False)
    breach: BreachVerdict = field(default_factory=BreachVerdict.unknown)
    strength: StrengthVerdict | None = None
    strength_error: str | None = None
    strength_done: bool = False
    breach_done: bool = False

    @property
    def is_resolved(self) -> bool:
        """True once both halves of the generation have completed."""
        return self.phase in (Phase.RESOLVED, Phase.RESOLVED_WITH_LOOKUP_ERROR)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (excludes the candidate password)."""
        return {
            "generation": self.generation,
            "phase": self.phase.value,
            "breach": self.breach.to_dict(),
            "strength": self.strength.to_dict() if self.strength else None,
            "strength_error": self.strength_error,
        }

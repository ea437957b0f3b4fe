"""
Exceptions raised by the breach-check pipeline.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class BreachAwareError(Exception):
    """Base class for all pipeline errors."""


class HashingError(BreachAwareError):
    """The candidate password could not be hashed.

    Should not happen under normal operation. Not retried.
    """


class RemoteLookupError(BreachAwareError):
    """The range lookup against the breach database failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(RemoteLookupError):
    """The range response body is not a list of SUFFIX:COUNT records."""


class StrengthEvaluationError(BreachAwareError):
    """The strength evaluator failed or returned an unusable result."""

"""
Configuration for the password check pipeline.

Settings come from constructor arguments or environment variables.
No config file is read.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_RANGE_URL = "https://api.pwnedpasswords.com/range/{prefix}"


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


@dataclass
class CheckerConfig:
    """Configuration for the debouncer and breach lookup client."""

    # Range endpoint, {prefix} is replaced by the 5-char hash prefix
    range_url: str = DEFAULT_RANGE_URL
    user_agent: str = "BreachAware/1.0"

    # Idle time before input is considered settled
    debounce_seconds: float = 0.5

    # HTTP request timeout
    request_timeout: float = 10.0

    # Ask the service to pad responses with count-0 decoy records
    add_padding: bool = False

    @classmethod
    def from_env(cls) -> "CheckerConfig":
        """Load configuration from environment variables."""
        return cls(
            range_url=os.environ.get("BREACHAWARE_RANGE_URL", DEFAULT_RANGE_URL),
            user_agent=os.environ.get("BREACHAWARE_USER_AGENT", "BreachAware/1.0"),
            debounce_seconds=_env_float("BREACHAWARE_DEBOUNCE_SECONDS", 0.5),
            request_timeout=_env_float("BREACHAWARE_TIMEOUT", 10.0),
            add_padding=os.environ.get("BREACHAWARE_ADD_PADDING", "").lower() in ("true", "yes", "1"),
        )

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if "{prefix}" not in self.range_url:
            errors.append("Range URL must contain a {prefix} placeholder")
        else:
            try:
                self.range_url.format(prefix="00000")
            except (KeyError, IndexError, ValueError):
                errors.append("Range URL must not contain placeholders other than {prefix}")
        if not self.range_url.startswith(("http://", "https://")):
            errors.append("Range URL must be an http(s) URL")
        if self.request_timeout <= 0:
            errors.append("Request timeout must be positive")
        if not self.user_agent:
            errors.append("User-Agent is required by the range API")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "range_url": self.range_url,
            "user_agent": self.user_agent,
            "debounce_seconds": self.debounce_seconds,
            "request_timeout": self.request_timeout,
            "add_padding": self.add_padding,
        }

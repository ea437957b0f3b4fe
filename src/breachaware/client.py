"""
Pwned Passwords range API client.

Implements the k-anonymity breach check: only the first 5 characters of
the SHA-1 digest are sent, the service answers with every known suffix
sharing that prefix, and the match happens locally.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from typing import Iterable, Iterator

import aiohttp

from breachaware.config import CheckerConfig
from breachaware.errors import MalformedResponseError, RemoteLookupError
from breachaware.hasher import PREFIX_LENGTH, hash_password, is_hex, split_digest
from breachaware.models import BreachRecord, BreachVerdict, PrefixSuffixPair

logger = logging.getLogger(__name__)


def parse_range_response(text: str) -> Iterator[BreachRecord]:
    """Parse a range response body into records, lazily.

    Response format: "SUFFIX:COUNT" per line, CRLF or LF separated.

    Raises:
        MalformedResponseError: on the first line that is not a valid
            record, or if the body holds no records at all.
    """
    found = False
    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue

        hash_suffix, sep, count = line.partition(":")
        hash_suffix = hash_suffix.strip()
        count = count.strip()
        if not sep or not is_hex(hash_suffix):
            raise MalformedResponseError(f"Malformed record on line {line_no}")
        if not (count.isascii() and count.isdigit()):
            raise MalformedResponseError(f"Invalid count on line {line_no}")

        found = True
        yield BreachRecord(suffix=hash_suffix, count=int(count))

    if not found:
        raise MalformedResponseError("Empty range response")


def match_suffix(records: Iterable[BreachRecord], suffix: str) -> BreachVerdict:
    """Find a suffix among range records.

    Case-insensitive. The first matching record wins and stops the scan.
    A match with count 0 is a padding record and means clean.
    """
    suffix = suffix.upper()
    for record in records:
        if record.suffix.upper() == suffix:
            if record.count == 0:
                return BreachVerdict.clean()
            return BreachVerdict.breached(record.count)
    return BreachVerdict.clean()


class PwnedPasswordsClient:
    """Client for the Pwned Passwords range API.

    Only hash prefixes cross the network. Suffixes are matched locally
    and passwords are never stored or logged.
    """

    def __init__(
        self,
        range_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        add_padding: bool | None = None,
        session: aiohttp.ClientSession | None = None,
        config: CheckerConfig | None = None,
    ):
        """Initialize range client.

        Args:
            range_url: Endpoint template containing {prefix}
            user_agent: User-Agent header for requests
            timeout: Total request timeout in seconds
            add_padding: Send the Add-Padding header
            session: Existing session to use (not closed by this client)
            config: Defaults for any argument left as None
        """
        config = config or CheckerConfig()
        self.range_url = range_url or config.range_url
        self.user_agent = user_agent or config.user_agent
        self.timeout = timeout or config.request_timeout
        self.add_padding = config.add_padding if add_padding is None else add_padding
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "PwnedPasswordsClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def fetch_range(self, prefix: str) -> str:
        """Fetch every known suffix for a hash prefix.

        Args:
            prefix: First 5 hex characters of the SHA-1 digest

        Returns:
            Raw response body

        Raises:
            ValueError: if the prefix is not 5 hex characters
            RemoteLookupError: on network failure, timeout or non-2xx status
        """
        if len(prefix) != PREFIX_LENGTH or not is_hex(prefix):
            raise ValueError(f"Range prefix must be {PREFIX_LENGTH} hex characters")
        prefix = prefix.upper()

        url = self.range_url.format(prefix=prefix)
        headers = {"User-Agent": self.user_agent}
        if self.add_padding:
            headers["Add-Padding"] = "true"

        session = await self._ensure_session()

        try:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                status = response.status

                if 200 <= status < 300:
                    try:
                        return await response.text(encoding="utf-8")
                    except UnicodeDecodeError:
                        raise MalformedResponseError("Range response is not valid UTF-8", status=status) from None
                elif status == 429:
                    retry_after = response.headers.get("Retry-After", "unknown")
                    logger.warning(f"Rate limited. Retry after {retry_after}s")
                    raise RemoteLookupError(f"Rate limited. Retry after {retry_after}s", status=status)
                else:
                    logger.warning(f"Range lookup failed with HTTP {status}")
                    raise RemoteLookupError(f"HTTP {status}", status=status)

        except asyncio.TimeoutError:
            raise RemoteLookupError("Request timeout") from None
        except aiohttp.ClientError as e:
            raise RemoteLookupError(f"Request failed: {str(e)}") from e

    async def lookup(self, pair: PrefixSuffixPair) -> BreachVerdict:
        """Check a split digest against the range API.

        Only ``pair.prefix`` is sent; ``pair.suffix`` is matched locally.

        Returns:
            Breached or clean verdict

        Raises:
            RemoteLookupError: if the lookup failed or the body is malformed
        """
        body = await self.fetch_range(pair.prefix)
        verdict = match_suffix(parse_range_response(body), pair.suffix)
        logger.debug(f"Range lookup for prefix bucket finished: {verdict.status.value}")
        return verdict

    async def check_password(self, password: str) -> BreachVerdict:
        """Check if a password has been exposed in data breaches.

        Args:
            password: Password to check (NOT stored or logged)

        Raises:
            HashingError: if the password cannot be hashed
            RemoteLookupError: if the lookup failed
        """
        return await self.lookup(hash_password(password))

    async def check_password_hash(self, sha1_hash: str) -> BreachVerdict:
        """Check a pre-computed SHA-1 hash against Pwned Passwords.

        Args:
            sha1_hash: Full SHA-1 hash of the password
        """
        return await self.lookup(split_digest(sha1_hash))


def check_password_sync(password: str, config: CheckerConfig | None = None) -> BreachVerdict:
    """Synchronous wrapper for checking password exposure.

    Args:
        password: Password to check

    Returns:
        BreachVerdict
    """
    async def _check():
        async with PwnedPasswordsClient(config=config) as client:
            return await client.check_password(password)

    return asyncio.run(_check())

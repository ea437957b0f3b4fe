"""
SHA-1 hashing and prefix/suffix split for k-anonymity range queries.

The split point is fixed by the range API: the first 5 hex characters
are sent, the remaining 35 are compared locally.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import string

from breachaware.errors import HashingError
from breachaware.models import PrefixSuffixPair

PREFIX_LENGTH = 5
DIGEST_LENGTH = 40

_HEX_DIGITS = frozenset(string.hexdigits)


def is_hex(value: str) -> bool:
    """Check that a string is non-empty and made of hex digits only."""
    return bool(value) and all(c in _HEX_DIGITS for c in value)


def digest(password: str) -> str:
    """Return the uppercase SHA-1 hex digest of a password.

    Raises:
        HashingError: if the password is not a string or cannot be
            encoded as UTF-8 (e.g. it contains lone surrogates).
    """
    if not isinstance(password, str):
        raise HashingError(f"password must be a string, not {type(password).__name__}")
    try:
        encoded = password.encode("utf-8")
    except UnicodeEncodeError as e:
        raise HashingError(f"password cannot be encoded as UTF-8: {e.reason}") from None
    return hashlib.sha1(encoded).hexdigest().upper()


def split_digest(sha1_hash: str) -> PrefixSuffixPair:
    """Split a full SHA-1 hex digest into prefix and suffix.

    Raises:
        HashingError: if the digest is not 40 hex characters.
    """
    if len(sha1_hash) != DIGEST_LENGTH or not is_hex(sha1_hash):
        raise HashingError("digest must be a 40-character SHA-1 hex string")
    sha1_hash = sha1_hash.upper()
    return PrefixSuffixPair(prefix=sha1_hash[:PREFIX_LENGTH], suffix=sha1_hash[PREFIX_LENGTH:])


def hash_password(password: str) -> PrefixSuffixPair:
    """Hash a password and split it for the range query."""
    return split_digest(digest(password))

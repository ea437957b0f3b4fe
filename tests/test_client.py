"""Tests for the Pwned Passwords range client."""

import pytest

from breachaware.client import (
    PwnedPasswordsClient,
    check_password_sync,
    match_suffix,
    parse_range_response,
)
from breachaware.errors import MalformedResponseError, RemoteLookupError
from breachaware.hasher import hash_password
from breachaware.models import BreachRecord, BreachStatus, BreachVerdict

from conftest import PASSWORD_PREFIX, PASSWORD_RANGE_BODY, PASSWORD_SUFFIX


# =============================================================================
# Parsing and matching
# =============================================================================

def test_parse_crlf_and_lf_lines():
    records = list(parse_range_response("AAAA:1\r\nBBBB:22\nCCCC:333\n\n"))
    assert records == [
        BreachRecord("AAAA", 1),
        BreachRecord("BBBB", 22),
        BreachRecord("CCCC", 333),
    ]


@pytest.mark.parametrize("body", [
    "<html>Service Unavailable</html>",
    "AAAA\r\n",
    "AAAA:many\r\n",
    "AAAA:-1\r\n",
    "NOTHEX:1\r\n",
    "",
    "\r\n\r\n",
])
def test_parse_rejects_malformed_bodies(body):
    with pytest.raises(MalformedResponseError):
        list(parse_range_response(body))


def test_malformed_is_a_remote_lookup_error():
    assert issubclass(MalformedResponseError, RemoteLookupError)


def test_match_is_case_insensitive():
    records = [BreachRecord("abcdef", 5)]
    assert match_suffix(records, "ABCDEF") == BreachVerdict.breached(5)


def test_first_duplicate_wins():
    records = [BreachRecord("ABCDEF", 5), BreachRecord("ABCDEF", 9)]
    assert match_suffix(records, "abcdef").occurrences == 5


def test_no_match_is_clean():
    assert match_suffix([BreachRecord("ABCDEF", 5)], "012345") == BreachVerdict.clean()


def test_padding_record_is_clean():
    assert match_suffix([BreachRecord("ABCDEF", 0)], "ABCDEF") == BreachVerdict.clean()


def test_match_short_circuits_before_malformed_tail():
    body = f"{PASSWORD_SUFFIX}:3\r\ngarbage\r\n"
    verdict = match_suffix(parse_range_response(body), PASSWORD_SUFFIX)
    assert verdict == BreachVerdict.breached(3)


# =============================================================================
# HTTP
# =============================================================================

async def test_breached_password(range_service):
    range_service.bodies[PASSWORD_PREFIX] = PASSWORD_RANGE_BODY
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        verdict = await client.check_password("password")

    assert verdict.status == BreachStatus.BREACHED
    assert verdict.occurrences == 3730471


async def test_clean_password(range_service):
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        verdict = await client.check_password("Xk9#mQ2vL!pR8zT")

    assert verdict == BreachVerdict.clean()


async def test_only_prefix_is_sent(range_service):
    range_service.bodies[PASSWORD_PREFIX] = PASSWORD_RANGE_BODY
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        await client.lookup(hash_password("password"))

    assert len(range_service.requests) == 1
    request = range_service.requests[0]
    assert request["path"] == f"/range/{PASSWORD_PREFIX}"
    assert request["query"] == ""
    assert request["body"] == ""
    sent = " ".join([request["path"], *request["headers"].values()]).upper()
    assert "PASSWORD" not in sent
    assert PASSWORD_SUFFIX not in sent


async def test_lowercase_prefix_is_uppercased(range_service):
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        await client.fetch_range("5baa6")
    assert range_service.requests[0]["path"] == "/range/5BAA6"


@pytest.mark.parametrize("prefix", ["5BAA", "5BAA61", "ZZZZZ", "passw"])
async def test_invalid_prefix_never_sent(range_service, prefix):
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        with pytest.raises(ValueError):
            await client.fetch_range(prefix)
    assert range_service.requests == []


async def test_user_agent_and_padding_headers(range_service):
    async with PwnedPasswordsClient(
        range_url=range_service.url,
        user_agent="TestAgent/2.0",
        add_padding=True,
    ) as client:
        await client.fetch_range(PASSWORD_PREFIX)

    headers = range_service.requests[0]["headers"]
    assert headers["User-Agent"] == "TestAgent/2.0"
    assert headers["Add-Padding"] == "true"


async def test_no_padding_header_by_default(range_service):
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        await client.fetch_range(PASSWORD_PREFIX)
    assert "Add-Padding" not in range_service.requests[0]["headers"]


async def test_http_500_raises_remote_lookup_error(range_service):
    range_service.status = 500
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        with pytest.raises(RemoteLookupError) as exc:
            await client.check_password("password")
    assert exc.value.status == 500
    assert not isinstance(exc.value, MalformedResponseError)


async def test_rate_limited_raises_remote_lookup_error(range_service):
    range_service.status = 429
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        with pytest.raises(RemoteLookupError) as exc:
            await client.check_password("password")
    assert exc.value.status == 429


async def test_malformed_body_raises(range_service):
    range_service.default_body = "<html>oops</html>"
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        with pytest.raises(MalformedResponseError):
            await client.check_password("password")


async def test_invalid_utf8_body_raises(range_service):
    range_service.default_body = b"\xff\xfe\xfa:1\r\n"
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        with pytest.raises(MalformedResponseError):
            await client.check_password("password")


async def test_timeout_raises_remote_lookup_error(range_service):
    range_service.delay = 1.0
    async with PwnedPasswordsClient(range_url=range_service.url, timeout=0.05) as client:
        with pytest.raises(RemoteLookupError, match="timeout"):
            await client.check_password("password")


async def test_connection_failure_raises_remote_lookup_error():
    async with PwnedPasswordsClient(range_url="http://127.0.0.1:1/range/{prefix}", timeout=2) as client:
        with pytest.raises(RemoteLookupError):
            await client.check_password("password")


async def test_check_password_hash(range_service):
    range_service.bodies[PASSWORD_PREFIX] = PASSWORD_RANGE_BODY
    async with PwnedPasswordsClient(range_url=range_service.url) as client:
        verdict = await client.check_password_hash((PASSWORD_PREFIX + PASSWORD_SUFFIX).lower())
    assert verdict.occurrences == 3730471


async def test_injected_session_is_not_closed(range_service):
    import aiohttp

    async with aiohttp.ClientSession() as session:
        client = PwnedPasswordsClient(range_url=range_service.url, session=session)
        await client.fetch_range(PASSWORD_PREFIX)
        await client.close()
        assert not session.closed


def test_check_password_sync(monkeypatch):
    async def fake_fetch_range(self, prefix):
        assert prefix == PASSWORD_PREFIX
        return PASSWORD_RANGE_BODY

    monkeypatch.setattr(PwnedPasswordsClient, "fetch_range", fake_fetch_range)
    assert check_password_sync("password") == BreachVerdict.breached(3730471)

"""Shared fixtures: a local stand-in for the range API."""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# SHA-1 of "password"
PASSWORD_PREFIX = "5BAA6"
PASSWORD_SUFFIX = "1E4C9B93F3F0682250B6CF8331B7EE68FD8"

PASSWORD_RANGE_BODY = (
    "1D2DA4053E34E76F6576ED1DA63134B5E2A:2\r\n"
    "1D72CD07550416C216D8AD296BF5C0AE8E0:10\r\n"
    f"{PASSWORD_SUFFIX}:3730471\r\n"
    "1E2AAA439972480CEC7F16C795BBB429372:1\r\n"
)

UNRELATED_RANGE_BODY = (
    "0018A45C4D1DEF81644B54AB7F969B88D65:1\r\n"
    "00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2\r\n"
    "011053FD0102E94D6AE2F8B83D76FAF94F6:1\r\n"
)


class RangeService:
    """Records every request and answers with canned bodies."""

    def __init__(self):
        self.requests: list[dict] = []
        self.bodies: dict[str, str | bytes] = {}
        self.default_body: str | bytes = UNRELATED_RANGE_BODY
        self.status = 200
        self.delay = 0.0
        self.url = ""

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append({
            "path": request.path,
            "query": request.query_string,
            "headers": dict(request.headers),
            "body": await request.text(),
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.status != 200:
            return web.Response(status=self.status, text="Internal error")
        body = self.bodies.get(request.match_info["prefix"].upper(), self.default_body)
        if isinstance(body, bytes):
            return web.Response(body=body, content_type="text/plain")
        return web.Response(text=body, content_type="text/plain")


@pytest.fixture
async def range_service():
    service = RangeService()
    app = web.Application()
    app.router.add_get("/range/{prefix}", service.handle)

    server = TestServer(app)
    await server.start_server()
    service.url = str(server.make_url("/range/")) + "{prefix}"
    yield service
    await server.close()

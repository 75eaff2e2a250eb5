import base64
import json

import pytest

from paperthrow import app
from paperthrow.protocol import SessionProtocol
from paperthrow.signer import Signer
from paperthrow.store import MemorySessionStore

TEST_SECRET = "test-secret"


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def make_event(body=None, method="POST", path="/handshake", raw=None, b64=False):
    """API Gateway HTTP API (payload v2) proxy event."""
    if raw is None:
        raw = json.dumps(body) if body is not None else None
    if b64 and raw is not None:
        raw = base64.b64encode(raw.encode()).decode()
    return {
        "requestContext": {"http": {"method": method, "path": path}},
        "body": raw,
        "isBase64Encoded": b64,
    }


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return MemorySessionStore()


@pytest.fixture()
def signer():
    return Signer(TEST_SECRET)


@pytest.fixture()
def protocol(store, signer, clock):
    p = SessionProtocol(store, signer, clock=clock)
    app.set_protocol(p)
    yield p
    app.set_protocol(None)


@pytest.fixture()
def call(protocol):
    def _call(handler, body=None, method="POST", **kwargs):
        resp = handler(make_event(body, method, **kwargs), None)
        return resp["statusCode"], json.loads(resp["body"])

    return _call


@pytest.fixture()
def session(call):
    import handshake

    status, body = call(handshake.handler, {"version": "1.0", "checksum": "abc", "deviceId": "dev1"})
    assert status == 200
    return body["sessionToken"], body["signature"]

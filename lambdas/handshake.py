from paperthrow.api import endpoint, ok
from paperthrow.app import get_protocol


@endpoint
def handler(body):
    session = get_protocol().handshake(body.get("version"), body.get("checksum"), body.get("deviceId"))
    return ok(session)

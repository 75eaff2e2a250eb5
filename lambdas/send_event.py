from paperthrow.api import endpoint, ok
from paperthrow.app import get_protocol


@endpoint
def handler(body):
    recorded = get_protocol().record_event(
        body.get("sessionToken"),
        body.get("clientSignature"),
        body.get("eventType"),
        timestamp=body.get("timestamp"),
        data=body.get("data"),
        event_id=body.get("eventId"),
    )
    if not recorded:
        return ok({"duplicate": True})
    return ok()

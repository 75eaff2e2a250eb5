"""Single-function deployment: dispatch on the request path."""
import get_results
import get_wind
import handshake
import send_event
from paperthrow.api import error, request_path
from paperthrow.errors import UnknownRoute

ROUTES = {
    "/handshake": handshake.handler,
    "/sendEvent": send_event.handler,
    "/getResults": get_results.handler,
    "/getWind": get_wind.handler,
}


def handler(event, ctx=None):
    path = request_path(event).rstrip("/")
    for suffix, fn in ROUTES.items():
        if path.endswith(suffix):
            return fn(event, ctx)
    return error(UnknownRoute.message, UnknownRoute.status)

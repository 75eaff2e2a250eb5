from paperthrow.api import endpoint, json_response
from paperthrow.app import get_protocol


@endpoint
def handler(body):
    wind = get_protocol().get_wind(body.get("sessionToken"), body.get("clientSignature"))
    # bare vector, no {ok: ...} envelope; existing clients parse it this way
    return json_response(wind)

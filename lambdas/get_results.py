from paperthrow.api import endpoint, ok
from paperthrow.app import get_protocol


@endpoint
def handler(body):
    results = get_protocol().get_results(body.get("sessionToken"), body.get("clientSignature"))
    # timeTaken was never tracked; clients still read the key
    return ok(dict(results, timeTaken=0))

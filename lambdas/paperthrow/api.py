"""API Gateway proxy plumbing shared by every endpoint."""
import base64
import functools
import json
from decimal import Decimal

from paperthrow.errors import ApiError, MethodNotAllowed

HEADERS = {
    "content-type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
}


def json_response(body, code=200):
    return {"statusCode": code, "headers": dict(HEADERS), "body": json.dumps(body)}


def ok(payload=None):
    return json_response({"ok": True, **(payload or {})})


def error(message, code=400):
    return json_response({"ok": False, "error": message}, code)


def request_method(event) -> str:
    # HTTP API (v2) first, then REST API (v1)
    http = (event.get("requestContext") or {}).get("http") or {}
    return (http.get("method") or event.get("httpMethod") or "").upper()


def request_path(event) -> str:
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("path") or event.get("rawPath") or event.get("path") or ""


def parse_body(event) -> dict:
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw)
        body = json.loads(raw, parse_float=Decimal)
    except ValueError:
        body = {}
    return body if isinstance(body, dict) else {}


def endpoint(fn):
    """Wrap ``fn(body) -> response`` as a POST-only Lambda handler."""

    @functools.wraps(fn)
    def handler(event, ctx=None):
        try:
            if request_method(event) != "POST":
                raise MethodNotAllowed()
            return fn(parse_body(event))
        except ApiError as e:
            return error(e.message, e.status)
        except Exception as e:
            # storage failures end up here; the client is expected to retry the request
            print(f"[ERROR] {fn.__module__} failed: {e!r}")
            return error("Internal error", 500)

    return handler

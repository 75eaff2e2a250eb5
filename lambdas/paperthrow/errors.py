class ApiError(Exception):
    """Error that maps straight onto an {ok: false, error} response."""

    status = 400
    message = "Bad request"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingParameter(ApiError):
    status = 400
    message = "Missing params"


class InvalidParameter(ApiError):
    status = 400
    message = "Invalid params"


class MethodNotAllowed(ApiError):
    status = 400
    message = "POST required"


class InvalidSession(ApiError):
    # one message for every gate failure so callers can't tell which check tripped
    status = 401
    message = "Invalid session"


class UnknownRoute(ApiError):
    status = 404
    message = "Unknown route"


class SessionExists(Exception):
    """A create() hit an existing session token."""

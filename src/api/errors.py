"""
Domain error kinds raised by the auth and ride services.

Each class carries the HTTP status and machine-readable code the API layer
answers with; see src/api/exception_handlers.py.
"""


class RideShareError(Exception):
    """Base class for expected, classified failures."""

    code: str = "BAD_REQUEST"
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(RideShareError):
    """Client input is semantically wrong (duplicate username, bad role, bad credentials)."""

    code = "BAD_REQUEST"
    status_code = 400


class InvalidStateTransitionError(BadRequestError):
    """The ride is not in the status the requested transition starts from."""

    code = "INVALID_STATE_TRANSITION"
    status_code = 400


class TransitionConflictError(InvalidStateTransitionError):
    """Another request changed the ride's status between our read and our write."""

    code = "CONFLICT"
    status_code = 409


class NotFoundError(RideShareError):
    """A referenced user or ride does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class PermissionDeniedError(RideShareError):
    """The caller exists but is not allowed to perform the operation."""

    code = "FORBIDDEN"
    status_code = 403

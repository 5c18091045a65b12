"""
Error types raised by the Taskboard request handlers.

Every error carries the HTTP status code, a short category label and a
human-readable message; the exception handlers render them as
`{code, error, message}`.
"""


class ApiError(Exception):
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.status_code, "error": self.error, "message": self.message}


class Unauthenticated(ApiError):
    """No credential was supplied."""
    status_code = 401
    error = "Unauthorized"


class Forbidden(ApiError):
    """A credential was supplied but it is invalid or expired."""
    status_code = 403
    error = "Forbidden"


class ValidationError(ApiError):
    status_code = 400
    error = "Bad Request"


class NotFound(ApiError):
    """The resource does not exist or is not owned by the requester."""
    status_code = 404
    error = "Not Found"


class InternalError(ApiError):
    status_code = 500
    error = "Internal Server Error"

# server/core/exceptions.py

"""
Error kinds raised by the query builder and the auth service.
Each one carries the HTTP status it maps to; main.py turns them into JSON.
"""


class DashboardError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ClientInputError(DashboardError):
    """Missing or invalid request fields."""
    status_code = 400
    code = "invalid_request"


class AuthenticationError(DashboardError):
    """Bad credentials, or a missing/invalid/expired session."""
    status_code = 401
    code = "not_authenticated"


class NotFoundError(DashboardError):
    status_code = 404
    code = "not_found"


class DependencyError(DashboardError):
    """
    The store failed. The message is fixed so nothing about the
    underlying failure reaches the client.
    """
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message)

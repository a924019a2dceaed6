"""
Domain errors raised by the service layer.

Services stay free of FastAPI; the handlers in ``backend.app.api.errors``
translate these into ``{"success": false, "error": ...}`` responses.
"""


class NoBloggError(Exception):
    """Base exception for expected, client-visible failures."""

    http_status: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"success": False, "error": self.message}


class AuthenticationError(NoBloggError):
    """Credentials were rejected."""
    http_status = 401


class NotFoundError(NoBloggError):
    """Requested resource does not exist (or belongs to another tenant)."""
    http_status = 404

    def __init__(self, resource_type: str):
        super().__init__(f"{resource_type} not found")
        self.resource_type = resource_type


class ConflictError(NoBloggError):
    """Uniqueness or state rule violated."""
    http_status = 409

"""
Domain error taxonomy.

Services raise these; the gateway turns them into JSON responses of the form
{"error": true, "message": ..., "code": ...}.
"""

from typing import Any, Dict, Optional


class APIError(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": True, "message": self.message, "code": self.code}


class ValidationError(APIError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class UnauthorizedError(APIError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class ForbiddenError(APIError):
    status_code = 403
    code = "forbidden"
    default_message = "Permission denied"


class NotFoundError(APIError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


# Business-rule violations keep the 400 the public API has always returned;
# clients tell them apart by `code`.
class ConflictError(APIError):
    status_code = 400
    code = "conflict"
    default_message = "Conflict"


class InvalidStateError(APIError):
    status_code = 400
    code = "invalid_state"
    default_message = "Invalid state"


class CapacityExceededError(APIError):
    status_code = 400
    code = "capacity_exceeded"
    default_message = "event is at full capacity"


class QuotaExceededError(APIError):
    status_code = 400
    code = "quota_exceeded"
    default_message = "user has reached the maximum number of active events"


class InternalError(APIError):
    pass


class ServiceUnavailableError(APIError):
    status_code = 503
    code = "service_unavailable"
    default_message = "Service temporarily unavailable"

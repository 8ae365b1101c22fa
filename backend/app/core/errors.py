"""
Error taxonomy shared by every service.
Each error carries the HTTP status, a stable machine code and a
user-displayable message; app.main turns them into JSON responses.
"""


class ServiceError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class InvalidRoleError(ValidationError):
    code = "INVALID_ROLE"
    default_message = "Invalid user type"


class ConflictError(ServiceError):
    """Uniqueness violation. Signup reports it as 400."""

    status_code = 400
    code = "CONFLICT"
    default_message = "Resource already exists"


class AuthenticationError(ServiceError):
    status_code = 401
    code = "AUTH_INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class ForbiddenError(ServiceError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Not authorized"


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class NotACounselorError(ServiceError):
    status_code = 400
    code = "NOT_A_COUNSELOR"
    default_message = "User is not a counselor"


class InvalidTransitionError(ServiceError):
    """Status change requested on a record that is already in a final state."""

    status_code = 409
    code = "INVALID_STATUS_TRANSITION"
    default_message = "Status can no longer be changed"


class InternalError(ServiceError):
    pass

class ServiceError(Exception):
    """Base for errors surfaced to the caller as a structured payload."""

    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(self, message=None, code=None, **details):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.details = details
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class DuplicateError(ValidationError):
    code = "DUPLICATE"
    default_message = "Already exists"


class AuthenticationError(ServiceError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class AccountBlockedError(ServiceError):
    status_code = 403
    code = "BLOCKED"
    default_message = "Your account has been blocked"


class AccountSuspendedError(ServiceError):
    status_code = 403
    code = "SUSPENDED"
    default_message = "Your account is suspended"


class AuthorizationError(ServiceError):
    status_code = 403
    code = "ACCESS_DENIED"
    default_message = "Access denied"


class ProtectedEntityError(ServiceError):
    status_code = 403
    code = "PROTECTED_ENTITY"
    default_message = "This account is protected"


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"

"""Domain errors raised by services and mapped to HTTP responses in app.main."""

from enum import Enum

from fastapi import status


class ErrorCode(Enum):
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DEADLINE_PASSED = "DEADLINE_PASSED"
    EVENT_IN_PAST = "EVENT_IN_PAST"
    NOT_REGISTERED = "NOT_REGISTERED"
    BAD_REQUEST = "BAD_REQUEST"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.BAD_REQUEST
    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "Bad Request"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class BadRequestError(DomainError):
    pass


class InvalidCredentialsError(DomainError):
    code = ErrorCode.INVALID_CREDENTIALS
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication Failed"

    def __init__(self) -> None:
        super().__init__("Invalid credentials provided")


class InvalidTokenError(DomainError):
    """Malformed, expired, badly signed or wrong-kind token."""

    code = ErrorCode.INVALID_TOKEN
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self) -> None:
        super().__init__("Could not validate credentials")


class UnauthenticatedError(DomainError):
    code = ErrorCode.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self) -> None:
        super().__init__("Authentication required")


class ForbiddenError(DomainError):
    code = ErrorCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    error = "Access Denied"

    def __init__(self) -> None:
        super().__init__("You don't have permission to access this resource")


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    error = "Resource Not Found"

    def __init__(self, resource: str, resource_id=None) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class BusinessRuleError(DomainError):
    status_code = 422
    error = "Business Logic Error"


class CapacityExceededError(BusinessRuleError):
    code = ErrorCode.CAPACITY_EXCEEDED

    def __init__(self) -> None:
        super().__init__("Event is full, no more registrations allowed")


class DeadlinePassedError(BusinessRuleError):
    code = ErrorCode.DEADLINE_PASSED

    def __init__(self) -> None:
        super().__init__("Registration deadline has passed")


class EventInPastError(BusinessRuleError):
    code = ErrorCode.EVENT_IN_PAST

    def __init__(self) -> None:
        super().__init__("Cannot register for past events")


class NotRegisteredError(BusinessRuleError):
    code = ErrorCode.NOT_REGISTERED

    def __init__(self) -> None:
        super().__init__("User is not registered for this event")

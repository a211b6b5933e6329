"""
Custom application exceptions
"""

from typing import Optional, Dict, Any


class FerryBookException(Exception):
    """Base exception for FerryBook application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(FerryBookException):
    """Authentication related errors"""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401,
            details=details
        )


class AuthorizationError(FerryBookException):
    """Caller is neither the booking owner nor an admin"""

    def __init__(self, message: str = "Not authorized", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="AUTH_FORBIDDEN",
            status_code=403,
            details=details
        )


class NotFoundError(FerryBookException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id {identifier} not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource}
        )


class ValidationError(FerryBookException):
    """Validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class ConflictError(FerryBookException):
    """Resource conflict errors"""

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code=code,
            status_code=409,
            details=details
        )


class InsufficientCapacity(ConflictError):
    """Not enough seats left on the schedule"""

    def __init__(self, schedule_id: Any, requested: int, available: Optional[int] = None):
        details = {"schedule_id": str(schedule_id), "requested": requested}
        if available is not None:
            details["available"] = available
        super().__init__(
            message="Not enough seats available",
            code="INSUFFICIENT_CAPACITY",
            details=details
        )


class ScheduleUnavailable(ConflictError):
    """Schedule is not active or has already departed"""

    def __init__(self, schedule_id: Any, reason: str = "This schedule is no longer available"):
        super().__init__(
            message=reason,
            code="SCHEDULE_UNAVAILABLE",
            details={"schedule_id": str(schedule_id)}
        )


class AlreadyPaid(ConflictError):
    """Booking has already been paid"""

    def __init__(self, booking_code: str):
        super().__init__(
            message="This booking has already been paid",
            code="ALREADY_PAID",
            details={"booking_code": booking_code}
        )


class HasDependentBookings(ConflictError):
    """Schedule cannot be deleted while bookings reference it"""

    def __init__(self, schedule_id: Any, booking_count: int):
        super().__init__(
            message="Cannot delete schedule with existing bookings",
            code="HAS_DEPENDENT_BOOKINGS",
            details={"schedule_id": str(schedule_id), "booking_count": booking_count}
        )


class HasDependentSchedules(ConflictError):
    """Boat or route cannot be deleted while schedules reference it"""

    def __init__(self, resource: str, identifier: Any, schedule_count: int):
        super().__init__(
            message=f"Cannot delete {resource.lower()} with existing schedules",
            code="HAS_DEPENDENT_SCHEDULES",
            details={
                "resource": resource,
                "id": str(identifier),
                "schedule_count": schedule_count
            }
        )


class CodeGenerationExhausted(FerryBookException):
    """Could not produce a unique booking code within the retry budget"""

    def __init__(self, attempts: int):
        super().__init__(
            message="Could not generate a unique booking code, please try again",
            code="CODE_GENERATION_EXHAUSTED",
            status_code=503,
            details={"attempts": attempts}
        )

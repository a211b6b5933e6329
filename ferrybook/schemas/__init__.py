"""
Pydantic schemas for request/response validation
"""

from ferrybook.schemas.base import BaseSchema, TimestampSchema, IDSchema
from ferrybook.schemas.response import (
    ErrorDetail,
    ErrorResponse,
    PaginationMeta,
    PaginatedResponse,
    MessageResponse,
)
from ferrybook.schemas.boat import BoatCreate, BoatUpdate, BoatResponse, BoatSummary
from ferrybook.schemas.route import RouteCreate, RouteUpdate, RouteResponse, RouteSummary
from ferrybook.schemas.schedule import ScheduleResponse, ScheduleDetail, ScheduleCreate, ScheduleUpdate
from ferrybook.schemas.payment import PaymentSubmit, PaymentResponse, PaymentResultResponse
from ferrybook.schemas.booking import BookingCreate, BookingResponse
from ferrybook.schemas.admin import BookingAdminUpdate, DashboardStats, DashboardResponse

__all__ = [
    "BaseSchema",
    "TimestampSchema",
    "IDSchema",
    "ErrorDetail",
    "ErrorResponse",
    "PaginationMeta",
    "PaginatedResponse",
    "MessageResponse",
    "BoatCreate",
    "BoatUpdate",
    "BoatResponse",
    "BoatSummary",
    "RouteCreate",
    "RouteUpdate",
    "RouteResponse",
    "RouteSummary",
    "ScheduleResponse",
    "ScheduleDetail",
    "ScheduleCreate",
    "ScheduleUpdate",
    "PaymentSubmit",
    "PaymentResponse",
    "PaymentResultResponse",
    "BookingCreate",
    "BookingResponse",
    "BookingAdminUpdate",
    "DashboardStats",
    "DashboardResponse",
]

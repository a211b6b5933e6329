"""
Route schemas
"""

from pydantic import Field, model_validator
from typing import Optional
from decimal import Decimal

from ferrybook.schemas.base import BaseSchema, IDSchema, TimestampSchema
from ferrybook.models.route import RouteStatus


class RouteBase(BaseSchema):
    """Base route schema"""
    departure_port: str = Field(..., min_length=1, max_length=255)
    destination_port: str = Field(..., min_length=1, max_length=255)
    duration_minutes: int = Field(..., gt=0)
    base_price: Decimal = Field(..., ge=0)


class RouteCreate(RouteBase):
    status: RouteStatus = RouteStatus.ACTIVE

    @model_validator(mode="after")
    def validate_ports(self):
        if self.departure_port.strip().lower() == self.destination_port.strip().lower():
            raise ValueError("Departure and destination ports must differ")
        return self


class RouteUpdate(BaseSchema):
    departure_port: Optional[str] = Field(None, min_length=1, max_length=255)
    destination_port: Optional[str] = Field(None, min_length=1, max_length=255)
    duration_minutes: Optional[int] = Field(None, gt=0)
    base_price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[RouteStatus] = None


class RouteResponse(RouteBase, IDSchema, TimestampSchema):
    status: RouteStatus
    route_name: str
    duration_formatted: str


class RouteSummary(IDSchema):
    departure_port: str
    destination_port: str
    duration_minutes: int
    route_name: str
    duration_formatted: str

"""
Boat schemas
"""

from pydantic import Field
from typing import Optional

from ferrybook.schemas.base import BaseSchema, IDSchema, TimestampSchema
from ferrybook.models.boat import BoatStatus


class BoatBase(BaseSchema):
    """Base boat schema"""
    name: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., gt=0)
    description: Optional[str] = None


class BoatCreate(BoatBase):
    status: BoatStatus = BoatStatus.ACTIVE


class BoatUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None
    status: Optional[BoatStatus] = None


class BoatResponse(BoatBase, IDSchema, TimestampSchema):
    status: BoatStatus


class BoatSummary(IDSchema):
    name: str
    capacity: int

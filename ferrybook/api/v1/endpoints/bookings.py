"""
Customer booking endpoints
"""

from typing import Any, List
from uuid import UUID
import logging
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.core.database import get_session
from ferrybook.core.security import get_current_user
from ferrybook.models.user import User
from ferrybook.services.booking_service import booking_service
from ferrybook.schemas.booking import BookingCreate, BookingResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Reserve seats on a schedule; the booking starts confirmed with payment pending
    """
    return await booking_service.create_booking(
        db,
        schedule_id=booking_data.schedule_id,
        customer_name=booking_data.customer_name,
        customer_email=str(booking_data.customer_email),
        customer_phone=booking_data.customer_phone,
        passenger_count=booking_data.passenger_count,
        notes=booking_data.notes,
        user=current_user
    )


@router.get("/", response_model=List[BookingResponse])
async def list_my_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Bookings of the current user, newest first
    """
    return await booking_service.list_user_bookings(db, current_user, skip=skip, limit=limit)


@router.get("/code/{booking_code}", response_model=BookingResponse)
async def get_booking_by_code(
    booking_code: str = Path(..., min_length=1, max_length=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Look up a booking by its confirmation code (case-insensitive)
    """
    return await booking_service.get_booking_by_code(db, booking_code, user=current_user)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Booking details; visible to its owner and to admins
    """
    return await booking_service.get_booking(db, booking_id, user=current_user)

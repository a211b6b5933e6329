"""
Public schedule browsing endpoints
"""

from typing import Any, List, Optional
from datetime import date
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.core.database import get_session
from ferrybook.services.schedule_service import ScheduleFilters, schedule_service
from ferrybook.schemas.schedule import ScheduleResponse, ScheduleDetail

router = APIRouter()


@router.get("/", response_model=List[ScheduleResponse])
async def list_schedules(
    db: AsyncSession = Depends(get_session),
    departure_port: Optional[str] = Query(None, max_length=255),
    destination_port: Optional[str] = Query(None, max_length=255),
    departure_date: Optional[date] = None
) -> Any:
    """
    Available schedules: active, departing in the future, with seats left
    """
    filters = ScheduleFilters(
        departure_port=departure_port or None,
        destination_port=destination_port or None,
        departure_date=departure_date
    )
    return await schedule_service.list_available_schedules(db, filters)


@router.get("/ports", response_model=List[str])
async def list_ports(db: AsyncSession = Depends(get_session)) -> Any:
    """
    Ports served by currently available schedules
    """
    return await schedule_service.list_ports(db)


@router.get("/{schedule_id}", response_model=ScheduleDetail)
async def get_schedule(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Schedule with seat counter and booked seats side by side
    """
    schedule = await schedule_service.get_schedule(db, schedule_id)
    summary = await schedule_service.seat_summary(db, schedule)

    detail = ScheduleResponse.model_validate(schedule).model_dump()
    return ScheduleDetail(
        **detail,
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
        capacity=summary.capacity,
        booked_seats=summary.booked_seats,
        unaccounted_seats=summary.unaccounted
    )

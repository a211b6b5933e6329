"""
Admin management endpoints
"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.core.database import get_session
from ferrybook.core.security import require_admin
from ferrybook.models.user import User
from ferrybook.models.booking import BookingStatus, BookingPaymentStatus
from ferrybook.models.schedule import ScheduleStatus
from ferrybook.services.admin_service import admin_service
from ferrybook.services.schedule_service import schedule_service
from ferrybook.schemas.admin import BookingAdminUpdate, DashboardResponse
from ferrybook.schemas.boat import BoatCreate, BoatUpdate, BoatResponse
from ferrybook.schemas.booking import BookingResponse
from ferrybook.schemas.response import MessageResponse, PaginatedResponse, PaginationMeta
from ferrybook.schemas.route import RouteCreate, RouteUpdate, RouteResponse
from ferrybook.schemas.schedule import ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleDetail

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    """
    Headline counts, recent bookings and upcoming departures
    """
    dashboard = await admin_service.dashboard(db)
    return DashboardResponse.model_validate(dashboard)


# Bookings

@router.get("/bookings", response_model=PaginatedResponse[BookingResponse])
async def list_bookings(
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin),
    search: Optional[str] = Query(None, max_length=255),
    payment_status: Optional[BookingPaymentStatus] = None,
    booking_status: Optional[BookingStatus] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100)
) -> Any:
    """
    Search by booking code, customer name or email
    """
    bookings, total = await admin_service.list_bookings(
        db,
        search=search,
        payment_status=payment_status,
        booking_status=booking_status,
        skip=(page - 1) * per_page,
        limit=per_page
    )
    return PaginatedResponse[BookingResponse](
        data=[BookingResponse.model_validate(booking) for booking in bookings],
        pagination=PaginationMeta.build(page, per_page, total)
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.get_booking(db, booking_id)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: UUID,
    booking_update: BookingAdminUpdate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    """
    Override booking and payment status directly
    """
    return await admin_service.update_booking_admin(
        db,
        booking_id,
        booking_status=booking_update.booking_status,
        payment_status=booking_update.payment_status,
        notes=booking_update.notes
    )


# Schedules

@router.get("/schedules", response_model=PaginatedResponse[ScheduleResponse])
async def list_schedules(
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin),
    search: Optional[str] = Query(None, max_length=255),
    schedule_status: Optional[ScheduleStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100)
) -> Any:
    """
    All schedules, latest departure first; search by boat name or port
    """
    schedules, total = await admin_service.list_schedules(
        db,
        search=search,
        status=schedule_status,
        skip=(page - 1) * per_page,
        limit=per_page
    )
    return PaginatedResponse[ScheduleResponse](
        data=[ScheduleResponse.model_validate(schedule) for schedule in schedules],
        pagination=PaginationMeta.build(page, per_page, total)
    )


@router.post("/schedules", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_data: ScheduleCreate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.create_schedule(db, **schedule_data.model_dump())


@router.get("/schedules/{schedule_id}", response_model=ScheduleDetail)
async def get_schedule(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    schedule = await admin_service.get_schedule(db, schedule_id)
    summary = await schedule_service.seat_summary(db, schedule)
    return ScheduleDetail(
        **ScheduleResponse.model_validate(schedule).model_dump(),
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
        capacity=summary.capacity,
        booked_seats=summary.booked_seats,
        unaccounted_seats=summary.unaccounted
    )


@router.put("/schedules/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    schedule_update: ScheduleUpdate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    changes = schedule_update.model_dump(exclude_unset=True, exclude_none=True)
    return await admin_service.update_schedule(db, schedule_id, **changes)


@router.delete("/schedules/{schedule_id}", response_model=MessageResponse)
async def delete_schedule(
    schedule_id: UUID,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    """
    Refused while any booking references the schedule
    """
    await admin_service.delete_schedule(db, schedule_id)
    return MessageResponse(message="Schedule deleted successfully")


# Boats

@router.get("/boats", response_model=List[BoatResponse])
async def list_boats(
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.list_boats(db)


@router.post("/boats", response_model=BoatResponse, status_code=status.HTTP_201_CREATED)
async def create_boat(
    boat_data: BoatCreate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.create_boat(db, **boat_data.model_dump())


@router.put("/boats/{boat_id}", response_model=BoatResponse)
async def update_boat(
    boat_id: UUID,
    boat_update: BoatUpdate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    changes = boat_update.model_dump(exclude_unset=True, exclude_none=True)
    return await admin_service.update_boat(db, boat_id, **changes)


@router.delete("/boats/{boat_id}", response_model=MessageResponse)
async def delete_boat(
    boat_id: UUID,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    await admin_service.delete_boat(db, boat_id)
    return MessageResponse(message="Boat deleted successfully")


# Routes

@router.get("/routes", response_model=List[RouteResponse])
async def list_routes(
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.list_routes(db)


@router.post("/routes", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def create_route(
    route_data: RouteCreate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    return await admin_service.create_route(db, **route_data.model_dump())


@router.put("/routes/{route_id}", response_model=RouteResponse)
async def update_route(
    route_id: UUID,
    route_update: RouteUpdate,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    changes = route_update.model_dump(exclude_unset=True, exclude_none=True)
    return await admin_service.update_route(db, route_id, **changes)


@router.delete("/routes/{route_id}", response_model=MessageResponse)
async def delete_route(
    route_id: UUID,
    db: AsyncSession = Depends(get_session),
    admin_user: User = Depends(require_admin)
) -> Any:
    await admin_service.delete_route(db, route_id)
    return MessageResponse(message="Route deleted successfully")

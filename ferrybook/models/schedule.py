"""
Schedule model
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, Numeric, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from ferrybook.models.base import BaseModel, UTCDateTime, enum_type, utcnow


class ScheduleStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    FULL = "full"


class Schedule(BaseModel):
    """
    One sailing of a boat on a route.

    available_seats is the authoritative seat counter. It is only changed
    through services.seat_ledger.SeatLedger.
    """
    __tablename__ = "schedules"
    __table_args__ = (
        Index("ix_schedules_departure_status", "departure_time", "status"),
        Index("ix_schedules_route_departure", "route_id", "departure_time"),
        CheckConstraint("available_seats >= 0", name="chk_schedules_seats_non_negative"),
        CheckConstraint("arrival_time > departure_time", name="chk_schedules_time_range"),
        CheckConstraint("price >= 0", name="chk_schedules_price"),
    )

    boat_id = Column(Uuid(as_uuid=True), ForeignKey("boats.id"), nullable=False, index=True)
    route_id = Column(Uuid(as_uuid=True), ForeignKey("routes.id"), nullable=False)
    departure_time = Column(UTCDateTime(), nullable=False)
    arrival_time = Column(UTCDateTime(), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    available_seats = Column(Integer, nullable=False)
    status = Column(
        enum_type(ScheduleStatus, "schedule_status"),
        default=ScheduleStatus.ACTIVE,
        nullable=False,
        index=True
    )

    # Relationships
    boat = relationship("Boat", back_populates="schedules")
    route = relationship("Route", back_populates="schedules")
    bookings = relationship("Booking", back_populates="schedule")

    @property
    def is_full(self) -> bool:
        """Sold out, or marked full by an admin regardless of the counter"""
        return self.available_seats <= 0 or self.status == ScheduleStatus.FULL

    def has_departed(self, now: Optional[datetime] = None) -> bool:
        return self.departure_time <= (now or utcnow())

    def accepts_bookings(self, now: Optional[datetime] = None) -> bool:
        return self.status == ScheduleStatus.ACTIVE and not self.has_departed(now)

    def __repr__(self):
        return (
            f"<Schedule(id={self.id}, departure={self.departure_time}, "
            f"seats={self.available_seats}, status={self.status})>"
        )

"""
Route model
"""

from sqlalchemy import Column, String, Integer, Numeric, Index, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from ferrybook.models.base import BaseModel, enum_type


class RouteStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Route(BaseModel):
    """
    Directed port pair served by schedules
    """
    __tablename__ = "routes"
    __table_args__ = (
        Index("ix_routes_ports", "departure_port", "destination_port"),
        CheckConstraint("duration_minutes > 0", name="chk_routes_duration_positive"),
        CheckConstraint("base_price >= 0", name="chk_routes_base_price"),
    )

    departure_port = Column(String(255), nullable=False)
    destination_port = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        enum_type(RouteStatus, "route_status"),
        default=RouteStatus.ACTIVE,
        nullable=False,
        index=True
    )

    # Relationships
    schedules = relationship("Schedule", back_populates="route")

    @property
    def route_name(self) -> str:
        return f"{self.departure_port} → {self.destination_port}"

    @property
    def duration_formatted(self) -> str:
        """Human readable duration, e.g. "2h 30m", "2h" or "45m" """
        hours, minutes = divmod(self.duration_minutes, 60)
        if hours > 0:
            return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
        return f"{minutes}m"

    def __repr__(self):
        return f"<Route(id={self.id}, route={self.route_name}, status={self.status})>"

"""
Boat model
"""

from sqlalchemy import Column, String, Integer, Text, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from ferrybook.models.base import BaseModel, enum_type


class BoatStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Boat(BaseModel):
    """
    Vessel operating scheduled sailings
    """
    __tablename__ = "boats"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="chk_boats_capacity_positive"),
    )

    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    description = Column(Text)
    status = Column(
        enum_type(BoatStatus, "boat_status"),
        default=BoatStatus.ACTIVE,
        nullable=False,
        index=True
    )

    # Relationships
    schedules = relationship("Schedule", back_populates="boat")

    def __repr__(self):
        return f"<Boat(id={self.id}, name={self.name}, capacity={self.capacity})>"

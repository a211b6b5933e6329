"""
API v1 endpoint modules
"""

from ferrybook.api.v1.endpoints import schedules, bookings, payment, admin, health

__all__ = ["schedules", "bookings", "payment", "admin", "health"]

"""
Booking and payment metrics

Prometheus series for scraping, plus an in-process snapshot served by the
health router for quick inspection.
"""

import time
import logging
from collections import Counter as Tally, deque
from typing import Deque, Dict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import asyncio

from prometheus_client import Counter, Histogram

from ferrybook.core.exceptions import FerryBookException

logger = logging.getLogger(__name__)

BOOKING_OPERATIONS = Counter(
    "ferrybook_booking_operations_total",
    "Booking operations by type and outcome",
    ["operation", "outcome"]
)
BOOKING_DURATION = Histogram(
    "ferrybook_booking_operation_seconds",
    "Booking operation duration",
    ["operation"]
)
SEATS_RESERVED = Counter(
    "ferrybook_seats_reserved_total",
    "Seats taken from schedules by new bookings"
)
CODE_COLLISIONS = Counter(
    "ferrybook_booking_code_collisions_total",
    "Booking codes rejected by the unique index at insert"
)
PAYMENT_ATTEMPTS = Counter(
    "ferrybook_payment_attempts_total",
    "Payment attempts by outcome",
    ["outcome"]
)

SLOW_OPERATION_SECONDS = 5.0
DURATION_WINDOW = 1000


@dataclass
class BookingMetrics:
    """Snapshot counters since process start"""
    bookings_created: int = 0
    seats_reserved: int = 0
    code_collisions: int = 0
    errors: int = 0
    cancellations: int = 0
    seats_released: int = 0
    payments_succeeded: int = 0
    payments_declined: int = 0

    # Rejections keyed by error code, e.g. INSUFFICIENT_CAPACITY
    rejections: Tally = field(default_factory=Tally)
    durations: Deque[float] = field(default_factory=lambda: deque(maxlen=DURATION_WINDOW))

    def latency_ms(self) -> Dict[str, float]:
        if not self.durations:
            return {"p50": 0.0, "p95": 0.0, "max": 0.0}
        ordered = sorted(self.durations)
        last = len(ordered) - 1
        return {
            "p50": ordered[int(last * 0.5)] * 1000,
            "p95": ordered[int(last * 0.95)] * 1000,
            "max": ordered[last] * 1000,
        }

    def to_dict(self) -> Dict:
        return {
            "bookings": {
                "created": self.bookings_created,
                "rejected": dict(self.rejections),
                "errors": self.errors,
                "cancelled": self.cancellations,
                "code_collisions": self.code_collisions,
            },
            "seats": {
                "reserved": self.seats_reserved,
                "released": self.seats_released,
            },
            "payments": {
                "succeeded": self.payments_succeeded,
                "declined": self.payments_declined,
            },
            "latency_ms": self.latency_ms(),
        }


class MetricsCollector:
    """Collects booking engine and payment outcomes"""

    def __init__(self):
        self.metrics = BookingMetrics()
        self.logger = logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def track_booking_operation(self, operation_type: str = "booking"):
        """
        Time an operation and label it success, rejected (a business rule
        refused it) or error
        """
        start_time = time.perf_counter()
        outcome = "success"
        try:
            yield
        except FerryBookException as e:
            outcome = "rejected"
            async with self._lock:
                self.metrics.rejections[e.code] += 1
            raise
        except Exception as e:
            outcome = "error"
            self.logger.error(f"Failed {operation_type} operation: {type(e).__name__}: {e}")
            async with self._lock:
                self.metrics.errors += 1
            raise
        finally:
            duration = time.perf_counter() - start_time
            async with self._lock:
                self.metrics.durations.append(duration)

            BOOKING_OPERATIONS.labels(operation=operation_type, outcome=outcome).inc()
            BOOKING_DURATION.labels(operation=operation_type).observe(duration)

            if duration > SLOW_OPERATION_SECONDS:
                self.logger.warning(f"Slow {operation_type} operation: {duration:.2f}s")

    async def record_booking_created(self, passenger_count: int):
        async with self._lock:
            self.metrics.bookings_created += 1
            self.metrics.seats_reserved += passenger_count
        SEATS_RESERVED.inc(passenger_count)

    async def record_code_collision(self):
        async with self._lock:
            self.metrics.code_collisions += 1
        CODE_COLLISIONS.inc()

    async def record_booking_cancelled(self, seats_released: int = 0):
        async with self._lock:
            self.metrics.cancellations += 1
            self.metrics.seats_released += seats_released

    async def record_payment(self, success: bool):
        async with self._lock:
            if success:
                self.metrics.payments_succeeded += 1
            else:
                self.metrics.payments_declined += 1
        PAYMENT_ATTEMPTS.labels(outcome="success" if success else "declined").inc()

    async def get_metrics(self) -> Dict:
        async with self._lock:
            return self.metrics.to_dict()


metrics_collector = MetricsCollector()

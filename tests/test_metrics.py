"""
Tests for the in-process booking metrics
"""

import pytest

from ferrybook.core.exceptions import InsufficientCapacity
from ferrybook.core.metrics import MetricsCollector


@pytest.mark.asyncio
class TestMetricsCollector:

    async def test_outcomes_are_counted(self):
        collector = MetricsCollector()

        async with collector.track_booking_operation("create_booking"):
            pass
        await collector.record_booking_created(3)

        with pytest.raises(InsufficientCapacity):
            async with collector.track_booking_operation("create_booking"):
                raise InsufficientCapacity("schedule", requested=4, available=1)

        with pytest.raises(RuntimeError):
            async with collector.track_booking_operation("create_booking"):
                raise RuntimeError("database went away")

        snapshot = await collector.get_metrics()

        assert snapshot["bookings"]["created"] == 1
        assert snapshot["bookings"]["rejected"] == {"INSUFFICIENT_CAPACITY": 1}
        assert snapshot["bookings"]["errors"] == 1
        assert snapshot["seats"]["reserved"] == 3
        assert snapshot["latency_ms"]["max"] >= snapshot["latency_ms"]["p50"]

    async def test_cancellations_and_payments(self):
        collector = MetricsCollector()

        await collector.record_booking_cancelled()
        await collector.record_booking_cancelled(seats_released=2)
        await collector.record_payment(True)
        await collector.record_payment(False)
        await collector.record_payment(False)

        snapshot = await collector.get_metrics()

        assert snapshot["bookings"]["cancelled"] == 2
        assert snapshot["seats"]["released"] == 2
        assert snapshot["payments"] == {"succeeded": 1, "declined": 2}

    async def test_empty_latency(self):
        snapshot = await MetricsCollector().get_metrics()
        assert snapshot["latency_ms"] == {"p50": 0.0, "p95": 0.0, "max": 0.0}


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    response = await client.get("/api/v1/health/metrics")

    assert response.status_code == 200
    assert set(response.json()) == {"bookings", "seats", "payments", "latency_ms"}

"""
Application Use Cases — Telemetry Ingestion and Charging Analytics

Ingestion runs every payload through three steps:

1. Discrimination: meterId vs vehicleId presence picks exactly one variant.
2. Validation: the variant's serializer collects every violated constraint.
3. Dual write: inside one transaction, append the reading to history (cold)
   and upsert the device's latest state (hot).

Steps 1 and 2 never touch storage. Step 3 either commits both writes or
neither; any database failure (``django.db.Error``, which also covers
interface errors such as a closed connection) surfaces as
``PersistenceFailed`` and nothing is retried here.

Analytics computes a 24-hour summary for one vehicle from two independent
aggregate reads over the history tables, sharing a single ``since`` bound.

Both use cases receive their repository at construction. The module-level
functions wire the Django ORM repository for callers that do not care.
"""

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django import db
from django.utils import timezone

from telemetry.application.validation import validate_reading
from telemetry.domain.discriminator import discriminate
from telemetry.domain.exceptions import PersistenceFailed, QueryFailed
from telemetry.domain.ports import TelemetryRepository
from telemetry.domain.readings import (
    DeviceType,
    IngestionResult,
    PerformanceSummary,
)
from telemetry.infrastructure.repositories import DjangoTelemetryRepository

logger = logging.getLogger(__name__)

PERFORMANCE_WINDOW = timedelta(hours=24)

ENERGY_PRECISION = Decimal("0.0001")
RATIO_PRECISION = Decimal("0.01")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _as_decimal(value):
    # Empty windows aggregate to NULL.
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _quantize(value, precision):
    return value.quantize(precision, rounding=ROUND_HALF_UP)


class TelemetryIngestion:
    """Discriminates, validates and dual-writes one telemetry payload."""

    def __init__(self, repository: TelemetryRepository):
        self.repository = repository

    def ingest(self, payload):
        device_type = discriminate(payload)
        reading = validate_reading(payload, device_type)

        try:
            with self.repository.atomic():
                if device_type is DeviceType.METER:
                    self.repository.append_meter_reading(reading)
                    self.repository.upsert_meter_state(reading)
                else:
                    self.repository.append_vehicle_reading(reading)
                    self.repository.upsert_vehicle_state(reading)
        except db.Error as exc:
            logger.exception(
                "Dual write rolled back: type=%s device=%s",
                device_type, reading.device_id,
            )
            raise PersistenceFailed(device_type, reading.device_id) from exc

        logger.info(
            "Ingested telemetry: type=%s device=%s timestamp=%s",
            device_type, reading.device_id, reading.timestamp.isoformat(),
        )

        return IngestionResult(
            type=device_type,
            device_id=reading.device_id,
            timestamp=reading.timestamp,
        )


class PerformanceAnalytics:
    """
    Computes the 24-hour charging summary for a vehicle.

    The AC denominator is fleet-wide: there is no meter-to-vehicle mapping,
    so every meter reading in the window counts.
    """

    def __init__(self, repository: TelemetryRepository, clock=timezone.now):
        self.repository = repository
        self.clock = clock

    def get_performance(self, vehicle_id):
        since = self.clock() - PERFORMANCE_WINDOW

        try:
            total_ac = self.repository.sum_fleet_ac_since(since)
            total_dc, avg_temp = self.repository.vehicle_dc_and_temp_since(
                vehicle_id, since
            )
        except db.Error as exc:
            logger.exception(
                "Performance query failed: vehicle=%s since=%s",
                vehicle_id, since.isoformat(),
            )
            raise QueryFailed(vehicle_id) from exc

        total_ac = _as_decimal(total_ac)
        total_dc = _as_decimal(total_dc)
        avg_temp = _as_decimal(avg_temp)

        if total_ac > ZERO:
            efficiency = total_dc / total_ac * HUNDRED
        else:
            efficiency = ZERO

        return PerformanceSummary(
            vehicle_id=vehicle_id,
            total_ac_kwh=_quantize(total_ac, ENERGY_PRECISION),
            total_dc_kwh=_quantize(total_dc, ENERGY_PRECISION),
            efficiency=_quantize(efficiency, RATIO_PRECISION),
            avg_battery_temp=_quantize(avg_temp, RATIO_PRECISION),
        )


def ingest_telemetry(payload):
    return TelemetryIngestion(DjangoTelemetryRepository()).ingest(payload)


def get_vehicle_performance(vehicle_id):
    return PerformanceAnalytics(DjangoTelemetryRepository()).get_performance(
        vehicle_id
    )


def get_latest_state(device_type, device_id):
    """Hot-storage point lookup; returns ``None`` for unknown devices."""
    repository = DjangoTelemetryRepository()
    if device_type is DeviceType.METER:
        return repository.get_meter_state(device_id)
    return repository.get_vehicle_state(device_id)

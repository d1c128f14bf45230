"""
Persistence Models — Telemetry Domain (Django ORM)

Two storage representations are kept for every device class:

- Cold storage (``*ReadingHistory``): append-only audit trail, one row per
  ingested reading. Rows are never updated or deleted and are the only
  source of truth for analytics.
- Hot storage (``*LatestState``): one row per device id, overwritten on
  every ingest through a single INSERT ... ON CONFLICT DO UPDATE.

Key architectural decisions:

- The history tables carry a composite index on (device_id, timestamp) so
  the 24-hour window and the per-device filter never scan the full table.
  Meter history also indexes timestamp alone for the fleet-wide AC total.
- The latest-state tables use the device id as primary key, which is what
  makes the upsert well-defined.
- ``timestamp`` / ``last_seen_at`` hold the device's event time;
  ``created_at`` / ``updated_at`` hold ingestion time.
"""

import uuid

from django.db import models


class MeterReadingHistory(models.Model):
    """Grid-side AC consumption sample (cold storage)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    meter_id = models.CharField(max_length=255)
    kwh_consumed_ac = models.DecimalField(max_digits=12, decimal_places=4)
    voltage = models.DecimalField(max_digits=8, decimal_places=2)
    timestamp = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "meter_readings_history"
        indexes = [
            models.Index(
                fields=["meter_id", "timestamp"],
                name="idx_meter_history_meter_ts",
            ),
            models.Index(fields=["timestamp"], name="idx_meter_history_ts"),
        ]

    def __str__(self):
        return f"Meter {self.meter_id} @ {self.timestamp} - {self.kwh_consumed_ac} kWh AC"


class VehicleReadingHistory(models.Model):
    """Vehicle-side DC delivery sample (cold storage)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    vehicle_id = models.CharField(max_length=255)
    soc = models.DecimalField(max_digits=5, decimal_places=2)
    kwh_delivered_dc = models.DecimalField(max_digits=12, decimal_places=4)
    battery_temp = models.DecimalField(max_digits=5, decimal_places=2)
    timestamp = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "vehicle_readings_history"
        indexes = [
            models.Index(
                fields=["vehicle_id", "timestamp"],
                name="idx_vehicle_history_veh_ts",
            ),
        ]

    def __str__(self):
        return f"Vehicle {self.vehicle_id} @ {self.timestamp} - {self.kwh_delivered_dc} kWh DC"


class MeterLatestState(models.Model):
    """Latest known state per meter (hot storage)."""

    meter_id = models.CharField(max_length=255, primary_key=True)
    kwh_consumed_ac = models.DecimalField(max_digits=12, decimal_places=4)
    voltage = models.DecimalField(max_digits=8, decimal_places=2)
    last_seen_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "meter_latest_state"

    def __str__(self):
        return f"Meter {self.meter_id} last seen {self.last_seen_at}"


class VehicleLatestState(models.Model):
    """Latest known state per vehicle (hot storage)."""

    vehicle_id = models.CharField(max_length=255, primary_key=True)
    soc = models.DecimalField(max_digits=5, decimal_places=2)
    kwh_delivered_dc = models.DecimalField(max_digits=12, decimal_places=4)
    battery_temp = models.DecimalField(max_digits=5, decimal_places=2)
    last_seen_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "vehicle_latest_state"

    def __str__(self):
        return f"Vehicle {self.vehicle_id} last seen {self.last_seen_at}"

"""
Infrastructure Adapter — Django ORM Telemetry Repository

Implements ``telemetry.domain.ports.TelemetryRepository`` on top of the
models in ``telemetry.models``.

Guarantees relied upon by the use cases:

- ``atomic()`` is ``transaction.atomic()`` on the configured database alias,
  so leaving the block with an exception rolls back every write made in it.
- Latest-state upserts are a single INSERT ... ON CONFLICT (device_id)
  DO UPDATE statement (``bulk_create(update_conflicts=True)``). Two
  concurrent ingests for one device cannot interleave into a lost update;
  whichever commits last wins.
- Aggregate reads return ``None`` when the window holds no rows; the caller
  decides how to interpret that.
"""

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Avg, Sum

from telemetry.models import (
    MeterLatestState,
    MeterReadingHistory,
    VehicleLatestState,
    VehicleReadingHistory,
)

METER_STATE_FIELDS = ["kwh_consumed_ac", "voltage", "last_seen_at", "updated_at"]
VEHICLE_STATE_FIELDS = [
    "soc",
    "kwh_delivered_dc",
    "battery_temp",
    "last_seen_at",
    "updated_at",
]


class DjangoTelemetryRepository:
    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def append_meter_reading(self, reading):
        MeterReadingHistory.objects.using(self.using).create(
            meter_id=reading.meter_id,
            kwh_consumed_ac=reading.kwh_consumed_ac,
            voltage=reading.voltage,
            timestamp=reading.timestamp,
        )

    def append_vehicle_reading(self, reading):
        VehicleReadingHistory.objects.using(self.using).create(
            vehicle_id=reading.vehicle_id,
            soc=reading.soc,
            kwh_delivered_dc=reading.kwh_delivered_dc,
            battery_temp=reading.battery_temp,
            timestamp=reading.timestamp,
        )

    def upsert_meter_state(self, reading):
        state = MeterLatestState(
            meter_id=reading.meter_id,
            kwh_consumed_ac=reading.kwh_consumed_ac,
            voltage=reading.voltage,
            last_seen_at=reading.timestamp,
        )
        MeterLatestState.objects.using(self.using).bulk_create(
            [state],
            update_conflicts=True,
            unique_fields=["meter_id"],
            update_fields=METER_STATE_FIELDS,
        )

    def upsert_vehicle_state(self, reading):
        state = VehicleLatestState(
            vehicle_id=reading.vehicle_id,
            soc=reading.soc,
            kwh_delivered_dc=reading.kwh_delivered_dc,
            battery_temp=reading.battery_temp,
            last_seen_at=reading.timestamp,
        )
        VehicleLatestState.objects.using(self.using).bulk_create(
            [state],
            update_conflicts=True,
            unique_fields=["vehicle_id"],
            update_fields=VEHICLE_STATE_FIELDS,
        )

    def get_meter_state(self, meter_id):
        return (
            MeterLatestState.objects.using(self.using)
            .filter(meter_id=meter_id)
            .first()
        )

    def get_vehicle_state(self, vehicle_id):
        return (
            VehicleLatestState.objects.using(self.using)
            .filter(vehicle_id=vehicle_id)
            .first()
        )

    def sum_fleet_ac_since(self, since):
        # Fleet level: deliberately not filtered by meter_id.
        result = (
            MeterReadingHistory.objects.using(self.using)
            .filter(timestamp__gte=since)
            .aggregate(total_ac=Sum("kwh_consumed_ac"))
        )
        return result["total_ac"]

    def vehicle_dc_and_temp_since(self, vehicle_id, since):
        result = (
            VehicleReadingHistory.objects.using(self.using)
            .filter(vehicle_id=vehicle_id, timestamp__gte=since)
            .aggregate(
                total_dc=Sum("kwh_delivered_dc"),
                avg_temp=Avg("battery_temp"),
            )
        )
        return result["total_dc"], result["avg_temp"]

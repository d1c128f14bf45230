"""
Domain Value Types — Telemetry Readings

Normalized, immutable readings produced by validation and consumed by the
persistence and analytics use cases. They are deliberately decoupled from the
ORM rows in ``telemetry.models`` so the use cases can run against any
repository implementation.

Energy, voltage, SOC and temperature values are carried as ``Decimal`` to
match the DECIMAL columns they are stored in.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class DeviceType(str, enum.Enum):
    METER = "meter"
    VEHICLE = "vehicle"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class MeterReading:
    """Grid-side AC consumption sample from a smart meter."""

    meter_id: str
    kwh_consumed_ac: Decimal
    voltage: Decimal
    timestamp: datetime

    device_type = DeviceType.METER

    @property
    def device_id(self):
        return self.meter_id


@dataclass(frozen=True)
class VehicleReading:
    """Vehicle-side DC delivery sample."""

    vehicle_id: str
    soc: Decimal
    kwh_delivered_dc: Decimal
    battery_temp: Decimal
    timestamp: datetime

    device_type = DeviceType.VEHICLE

    @property
    def device_id(self):
        return self.vehicle_id


@dataclass(frozen=True)
class IngestionResult:
    type: DeviceType
    device_id: str
    timestamp: datetime

    def as_dict(self):
        return {
            "type": self.type.value,
            "deviceId": self.device_id,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PerformanceSummary:
    """24-hour charging summary for one vehicle, already rounded."""

    vehicle_id: str
    total_ac_kwh: Decimal
    total_dc_kwh: Decimal
    efficiency: Decimal
    avg_battery_temp: Decimal

    def as_dict(self):
        return {
            "vehicleId": self.vehicle_id,
            "totalAcKwh": float(self.total_ac_kwh),
            "totalDcKwh": float(self.total_dc_kwh),
            "efficiency": float(self.efficiency),
            "avgBatteryTemp": float(self.avg_battery_temp),
        }

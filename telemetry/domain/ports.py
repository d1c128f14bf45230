"""
Repository Port — Telemetry Storage

The use cases depend on this interface only. The Django ORM adapter lives in
``telemetry.infrastructure.repositories``; tests substitute in-memory fakes.
"""

from datetime import datetime
from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Tuple

from telemetry.domain.readings import MeterReading, VehicleReading


class TelemetryRepository(Protocol):
    def atomic(self) -> ContextManager:
        """Delimits one transaction; leaving it with an exception rolls back."""

    # Cold storage: append-only history.

    def append_meter_reading(self, reading: MeterReading) -> None: ...

    def append_vehicle_reading(self, reading: VehicleReading) -> None: ...

    # Hot storage: one row per device, insert-or-overwrite in one statement.

    def upsert_meter_state(self, reading: MeterReading) -> None: ...

    def upsert_vehicle_state(self, reading: VehicleReading) -> None: ...

    def get_meter_state(self, meter_id: str): ...

    def get_vehicle_state(self, vehicle_id: str): ...

    # Analytics reads over history.

    def sum_fleet_ac_since(self, since: datetime) -> Optional[Decimal]: ...

    def vehicle_dc_and_temp_since(
        self, vehicle_id: str, since: datetime
    ) -> Tuple[Optional[Decimal], Optional[Decimal]]: ...

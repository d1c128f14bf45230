from collections.abc import Mapping

from telemetry.domain.exceptions import AmbiguousPayload, MissingDiscriminator
from telemetry.domain.readings import DeviceType

METER_MARKER = "meterId"
VEHICLE_MARKER = "vehicleId"


def discriminate(payload):
    """
    Classifies a raw payload as meter or vehicle telemetry.

    Only the presence of the two marker keys is inspected; their values and
    every other field are left to validation.
    """
    if not isinstance(payload, Mapping):
        raise MissingDiscriminator()

    has_meter_id = METER_MARKER in payload
    has_vehicle_id = VEHICLE_MARKER in payload

    if has_meter_id and has_vehicle_id:
        raise AmbiguousPayload()
    if has_meter_id:
        return DeviceType.METER
    if has_vehicle_id:
        return DeviceType.VEHICLE
    raise MissingDiscriminator()

"""
Payload Validation — Meter and Vehicle Telemetry (Django REST Framework)

One serializer per discriminated variant. DRF runs every field before
reporting, so all violated constraints of a payload are returned together
instead of stopping at the first one.

Numbers must arrive as JSON numbers: numeric text, booleans, NaN and
infinities are rejected rather than coerced.
"""

import logging
import math
from datetime import timezone
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from rest_framework import serializers
from rest_framework.settings import ISO_8601

from telemetry.domain.exceptions import ValidationFailed
from telemetry.domain.readings import DeviceType, MeterReading, VehicleReading

logger = logging.getLogger(__name__)

# Largest value a DECIMAL(12, 4) energy column can hold.
MAX_ENERGY_KWH = Decimal("99999999.9999")


class StrictTextField(serializers.CharField):
    default_error_messages = {
        "invalid": "Must be a non-empty string.",
    }

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class StrictNumberField(serializers.Field):
    """A JSON number normalized to ``Decimal``, with optional inclusive bounds."""

    default_error_messages = {
        "invalid": "A valid number is required.",
        "max_value": "Ensure this value is less than or equal to {max_value}.",
        "min_value": "Ensure this value is greater than or equal to {min_value}.",
    }

    def __init__(self, min_value=None, max_value=None, **kwargs):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(**kwargs)
        if max_value is not None:
            message = self.error_messages["max_value"].format(max_value=max_value)
            self.validators.append(MaxValueValidator(max_value, message=message))
        if min_value is not None:
            message = self.error_messages["min_value"].format(min_value=min_value)
            self.validators.append(MinValueValidator(min_value, message=message))

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail("invalid")
        if isinstance(data, float) and not math.isfinite(data):
            self.fail("invalid")
        return Decimal(str(data))

    def to_representation(self, value):
        return float(value)


def _timestamp_field():
    return serializers.DateTimeField(
        input_formats=[ISO_8601],
        default_timezone=timezone.utc,
    )


class MeterTelemetrySerializer(serializers.Serializer):
    meterId = StrictTextField(max_length=255)
    kwhConsumedAc = StrictNumberField(min_value=0, max_value=MAX_ENERGY_KWH)
    voltage = StrictNumberField(min_value=0, max_value=500)
    timestamp = _timestamp_field()

    def to_reading(self):
        data = self.validated_data
        return MeterReading(
            meter_id=data["meterId"],
            kwh_consumed_ac=data["kwhConsumedAc"],
            voltage=data["voltage"],
            timestamp=data["timestamp"],
        )


class VehicleTelemetrySerializer(serializers.Serializer):
    vehicleId = StrictTextField(max_length=255)
    soc = StrictNumberField(min_value=0, max_value=100)
    kwhDeliveredDc = StrictNumberField(min_value=0, max_value=MAX_ENERGY_KWH)
    batteryTemp = StrictNumberField(min_value=-50, max_value=100)
    timestamp = _timestamp_field()

    def to_reading(self):
        data = self.validated_data
        return VehicleReading(
            vehicle_id=data["vehicleId"],
            soc=data["soc"],
            kwh_delivered_dc=data["kwhDeliveredDc"],
            battery_temp=data["batteryTemp"],
            timestamp=data["timestamp"],
        )


SERIALIZERS = {
    DeviceType.METER: MeterTelemetrySerializer,
    DeviceType.VEHICLE: VehicleTelemetrySerializer,
}


def validate_reading(payload, device_type):
    """
    Validates a payload against its discriminated variant only.

    Returns a normalized ``MeterReading`` or ``VehicleReading``; raises
    ``ValidationFailed`` carrying every violation otherwise.
    """
    serializer = SERIALIZERS[device_type](data=payload)

    if not serializer.is_valid():
        errors = {
            field: [str(message) for message in messages]
            for field, messages in serializer.errors.items()
        }
        logger.warning(
            "Rejected %s payload: fields=%s", device_type, sorted(errors),
        )
        raise ValidationFailed(device_type, errors)

    return serializer.to_reading()

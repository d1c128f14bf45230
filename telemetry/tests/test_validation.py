from datetime import datetime, timezone
from decimal import Decimal

from django.test import SimpleTestCase

from telemetry.application.validation import MAX_ENERGY_KWH, validate_reading
from telemetry.domain.exceptions import ValidationFailed
from telemetry.domain.readings import DeviceType, MeterReading, VehicleReading

VALID_METER = {
    "meterId": "M123",
    "kwhConsumedAc": 100,
    "voltage": 220,
    "timestamp": "2023-01-01T00:00:00Z",
}

VALID_VEHICLE = {
    "vehicleId": "V123",
    "soc": 50,
    "kwhDeliveredDc": 80.5,
    "batteryTemp": -12.25,
    "timestamp": "2023-01-01T02:00:00+02:00",
}


class MeterValidationTest(SimpleTestCase):
    def test_valid_payload_is_normalized(self):
        reading = validate_reading(VALID_METER, DeviceType.METER)

        self.assertIsInstance(reading, MeterReading)
        self.assertEqual(reading.meter_id, "M123")
        self.assertEqual(reading.kwh_consumed_ac, Decimal("100"))
        self.assertEqual(reading.voltage, Decimal("220"))
        self.assertEqual(
            reading.timestamp, datetime(2023, 1, 1, tzinfo=timezone.utc)
        )

    def test_non_numeric_text_is_rejected(self):
        payload = {**VALID_METER, "kwhConsumedAc": "NOT_A_NUMBER"}

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.METER)

        self.assertEqual(list(ctx.exception.errors), ["kwhConsumedAc"])
        self.assertIn("kwhConsumedAc", str(ctx.exception))

    def test_numeric_text_and_booleans_are_not_coerced(self):
        payload = {**VALID_METER, "kwhConsumedAc": "100", "voltage": True}

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.METER)

        self.assertEqual(set(ctx.exception.errors), {"kwhConsumedAc", "voltage"})

    def test_all_violations_are_reported_together(self):
        payload = {
            "meterId": "",
            "kwhConsumedAc": -1,
            "voltage": 600,
            "timestamp": "yesterday",
        }

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.METER)

        errors = ctx.exception.errors
        self.assertEqual(
            set(errors), {"meterId", "kwhConsumedAc", "voltage", "timestamp"}
        )
        message = str(ctx.exception)
        self.assertTrue(message.startswith("Validation failed: "))
        for field in errors:
            self.assertIn(field, message)

    def test_missing_fields_are_required(self):
        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading({"meterId": "M1"}, DeviceType.METER)

        self.assertEqual(
            set(ctx.exception.errors), {"kwhConsumedAc", "voltage", "timestamp"}
        )

    def test_voltage_bounds_are_inclusive(self):
        for voltage in (0, 500):
            reading = validate_reading(
                {**VALID_METER, "voltage": voltage}, DeviceType.METER
            )
            self.assertEqual(reading.voltage, Decimal(voltage))

    def test_zero_energy_is_accepted(self):
        reading = validate_reading(
            {**VALID_METER, "kwhConsumedAc": 0}, DeviceType.METER
        )

        self.assertEqual(reading.kwh_consumed_ac, Decimal("0"))

    def test_energy_is_capped_at_column_capacity(self):
        reading = validate_reading(
            {**VALID_METER, "kwhConsumedAc": 99999999.9999}, DeviceType.METER
        )
        self.assertEqual(reading.kwh_consumed_ac, MAX_ENERGY_KWH)

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(
                {**VALID_METER, "kwhConsumedAc": 100000000}, DeviceType.METER
            )
        self.assertEqual(list(ctx.exception.errors), ["kwhConsumedAc"])

    def test_non_finite_floats_are_rejected(self):
        payload = {
            **VALID_METER,
            "kwhConsumedAc": float("nan"),
            "voltage": float("inf"),
        }

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.METER)

        self.assertEqual(set(ctx.exception.errors), {"kwhConsumedAc", "voltage"})

    def test_null_meter_id_is_rejected(self):
        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading({**VALID_METER, "meterId": None}, DeviceType.METER)

        self.assertIn("meterId", ctx.exception.errors)

    def test_naive_timestamp_is_treated_as_utc(self):
        reading = validate_reading(
            {**VALID_METER, "timestamp": "2023-06-01T12:30:00"}, DeviceType.METER
        )

        self.assertEqual(
            reading.timestamp, datetime(2023, 6, 1, 12, 30, tzinfo=timezone.utc)
        )


class VehicleValidationTest(SimpleTestCase):
    def test_valid_payload_is_normalized(self):
        reading = validate_reading(VALID_VEHICLE, DeviceType.VEHICLE)

        self.assertIsInstance(reading, VehicleReading)
        self.assertEqual(reading.vehicle_id, "V123")
        self.assertEqual(reading.soc, Decimal("50"))
        self.assertEqual(reading.kwh_delivered_dc, Decimal("80.5"))
        self.assertEqual(reading.battery_temp, Decimal("-12.25"))
        self.assertEqual(
            reading.timestamp, datetime(2023, 1, 1, tzinfo=timezone.utc)
        )

    def test_out_of_range_values_are_rejected(self):
        payload = {**VALID_VEHICLE, "soc": 101, "batteryTemp": -51}

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.VEHICLE)

        self.assertEqual(set(ctx.exception.errors), {"soc", "batteryTemp"})

    def test_meter_fields_do_not_satisfy_vehicle_schema(self):
        payload = {"vehicleId": "V1", **{k: v for k, v in VALID_METER.items() if k != "meterId"}}

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.VEHICLE)

        self.assertEqual(
            set(ctx.exception.errors), {"soc", "kwhDeliveredDc", "batteryTemp"}
        )

    def test_range_bounds_are_inclusive(self):
        for soc, temp in ((0, -50), (100, 100)):
            reading = validate_reading(
                {**VALID_VEHICLE, "soc": soc, "batteryTemp": temp, "kwhDeliveredDc": 0},
                DeviceType.VEHICLE,
            )
            self.assertEqual(reading.soc, Decimal(soc))
            self.assertEqual(reading.battery_temp, Decimal(temp))
            self.assertEqual(reading.kwh_delivered_dc, Decimal("0"))

    def test_values_just_outside_bounds_are_rejected(self):
        payload = {
            **VALID_VEHICLE,
            "soc": -0.01,
            "batteryTemp": 100.01,
            "kwhDeliveredDc": -0.0001,
        }

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.VEHICLE)

        self.assertEqual(
            set(ctx.exception.errors), {"soc", "batteryTemp", "kwhDeliveredDc"}
        )

    def test_energy_above_column_capacity_is_rejected(self):
        payload = {**VALID_VEHICLE, "kwhDeliveredDc": 100000000.0}

        with self.assertRaises(ValidationFailed) as ctx:
            validate_reading(payload, DeviceType.VEHICLE)

        self.assertIn(str(MAX_ENERGY_KWH), ctx.exception.errors["kwhDeliveredDc"][0])

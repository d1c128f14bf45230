class TelemetryError(Exception):
    """Base class for every failure surfaced by the telemetry core."""

    code = "telemetry_error"


class AmbiguousPayload(TelemetryError):
    """Raised when a payload carries both meterId and vehicleId."""

    code = "ambiguous_payload"

    def __init__(self):
        super().__init__(
            "Ambiguous payload: contains both meterId and vehicleId"
        )


class MissingDiscriminator(TelemetryError):
    """Raised when a payload carries neither meterId nor vehicleId."""

    code = "missing_discriminator"

    def __init__(self):
        super().__init__(
            "Invalid payload: must contain either meterId or vehicleId"
        )


class ValidationFailed(TelemetryError):
    """Raised when one or more field constraints are violated.

    ``errors`` maps each offending field to the list of its violations, so a
    caller can fix every problem from a single response.
    """

    code = "validation_failed"

    def __init__(self, device_type, errors):
        self.device_type = device_type
        self.errors = errors
        messages = "; ".join(
            f"{field}: {', '.join(str(m) for m in field_messages)}"
            for field, field_messages in errors.items()
        )
        super().__init__(f"Validation failed: {messages}")


class PersistenceFailed(TelemetryError):
    """Raised when the dual-write transaction could not commit."""

    code = "persistence_failed"

    def __init__(self, device_type, device_id):
        self.device_type = device_type
        self.device_id = device_id
        super().__init__(
            f"Could not persist {device_type} reading for {device_id}; "
            "nothing was committed"
        )


class QueryFailed(TelemetryError):
    """Raised when an analytics aggregate read could not complete."""

    code = "query_failed"

    def __init__(self, vehicle_id):
        self.vehicle_id = vehicle_id
        super().__init__(
            f"Could not compute performance summary for vehicle {vehicle_id}"
        )

"""
API Layer — Telemetry Ingestion and Analytics Endpoints (Django REST Framework)

Thin controllers following the "fat application / thin transport layer"
principle. Their responsibilities are limited to:

- Handing the raw request body to the application use case
- Translating domain exceptions into HTTP responses
- Serializing the use case results

No discrimination, validation or transactional logic lives here. Rejected
input maps to 400, storage failures to 503, unknown hot-state lookups to 404.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from telemetry.application.use_cases import (
    get_latest_state,
    get_vehicle_performance,
    ingest_telemetry,
)
from telemetry.domain.exceptions import (
    AmbiguousPayload,
    MissingDiscriminator,
    PersistenceFailed,
    QueryFailed,
    ValidationFailed,
)
from telemetry.domain.readings import DeviceType


def _error(exc, http_status, **extra):
    return Response(
        {"error": str(exc), "code": exc.code, **extra},
        status=http_status,
    )


class IngestTelemetryView(APIView):
    """
    POST /v1/telemetry/ingest

    Accepts either a meter or a vehicle payload:
    - Meter: { meterId, kwhConsumedAc, voltage, timestamp }
    - Vehicle: { vehicleId, soc, kwhDeliveredDc, batteryTemp, timestamp }
    """

    def post(self, request):
        try:
            result = ingest_telemetry(request.data)
        except (AmbiguousPayload, MissingDiscriminator) as exc:
            return _error(exc, status.HTTP_400_BAD_REQUEST)
        except ValidationFailed as exc:
            return _error(exc, status.HTTP_400_BAD_REQUEST, details=exc.errors)
        except PersistenceFailed as exc:
            return _error(exc, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            {"success": True, **result.as_dict()},
            status=status.HTTP_201_CREATED,
        )


class VehiclePerformanceView(APIView):
    """GET /v1/analytics/performance/<vehicle_id> — 24-hour charging summary."""

    def get(self, request, vehicle_id):
        try:
            summary = get_vehicle_performance(vehicle_id)
        except QueryFailed as exc:
            return _error(exc, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(summary.as_dict(), status=status.HTTP_200_OK)


class LatestStateView(APIView):
    """GET /v1/telemetry/{meters,vehicles}/<device_id>/latest — hot-storage lookup."""

    device_type = None

    def get(self, request, device_id):
        state = get_latest_state(self.device_type, device_id)

        if state is None:
            return Response(
                {"error": f"No telemetry received for {self.device_type} {device_id}."},
                status=status.HTTP_404_NOT_FOUND,
            )

        if self.device_type is DeviceType.METER:
            body = {
                "meterId": state.meter_id,
                "kwhConsumedAc": float(state.kwh_consumed_ac),
                "voltage": float(state.voltage),
            }
        else:
            body = {
                "vehicleId": state.vehicle_id,
                "soc": float(state.soc),
                "kwhDeliveredDc": float(state.kwh_delivered_dc),
                "batteryTemp": float(state.battery_temp),
            }
        body["lastSeenAt"] = state.last_seen_at.isoformat()
        body["updatedAt"] = state.updated_at.isoformat()

        return Response(body, status=status.HTTP_200_OK)

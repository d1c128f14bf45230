from django.urls import path

from .views import IngestTelemetryView, LatestStateView, VehiclePerformanceView
from telemetry.domain.readings import DeviceType

urlpatterns = [
    path("telemetry/ingest", IngestTelemetryView.as_view(), name="telemetry-ingest"),
    path(
        "telemetry/meters/<str:device_id>/latest",
        LatestStateView.as_view(device_type=DeviceType.METER),
        name="meter-latest-state",
    ),
    path(
        "telemetry/vehicles/<str:device_id>/latest",
        LatestStateView.as_view(device_type=DeviceType.VEHICLE),
        name="vehicle-latest-state",
    ),
    path(
        "analytics/performance/<str:vehicle_id>",
        VehiclePerformanceView.as_view(),
        name="vehicle-performance",
    ),
]

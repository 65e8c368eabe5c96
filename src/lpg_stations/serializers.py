"""Serializers for the LPG stations API."""

from typing import Any, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers

from lpg_stations.models import (
    AvailabilityLogEntry,
    ManagerAssignment,
    PriceHistoryEntry,
    Station,
)
from lpg_stations.services.directory import SORT_FIELDS


class StationSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    """Read representation of a station; `distance_km` is set by radius searches."""

    latitude = serializers.FloatField(read_only=True)
    longitude = serializers.FloatField(read_only=True)
    distance_km = serializers.SerializerMethodField()

    class Meta:
        model = Station
        fields = [
            "id",
            "name",
            "address",
            "phone",
            "email",
            "is_available",
            "is_active",
            "price_per_kg",
            "operating_hours",
            "image",
            "latitude",
            "longitude",
            "distance_km",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_distance_km(self, obj: Station) -> Optional[float]:
        distance = getattr(obj, "distance_km", None)
        return round(distance, 3) if distance is not None else None


class StationWriteSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    """Validates station create and update payloads."""

    class Meta:
        model = Station
        fields = [
            "name",
            "address",
            "phone",
            "email",
            "latitude",
            "longitude",
            "operating_hours",
            "price_per_kg",
            "image",
            "is_available",
        ]


class StationListFilterSerializer(serializers.Serializer):  # type: ignore[misc]
    """Query parameters accepted by the station list."""

    assigned = serializers.BooleanField(required=False, allow_null=True)
    available = serializers.BooleanField(required=False)
    latitude = serializers.FloatField(required=False, min_value=-90.0, max_value=90.0)
    longitude = serializers.FloatField(required=False, min_value=-180.0, max_value=180.0)
    radius = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.STATION_SEARCH_MAX_RADIUS_KM,
    )
    sort_by = serializers.ChoiceField(choices=SORT_FIELDS, required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """Latitude and longitude only make sense together."""
        if ("latitude" in attrs) != ("longitude" in attrs):
            raise serializers.ValidationError(
                "Latitude and longitude must be provided together"
            )
        return attrs


class NearbySearchSerializer(serializers.Serializer):  # type: ignore[misc]
    """Serializer for a nearby station search request."""

    latitude = serializers.FloatField(
        min_value=-90.0,
        max_value=90.0,
        help_text="User latitude (-90 to 90)",
    )
    longitude = serializers.FloatField(
        min_value=-180.0,
        max_value=180.0,
        help_text="User longitude (-180 to 180)",
    )
    radius = serializers.IntegerField(
        min_value=1,
        max_value=settings.STATION_SEARCH_MAX_RADIUS_KM,
        default=settings.STATION_SEARCH_DEFAULT_RADIUS_KM,
        help_text="Search radius in kilometers",
    )
    available_only = serializers.BooleanField(
        default=False, help_text="Return only stations that are currently available"
    )


class NearbyResponseSerializer(serializers.Serializer):  # type: ignore[misc]
    message = serializers.CharField(read_only=True)
    data = StationSerializer(many=True, read_only=True)
    available_count = serializers.IntegerField(read_only=True)
    unavailable_count = serializers.IntegerField(read_only=True)
    radius_km = serializers.IntegerField(read_only=True)
    note = serializers.CharField(read_only=True, required=False)


class AvailabilitySerializer(serializers.Serializer):  # type: ignore[misc]
    is_available = serializers.BooleanField()


class PriceUpdateSerializer(serializers.Serializer):  # type: ignore[misc]
    # Negative prices are rejected by the directory service
    price_per_kg = serializers.DecimalField(max_digits=10, decimal_places=2)


class StatusSerializer(serializers.Serializer):  # type: ignore[misc]
    is_active = serializers.BooleanField()


class AssignManagerSerializer(serializers.Serializer):  # type: ignore[misc]
    manager_id = serializers.UUIDField()


class RemoveManagerSerializer(serializers.Serializer):  # type: ignore[misc]
    removal_reason = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )


class UserSummarySerializer(serializers.ModelSerializer):  # type: ignore[misc]
    class Meta:
        model = get_user_model()
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


class ManagerAssignmentSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    """One ledger row with the people involved expanded."""

    station_id = serializers.UUIDField(read_only=True)
    manager = UserSummarySerializer(read_only=True)
    assigned_by = UserSummarySerializer(read_only=True)
    removed_by = UserSummarySerializer(read_only=True)
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = ManagerAssignment
        fields = [
            "id",
            "station_id",
            "manager",
            "assigned_by",
            "assigned_at",
            "removed_at",
            "removed_by",
            "removal_reason",
            "is_active",
        ]
        read_only_fields = fields


class PriceHistorySerializer(serializers.ModelSerializer):  # type: ignore[misc]
    station_id = serializers.UUIDField(read_only=True)
    updated_by = serializers.UUIDField(source="updated_by_id", read_only=True)

    class Meta:
        model = PriceHistoryEntry
        fields = ["id", "station_id", "price_per_kg", "effective_from", "updated_by", "created_at"]
        read_only_fields = fields


class AvailabilityLogSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    station_id = serializers.UUIDField(read_only=True)
    changed_by = serializers.UUIDField(source="changed_by_id", read_only=True)

    class Meta:
        model = AvailabilityLogEntry
        fields = ["id", "station_id", "is_available", "changed_by", "changed_at"]
        read_only_fields = fields

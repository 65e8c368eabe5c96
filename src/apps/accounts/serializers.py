"""Serializers for station managers and the current user."""

from typing import Any

from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import User
from .services import get_assignment_status


class AssignmentStatusSerializer(serializers.Serializer):  # type: ignore[misc]
    is_assigned = serializers.BooleanField(read_only=True)
    station_id = serializers.UUIDField(read_only=True, allow_null=True)
    station_name = serializers.CharField(read_only=True, allow_null=True)
    assigned_at = serializers.DateTimeField(read_only=True, allow_null=True)
    assigned_by = serializers.CharField(read_only=True, allow_null=True)


class ManagerSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    """Manager with a summary of the station they currently run."""

    assignment_status = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name", "email", "is_active", "date_joined", "assignment_status"]
        read_only_fields = fields

    def get_assignment_status(self, obj: User) -> dict[str, Any]:
        return AssignmentStatusSerializer(get_assignment_status(obj)).data


class ManagerCreateSerializer(serializers.Serializer):  # type: ignore[misc]
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(
        max_length=150,
        validators=[UniqueValidator(queryset=User.objects.all(), lookup="iexact")],
    )
    password = serializers.CharField(min_length=8, write_only=True)
    is_active = serializers.BooleanField(default=True)


class ManagerUpdateSerializer(serializers.Serializer):  # type: ignore[misc]
    name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(max_length=150, required=False)
    password = serializers.CharField(min_length=8, write_only=True, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate_email(self, value: str) -> str:
        """Email must stay unique across users other than the one being edited."""
        others = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value


class ManagerFilterSerializer(serializers.Serializer):  # type: ignore[misc]
    is_active = serializers.BooleanField(required=False, allow_null=True)
    search = serializers.CharField(required=False, allow_blank=True)


class MeSerializer(serializers.ModelSerializer):  # type: ignore[misc]
    station_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = ["id", "username", "name", "email", "role", "is_active", "station_id"]
        read_only_fields = fields

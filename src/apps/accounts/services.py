"""
Station manager roster.

Managers are users with the `station` role. They are never hard deleted:
deactivation keeps their assignment history intact.
"""

import logging
from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.db.models.query import QuerySet

from lpg_stations.exceptions import ManagerHasActiveAssignment, ManagerNotFound
from lpg_stations.models import ManagerAssignment

from .models import User

logger = logging.getLogger(__name__)


def list_managers(
    *, is_active: Optional[bool] = None, search: Optional[str] = None
) -> QuerySet[User]:
    """
    Return station managers, optionally filtered.

    Args:
        is_active: Keep only active (True) or deactivated (False) managers
        search: Case-insensitive substring matched against name or email
    """
    queryset = User.objects.filter(role=User.Role.STATION_MANAGER)
    if is_active is not None:
        queryset = queryset.filter(is_active=is_active)
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(email__icontains=search))
    return queryset.order_by("name", "email")


def get_manager(manager_id: Any) -> User:
    try:
        return list_managers().get(pk=manager_id)
    except (User.DoesNotExist, ValidationError, ValueError) as e:
        raise ManagerNotFound(f"Manager {manager_id} not found") from e


def _ensure_unassigned(manager: User) -> None:
    if ManagerAssignment.objects.active().for_manager(manager.pk).exists():
        raise ManagerHasActiveAssignment(
            "Cannot deactivate manager with active station assignment. Remove from station first."
        )


def create_manager(*, name: str, email: str, password: str, is_active: bool = True) -> User:
    """Create a station manager; the email doubles as the login username."""
    manager = User.objects.create_user(
        username=email,
        email=email,
        password=password,
        name=name,
        role=User.Role.STATION_MANAGER,
        is_active=is_active,
    )
    logger.info("Station manager created.", extra={"manager_id": str(manager.pk)})
    return manager


def update_manager(manager_id: Any, **fields: Any) -> User:
    """
    Update a manager's profile. A new password is hashed; a new email also
    becomes the username.

    Raises:
        ManagerHasActiveAssignment: Deactivating a manager who still runs a station
    """
    manager = get_manager(manager_id)
    if fields.get("is_active") is False and manager.is_active:
        _ensure_unassigned(manager)
    password = fields.pop("password", None)
    if password:
        manager.set_password(password)
    if "email" in fields:
        manager.username = fields["email"]
    for field_name, value in fields.items():
        setattr(manager, field_name, value)
    manager.save()
    logger.info(
        "Station manager updated.",
        extra={"manager_id": str(manager.pk), "fields": sorted(fields)},
    )
    return manager


def deactivate_manager(manager_id: Any) -> User:
    """
    Mark a manager inactive.

    Raises:
        ManagerNotFound: Unknown id or not a station manager
        ManagerHasActiveAssignment: The manager still runs a station
    """
    manager = get_manager(manager_id)
    _ensure_unassigned(manager)
    manager.is_active = False
    manager.save(update_fields=["is_active"])
    logger.info("Station manager deactivated.", extra={"manager_id": str(manager.pk)})
    return manager


def get_assignment_status(manager: User) -> dict[str, Any]:
    """Summarise the manager's active assignment, if any."""
    assignment = (
        ManagerAssignment.objects.active()
        .for_manager(manager.pk)
        .select_related("station", "assigned_by")
        .first()
    )
    if assignment is None:
        return {
            "is_assigned": False,
            "station_id": None,
            "station_name": None,
            "assigned_at": None,
            "assigned_by": None,
        }
    return {
        "is_assigned": True,
        "station_id": assignment.station_id,
        "station_name": assignment.station.name,
        "assigned_at": assignment.assigned_at,
        "assigned_by": str(assignment.assigned_by),
    }

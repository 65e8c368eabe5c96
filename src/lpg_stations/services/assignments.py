"""Manager assignment ledger: who is accountable for a station, and since when."""

import logging
import uuid
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models.query import QuerySet
from django.utils import timezone

from lpg_stations import repositories
from lpg_stations.exceptions import (
    InactiveManager,
    InvalidRole,
    ManagerNotFound,
    NoActiveAssignment,
)
from lpg_stations.models import ManagerAssignment

logger = logging.getLogger(__name__)

REPLACED_REASON = "Replaced by another manager"
DEFAULT_REMOVAL_REASON = "Manager removed"


def get_manager(manager_id: Any):
    """Fetch any user by id, raising ManagerNotFound for unknown or malformed ids."""
    User = get_user_model()
    try:
        return User.objects.get(pk=manager_id)
    except (User.DoesNotExist, ValidationError, ValueError) as e:
        raise ManagerNotFound(f"Manager {manager_id} not found") from e


class AssignmentLedger:
    """
    Append-only ledger of manager assignments.

    A station is either unassigned or has exactly one active row. Assigning
    a new manager closes the current row and opens a new one inside a single
    transaction that holds a lock on the station row, so concurrent
    assignments for one station run one after the other.
    """

    def assign(self, station_id: Any, manager_id: Any, actor: Any) -> ManagerAssignment:
        """
        Make `manager_id` the active manager of `station_id`.

        Raises:
            StationNotFound: Unknown station
            ManagerNotFound: Unknown user
            InvalidRole: The user is not a station manager
            InactiveManager: The user has been deactivated
        """
        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)

            manager = get_manager(manager_id)
            if not manager.is_station_manager:
                raise InvalidRole("Only users with station role can be assigned as managers")
            if not manager.is_active:
                raise InactiveManager("Cannot assign an inactive user as manager")

            now = timezone.now()

            previous = repositories.get_active_assignment(station)
            if previous is not None:
                previous.removed_at = now
                previous.removed_by = actor
                previous.removal_reason = REPLACED_REASON
                previous.save(
                    update_fields=["removed_at", "removed_by", "removal_reason", "updated_at"]
                )

            assignment = ManagerAssignment.objects.create(
                manager=manager,
                station=station,
                assigned_by=actor,
                assigned_at=now,
            )

        logger.info(
            "Manager assigned to station.",
            extra={
                "station_id": str(station.pk),
                "manager_id": str(manager.pk),
                "assigned_by": str(actor.pk),
                "replaced_manager_id": str(previous.manager_id) if previous else None,
            },
        )
        return assignment

    def remove(
        self, station_id: Any, actor: Any, reason: Optional[str] = None
    ) -> ManagerAssignment:
        """
        Close the station's active assignment.

        Raises:
            StationNotFound: Unknown station
            NoActiveAssignment: The station has no active manager
        """
        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)
            assignment = repositories.get_active_assignment(station)
            if assignment is None:
                raise NoActiveAssignment("No active manager assigned to this station")

            assignment.removed_at = timezone.now()
            assignment.removed_by = actor
            assignment.removal_reason = reason or DEFAULT_REMOVAL_REASON
            assignment.save(
                update_fields=["removed_at", "removed_by", "removal_reason", "updated_at"]
            )

        logger.info(
            "Manager removed from station.",
            extra={
                "station_id": str(station.pk),
                "manager_id": str(assignment.manager_id),
                "removed_by": str(actor.pk),
                "reason": assignment.removal_reason,
            },
        )
        return assignment

    def get_current_manager(self, station_id: Any) -> Optional[ManagerAssignment]:
        station = repositories.get_station(station_id)
        return repositories.get_active_assignment(station)

    def get_history(
        self, station_id: Any, manager_id: Optional[Any] = None
    ) -> QuerySet[ManagerAssignment]:
        """Every assignment of a station, newest first, optionally for one manager."""
        station = repositories.get_station(station_id)
        history = repositories.get_assignments(station)
        if manager_id is None:
            return history
        try:
            manager_uuid = uuid.UUID(str(manager_id))
        except ValueError:
            return history.none()
        return history.for_manager(manager_uuid)

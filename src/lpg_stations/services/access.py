"""Who may change a station's availability, price and status."""

import uuid
from typing import Any

from lpg_stations.models import ManagerAssignment


def can_manage_station(actor: Any, station_id: Any) -> bool:
    """
    Decide whether `actor` may manage the station.

    Admins manage every station. A station manager manages a station when
    either their legacy `station` pointer or an active ledger assignment
    names it. Anything else, including a malformed id, is refused.
    """
    if actor is None or not getattr(actor, "is_authenticated", False):
        return False
    if actor.is_admin:
        return True
    if not actor.is_station_manager:
        return False

    try:
        station_uuid = uuid.UUID(str(station_id))
    except ValueError:
        return False

    if actor.station_id == station_uuid:
        return True

    return (
        ManagerAssignment.objects.active()
        .for_station(station_uuid)
        .for_manager(actor.pk)
        .exists()
    )

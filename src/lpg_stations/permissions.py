"""
DRF permissions for station routes.
"""

from typing import Any

from rest_framework import permissions

from lpg_stations.services.access import can_manage_station

ADMIN_REQUIRED_MESSAGE = "Unauthorized - Admin access required"
STATION_SCOPE_MESSAGE = "Unauthorized - You can only manage your assigned station"


class IsAdminRole(permissions.BasePermission):  # type: ignore[misc]
    """Allow only authenticated users with the admin role."""

    message = ADMIN_REQUIRED_MESSAGE

    def has_permission(self, request: Any, view: Any) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class CanManageStation(permissions.BasePermission):  # type: ignore[misc]
    """
    Allow admins, and station managers for the station in the URL.

    The station id is read from the view's lookup kwarg, so the check runs
    before the station is fetched.
    """

    message = STATION_SCOPE_MESSAGE

    def has_permission(self, request: Any, view: Any) -> bool:
        user = request.user
        if not (user and user.is_authenticated):
            return False
        lookup = getattr(view, "lookup_url_kwarg", None) or getattr(view, "lookup_field", "pk")
        station_id = view.kwargs.get(lookup)
        return can_manage_station(user, station_id)

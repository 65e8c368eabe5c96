import uuid
from typing import Any, Callable

import pytest

from apps.accounts import services
from apps.accounts.models import User
from lpg_stations.exceptions import ManagerHasActiveAssignment, ManagerNotFound
from lpg_stations.services.assignments import AssignmentLedger


def test_create_manager_uses_email_as_username() -> None:
    manager = services.create_manager(
        name="Kofi Mensah", email="kofi@example.com", password="secret-pass"
    )

    assert manager.username == "kofi@example.com"
    assert manager.role == User.Role.STATION_MANAGER
    assert manager.check_password("secret-pass")


def test_list_managers_filters(make_manager: Callable[..., Any], admin_user: Any) -> None:
    make_manager(name="Abena Owusu", email="abena@example.com")
    make_manager(name="Yaw Boateng", email="yaw@example.com", is_active=False)

    assert [m.email for m in services.list_managers()] == ["abena@example.com", "yaw@example.com"]
    assert [m.email for m in services.list_managers(is_active=True)] == ["abena@example.com"]
    assert [m.email for m in services.list_managers(search="BOAT")] == ["yaw@example.com"]


def test_get_manager_rejects_admins_and_garbage(admin_user: Any) -> None:
    with pytest.raises(ManagerNotFound):
        services.get_manager(admin_user.pk)
    with pytest.raises(ManagerNotFound):
        services.get_manager("not-a-uuid")
    with pytest.raises(ManagerNotFound):
        services.get_manager(uuid.uuid4())


def test_update_manager_email_and_password(station_manager: Any) -> None:
    manager = services.update_manager(
        station_manager.pk, email="new@example.com", password="another-pass"
    )

    assert manager.username == "new@example.com"
    assert manager.check_password("another-pass")


def test_deactivate_blocked_by_active_assignment(
    station_manager: Any, station: Any, admin_user: Any
) -> None:
    ledger = AssignmentLedger()
    ledger.assign(station.pk, station_manager.pk, actor=admin_user)

    with pytest.raises(ManagerHasActiveAssignment):
        services.deactivate_manager(station_manager.pk)

    ledger.remove(station.pk, actor=admin_user)
    manager = services.deactivate_manager(station_manager.pk)
    assert manager.is_active is False


def test_assignment_status(station_manager: Any, station: Any, admin_user: Any) -> None:
    assert services.get_assignment_status(station_manager)["is_assigned"] is False

    AssignmentLedger().assign(station.pk, station_manager.pk, actor=admin_user)
    status = services.get_assignment_status(station_manager)

    assert status["is_assigned"] is True
    assert status["station_id"] == station.pk
    assert status["station_name"] == "Tamale Central Gas Station"
    assert status["assigned_by"] == "Admin"


def test_update_cannot_deactivate_assigned_manager(
    station_manager: Any, station: Any, admin_user: Any
) -> None:
    AssignmentLedger().assign(station.pk, station_manager.pk, actor=admin_user)

    with pytest.raises(ManagerHasActiveAssignment):
        services.update_manager(station_manager.pk, is_active=False)

    station_manager.refresh_from_db()
    assert station_manager.is_active is True
    assert services.update_manager(station_manager.pk, name="Still Here").name == "Still Here"

"""Tests for the station access policy."""

import uuid

from django.contrib.auth.models import AnonymousUser

from lpg_stations.services.access import can_manage_station
from lpg_stations.services.assignments import AssignmentLedger


def test_admin_manages_every_station(admin_user, station) -> None:
    assert can_manage_station(admin_user, station.pk)
    assert can_manage_station(admin_user, uuid.uuid4())


def test_ledger_assignment_grants_access_to_that_station_only(
    admin_user, station_manager, make_station
) -> None:
    """A manager with only a ledger assignment, and no legacy pointer."""
    x, y = make_station(), make_station()
    AssignmentLedger().assign(x.pk, station_manager.pk, actor=admin_user)

    assert station_manager.station_id is None
    assert can_manage_station(station_manager, x.pk)
    assert can_manage_station(station_manager, str(x.pk))
    assert not can_manage_station(station_manager, y.pk)


def test_legacy_pointer_grants_access(station_manager, make_station) -> None:
    x, y = make_station(), make_station()
    station_manager.station = x
    station_manager.save()

    assert can_manage_station(station_manager, x.pk)
    assert not can_manage_station(station_manager, y.pk)


def test_removed_assignment_revokes_access(admin_user, station_manager, station) -> None:
    ledger = AssignmentLedger()
    ledger.assign(station.pk, station_manager.pk, actor=admin_user)
    ledger.remove(station.pk, actor=admin_user)

    assert not can_manage_station(station_manager, station.pk)


def test_replaced_manager_loses_access(admin_user, make_manager, station) -> None:
    m1, m2 = make_manager(), make_manager()
    ledger = AssignmentLedger()
    ledger.assign(station.pk, m1.pk, actor=admin_user)
    ledger.assign(station.pk, m2.pk, actor=admin_user)

    assert not can_manage_station(m1, station.pk)
    assert can_manage_station(m2, station.pk)


def test_malformed_station_id(station_manager) -> None:
    assert not can_manage_station(station_manager, "not-a-uuid")
    assert not can_manage_station(station_manager, None)


def test_anonymous_user(station) -> None:
    assert not can_manage_station(AnonymousUser(), station.pk)
    assert not can_manage_station(None, station.pk)

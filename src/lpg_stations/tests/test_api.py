"""API integration tests for the station endpoints."""

import uuid
from decimal import Decimal
from typing import Any

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from lpg_stations.models import (
    AvailabilityLogEntry,
    ManagerAssignment,
    PriceHistoryEntry,
    Station,
    StationLocationHistory,
)
from lpg_stations.permissions import ADMIN_REQUIRED_MESSAGE, STATION_SCOPE_MESSAGE
from lpg_stations.services.assignments import AssignmentLedger
from lpg_stations.tests.helpers import TAMALE, coordinates_at

User = get_user_model()


class StationAPITestCase(TestCase):
    """Shared users, stations and clients."""

    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username="admin@example.com",
            email="admin@example.com",
            password="adminpass123",
            role=User.Role.ADMIN,
        )
        self.manager = User.objects.create_user(
            username="manager@example.com",
            email="manager@example.com",
            password="managerpass123",
            name="Amina",
            role=User.Role.STATION_MANAGER,
        )
        self.station = self.make_station("Tamale Central Gas Station", 1)
        self.other_station = self.make_station("Northern Star LPG", 2, is_available=False)

        self.anon = APIClient()
        self.admin_client = APIClient()
        self.admin_client.force_authenticate(user=self.admin)
        self.manager_client = APIClient()
        self.manager_client.force_authenticate(user=self.manager)

    def make_station(self, name: str, distance_km: float, bearing: float = 0, **fields: Any) -> Station:
        slug = name.lower().replace(" ", "")
        return Station.objects.create(
            name=name,
            address=f"{name}, Tamale",
            phone="+233 24 123 4567",
            email=f"{slug}@tamalelpg.com",
            operating_hours="6:00 AM - 8:00 PM",
            price_per_kg=Decimal("12.00"),
            **coordinates_at(distance_km, bearing),
            **fields,
        )

    def url(self, name: str, station: Any = None) -> str:
        if station is None:
            return reverse(f"lpg_stations:station-{name}")
        pk = station.pk if isinstance(station, Station) else station
        return reverse(f"lpg_stations:station-{name}", kwargs={"pk": pk})


class NearbyAPITest(StationAPITestCase):
    def search(self, **payload: Any) -> Any:
        body = {"latitude": TAMALE[0], "longitude": TAMALE[1], **payload}
        return self.anon.post(self.url("nearby"), body, format="json")

    def test_available_first(self) -> None:
        near_unavailable = self.make_station("Vittin Gas Point", 0.5, is_available=False)

        response = self.search()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Nearby stations retrieved successfully")
        names = [s["name"] for s in response.data["data"]]
        self.assertEqual(names, ["Tamale Central Gas Station", near_unavailable.name, "Northern Star LPG"])
        self.assertEqual(response.data["available_count"], 1)
        self.assertEqual(response.data["unavailable_count"], 2)
        self.assertEqual(response.data["radius_km"], 5)
        self.assertAlmostEqual(response.data["data"][0]["distance_km"], 1, delta=0.01)
        self.assertNotIn("note", response.data)

    def test_none_in_radius(self) -> None:
        response = self.search(latitude=5.6037, longitude=-0.1870)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "No LPG stations found in the specified radius")
        self.assertEqual(response.data["data"], [])
        self.assertEqual(response.data["available_count"], 0)
        self.assertEqual(response.data["unavailable_count"], 0)

    def test_none_available(self) -> None:
        self.station.is_available = False
        self.station.save()

        response = self.search(available_only=True)

        self.assertEqual(response.data["message"], "No available LPG station near you")
        self.assertEqual(response.data["note"], "All nearby stations are currently unavailable")
        self.assertEqual(response.data["data"], [])
        self.assertEqual(response.data["unavailable_count"], 2)

    def test_inactive_station_hidden(self) -> None:
        self.station.is_active = False
        self.station.save()

        response = self.search()

        names = [s["name"] for s in response.data["data"]]
        self.assertNotIn("Tamale Central Gas Station", names)

    def test_invalid_input(self) -> None:
        self.assertEqual(self.search(radius=0).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.search(radius=101).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.search(latitude=95).status_code, status.HTTP_400_BAD_REQUEST)
        response = self.anon.post(self.url("nearby"), {"latitude": 9.4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class StationReadAPITest(StationAPITestCase):
    def test_list_is_public_and_paginated(self) -> None:
        response = self.anon.get(self.url("list"), {"per_page": 1})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(len(response.data["results"]), 1)

    def test_list_assigned_filter(self) -> None:
        AssignmentLedger().assign(self.station.pk, self.manager.pk, actor=self.admin)

        assigned = self.anon.get(self.url("list"), {"assigned": "true"})
        unassigned = self.anon.get(self.url("list"), {"assigned": "false"})

        self.assertEqual([s["id"] for s in assigned.data["results"]], [str(self.station.pk)])
        self.assertEqual([s["id"] for s in unassigned.data["results"]], [str(self.other_station.pk)])

    def test_list_without_filters_returns_all(self) -> None:
        AssignmentLedger().assign(self.station.pk, self.manager.pk, actor=self.admin)
        response = self.anon.get(self.url("list"))
        self.assertEqual(response.data["count"], 2)

    def test_list_by_location(self) -> None:
        response = self.anon.get(
            self.url("list"),
            {"latitude": TAMALE[0], "longitude": TAMALE[1], "radius": 3, "sort_by": "distance"},
        )
        names = [s["name"] for s in response.data["results"]]
        self.assertEqual(names, ["Tamale Central Gas Station", "Northern Star LPG"])

    def test_list_rejects_half_a_location(self) -> None:
        response = self.anon.get(self.url("list"), {"latitude": TAMALE[0]})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve(self) -> None:
        response = self.anon.get(self.url("detail", self.station))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        self.assertEqual(data["name"], "Tamale Central Gas Station")
        self.assertIsInstance(data["latitude"], float)
        self.assertIsNone(data["distance_km"])

    def test_retrieve_unknown(self) -> None:
        response = self.anon.get(self.url("detail", uuid.uuid4()))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")

    def test_price_history_is_public(self) -> None:
        PriceHistoryEntry.objects.create(station=self.station, price_per_kg=Decimal("12.00"))
        response = self.anon.get(self.url("price-history", self.station))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["price_per_kg"], Decimal("12.00"))

    def test_price_history_pages_of_twenty(self) -> None:
        for cents in range(21):
            PriceHistoryEntry.objects.create(
                station=self.station, price_per_kg=Decimal("12.00") + Decimal(cents) / 100
            )

        response = self.anon.get(self.url("price-history", self.station))

        self.assertEqual(response.data["count"], 21)
        self.assertEqual(len(response.data["results"]), 20)


class StationAdminAPITest(StationAPITestCase):
    payload = {
        "name": "Savanna Gas Hub",
        "address": "78 Market Street, Tamale",
        "phone": "+233 27 555 1234",
        "email": "savanna@tamalelpg.com",
        "latitude": "9.3987",
        "longitude": "-0.8512",
        "operating_hours": "6:30 AM - 9:00 PM",
        "price_per_kg": "13.00",
    }

    def test_create(self) -> None:
        response = self.admin_client.post(self.url("list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        station = Station.objects.get(email="savanna@tamalelpg.com")
        self.assertEqual(response.data["data"]["id"], str(station.pk))
        self.assertEqual(PriceHistoryEntry.objects.get(station=station).updated_by, self.admin)
        self.assertTrue(StationLocationHistory.objects.filter(station=station).exists())

    def test_create_duplicate_email(self) -> None:
        payload = {**self.payload, "email": self.station.email}
        response = self.admin_client.post(self.url("list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_requires_admin(self) -> None:
        response = self.manager_client.post(self.url("list"), self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], ADMIN_REQUIRED_MESSAGE)

        response = self.anon.post(self.url("list"), self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_partial_update(self) -> None:
        response = self.admin_client.patch(
            self.url("detail", self.station), {"price_per_kg": "14.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["price_per_kg"], Decimal("14.00"))
        self.assertEqual(PriceHistoryEntry.objects.filter(station=self.station).count(), 1)

    def test_price_cannot_be_cleared(self) -> None:
        url = self.url("detail", self.station)
        self.admin_client.patch(url, {"price_per_kg": "12.50"}, format="json")

        response = self.admin_client.patch(url, {"price_per_kg": None}, format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "invalid_value")
        self.station.refresh_from_db()
        self.assertEqual(self.station.price_per_kg, Decimal("12.50"))

    def test_update_keeps_own_email(self) -> None:
        payload = {**self.payload, "email": self.station.email}
        response = self.admin_client.put(self.url("detail", self.station), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete(self) -> None:
        response = self.admin_client.delete(self.url("detail", self.station))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Station.objects.filter(pk=self.station.pk).exists())

    def test_delete_requires_admin(self) -> None:
        AssignmentLedger().assign(self.station.pk, self.manager.pk, actor=self.admin)
        response = self.manager_client.delete(self.url("detail", self.station))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StationManagementAPITest(StationAPITestCase):
    """Availability, price and status routes for whoever manages the station."""

    def setUp(self) -> None:
        super().setUp()
        AssignmentLedger().assign(self.station.pk, self.manager.pk, actor=self.admin)

    def test_assigned_manager_updates_availability(self) -> None:
        response = self.manager_client.patch(
            self.url("availability", self.station), {"is_available": False}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["data"]["is_available"])
        entry = AvailabilityLogEntry.objects.get(station=self.station)
        self.assertEqual(entry.changed_by, self.manager)

    def test_manager_cannot_touch_other_station(self) -> None:
        response = self.manager_client.patch(
            self.url("availability", self.other_station), {"is_available": True}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], STATION_SCOPE_MESSAGE)
        self.assertFalse(AvailabilityLogEntry.objects.exists())

    def test_admin_updates_any_station(self) -> None:
        response = self.admin_client.patch(
            self.url("availability", self.other_station), {"is_available": True}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_anonymous_is_refused(self) -> None:
        response = self.anon.patch(
            self.url("availability", self.station), {"is_available": False}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_availability_requires_a_value(self) -> None:
        response = self.manager_client.patch(self.url("availability", self.station), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_price(self) -> None:
        response = self.manager_client.patch(
            self.url("price", self.station), {"price_per_kg": "12.50"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["price_per_kg"], Decimal("12.50"))
        newest = PriceHistoryEntry.objects.filter(station=self.station).first()
        self.assertEqual(newest.price_per_kg, Decimal("12.50"))
        self.assertEqual(newest.updated_by, self.manager)

    def test_negative_price(self) -> None:
        response = self.manager_client.patch(
            self.url("price", self.station), {"price_per_kg": "-1.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "invalid_value")

    def test_toggle_status(self) -> None:
        response = self.manager_client.patch(
            self.url("set-status", self.station), {"is_active": False}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Station deactivated successfully")
        self.station.refresh_from_db()
        self.assertFalse(self.station.is_active)

    def test_availability_log(self) -> None:
        self.manager_client.patch(
            self.url("availability", self.station), {"is_available": False}, format="json"
        )
        response = self.manager_client.get(self.url("availability-log", self.station))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["changed_by"], str(self.manager.pk))

    def test_legacy_pointer_manager(self) -> None:
        legacy = User.objects.create_user(
            username="legacy@example.com",
            email="legacy@example.com",
            password="legacypass123",
            role=User.Role.STATION_MANAGER,
            station=self.other_station,
        )
        client = APIClient()
        client.force_authenticate(user=legacy)

        response = client.patch(
            self.url("availability", self.other_station), {"is_available": True}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class ManagerAssignmentAPITest(StationAPITestCase):
    def assign(self, manager: Any, client: Any = None) -> Any:
        client = client or self.admin_client
        return client.post(
            self.url("assign-manager", self.station), {"manager_id": str(manager.pk)}, format="json"
        )

    def test_assign(self) -> None:
        response = self.assign(self.manager)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Manager assigned successfully")
        assignment = response.data["data"]["assignment"]
        self.assertEqual(assignment["manager"]["email"], "manager@example.com")
        self.assertTrue(assignment["is_active"])

    def test_reassign(self) -> None:
        other = User.objects.create_user(
            username="other@example.com",
            email="other@example.com",
            password="otherpass123",
            role=User.Role.STATION_MANAGER,
        )
        self.assign(self.manager)
        self.assign(other)

        active = ManagerAssignment.objects.active().for_station(self.station.pk)
        self.assertEqual([a.manager for a in active], [other])

    def test_assign_admin_is_invalid_role(self) -> None:
        response = self.assign(self.admin)
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "invalid_role")

    def test_assign_inactive_manager(self) -> None:
        self.manager.is_active = False
        self.manager.save()
        response = self.assign(self.manager)
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["error"], "inactive_user")

    def test_assign_unknown_station(self) -> None:
        response = self.admin_client.post(
            self.url("assign-manager", uuid.uuid4()), {"manager_id": str(self.admin.pk)}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")

    def test_assign_unknown_manager(self) -> None:
        response = self.admin_client.post(
            self.url("assign-manager", self.station), {"manager_id": str(uuid.uuid4())}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_assign_requires_admin(self) -> None:
        response = self.assign(self.manager, client=self.manager_client)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], ADMIN_REQUIRED_MESSAGE)

    def test_remove(self) -> None:
        self.assign(self.manager)
        response = self.admin_client.delete(
            self.url("remove-manager", self.station),
            {"removal_reason": "Contract ended"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["assignment"]["removal_reason"], "Contract ended")
        self.assertFalse(response.data["data"]["assignment"]["is_active"])

    def test_remove_without_manager(self) -> None:
        response = self.admin_client.delete(self.url("remove-manager", self.station))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "no_active_manager")

    def test_current_manager(self) -> None:
        empty = self.admin_client.get(self.url("manager", self.station))
        self.assertEqual(empty.status_code, status.HTTP_200_OK)
        self.assertIsNone(empty.data["data"]["assignment"])

        self.assign(self.manager)
        current = self.admin_client.get(self.url("manager", self.station))
        self.assertEqual(current.data["data"]["assignment"]["manager"]["id"], str(self.manager.pk))

    def test_history_filter(self) -> None:
        other = User.objects.create_user(
            username="other@example.com",
            email="other@example.com",
            password="otherpass123",
            role=User.Role.STATION_MANAGER,
        )
        self.assign(self.manager)
        self.assign(other)

        everything = self.admin_client.get(self.url("manager-history", self.station))
        only_other = self.admin_client.get(
            self.url("manager-history", self.station), {"manager_id": str(other.pk)}
        )

        self.assertEqual(everything.data["count"], 2)
        self.assertEqual(only_other.data["count"], 1)
        self.assertEqual(
            everything.data["results"][1]["removal_reason"], "Replaced by another manager"
        )

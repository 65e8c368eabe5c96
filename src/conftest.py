"""
Pytest configuration and global fixtures.

Defines the users, stations and API clients shared by the test suite.
"""

import os

import django
from django.conf import settings

# Configure Django settings before any Django imports
if not settings.configured:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.test")
    django.setup()

from decimal import Decimal
from typing import Any, Callable

import pytest
from django.contrib.auth import get_user_model
from faker import Faker
from rest_framework.test import APIClient

from lpg_stations.models import Station
from lpg_stations.tests.helpers import TAMALE

fake = Faker()


@pytest.fixture
def admin_user() -> Any:
    """An administrator (role admin)."""
    User = get_user_model()
    return User.objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password="adminpass123",
        name="Admin",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def make_manager() -> Callable[..., Any]:
    """Factory for station managers."""
    User = get_user_model()

    def _make(**overrides: Any) -> Any:
        email = overrides.pop("email", fake.unique.email())
        fields = {
            "username": email,
            "email": email,
            "password": "managerpass123",
            "name": fake.name(),
            "role": User.Role.STATION_MANAGER,
        }
        fields.update(overrides)
        return User.objects.create_user(**fields)

    return _make


@pytest.fixture
def station_manager(make_manager: Callable[..., Any]) -> Any:
    return make_manager(email="manager@example.com", name="Station Manager")


@pytest.fixture
def make_station() -> Callable[..., Station]:
    """Factory for stations, placed in Tamale unless coordinates are given."""

    def _make(**overrides: Any) -> Station:
        fields = {
            "name": f"{fake.last_name()} LPG",
            "address": fake.street_address(),
            "phone": "+233 24 000 0000",
            "email": fake.unique.email(),
            "latitude": Decimal(str(TAMALE[0])),
            "longitude": Decimal(str(TAMALE[1])),
            "operating_hours": "6:00 AM - 8:00 PM",
            "price_per_kg": Decimal("12.50"),
        }
        fields.update(overrides)
        return Station.objects.create(**fields)

    return _make


@pytest.fixture
def station(make_station: Callable[..., Station]) -> Station:
    return make_station(name="Tamale Central Gas Station")


@pytest.fixture
def api_client() -> APIClient:
    """DRF API test client."""
    return APIClient()


@pytest.fixture
def admin_api_client(admin_user: Any) -> APIClient:
    """Admin authenticated DRF API test client."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def manager_api_client(station_manager: Any) -> APIClient:
    """Station manager authenticated DRF API test client."""
    client = APIClient()
    client.force_authenticate(user=station_manager)
    return client


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db: Any) -> None:
    """Enable database access for all tests by default."""
    pass

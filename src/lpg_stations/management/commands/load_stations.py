"""Django management command to load LPG stations from CSV."""

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandParser
from django.db import IntegrityError
from tqdm import tqdm

from lpg_stations.exceptions import InvalidDomainValue
from lpg_stations.models import Station
from lpg_stations.services.directory import StationDirectoryService

DEFAULT_CSV = Path(settings.BASE_DIR).parent / "data" / "stations.csv"

TRUE_VALUES = {"1", "true", "yes", "y"}


class Command(BaseCommand):
    """
    Load LPG stations with known coordinates from a CSV file.

    Expected columns: name, address, phone, email, is_available, price_per_kg,
    operating_hours, image, latitude, longitude.

    Stations whose email already exists are skipped, so the command can be
    re-run safely. Rows that fail validation are reported and skipped.

    Usage:
        python manage.py load_stations [path/to/stations.csv]
    """

    help = "Load LPG stations from CSV"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "csv_path",
            nargs="?",
            default=str(DEFAULT_CSV),
            help="CSV file to load (defaults to the bundled Tamale stations)",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the management command."""
        csv_path = Path(options["csv_path"])

        if not csv_path.exists():
            self.stdout.write(self.style.ERROR(f"CSV file not found: {csv_path.absolute()}"))
            return

        with open(csv_path, encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        self.stdout.write(self.style.SUCCESS(f"Found {len(rows)} stations in {csv_path}"))

        directory = StationDirectoryService()
        created_count = 0
        skipped_count = 0
        failed_count = 0

        for row in tqdm(rows, desc="Loading stations", unit="station"):
            email = (row.get("email") or "").strip()
            if email and Station.objects.filter(email__iexact=email).exists():
                skipped_count += 1
                continue

            try:
                directory.create_station(self._station_data(row))
                created_count += 1
            except (
                KeyError,
                ValueError,
                InvalidOperation,
                InvalidDomainValue,
                ValidationError,
                IntegrityError,
            ) as e:
                self.stdout.write(
                    self.style.WARNING(f"Failed to load {row.get('name', '?')}: {e}")
                )
                failed_count += 1

        self.stdout.write(self.style.SUCCESS("=" * 60))
        self.stdout.write(self.style.SUCCESS("STATION LOADING COMPLETE"))
        self.stdout.write(self.style.SUCCESS("=" * 60))
        self.stdout.write(f"Total rows in CSV:       {len(rows)}")
        self.stdout.write(self.style.SUCCESS(f"Successfully created:    {created_count}"))
        self.stdout.write(self.style.WARNING(f"Skipped (already exist): {skipped_count}"))
        self.stdout.write(self.style.ERROR(f"Failed:                  {failed_count}"))
        self.stdout.write(f"Final database count:    {Station.objects.count()}")

    def _station_data(self, row: dict[str, str]) -> dict[str, Any]:
        """Convert a CSV row into validated station field values."""
        price = (row.get("price_per_kg") or "").strip()
        station = Station(
            name=row["name"].strip(),
            address=row["address"].strip(),
            phone=row["phone"].strip(),
            email=row["email"].strip(),
            is_available=(row.get("is_available") or "true").strip().lower() in TRUE_VALUES,
            price_per_kg=Decimal(price) if price else None,
            operating_hours=row["operating_hours"].strip(),
            image=(row.get("image") or "").strip() or None,
            latitude=Decimal(row["latitude"].strip()),
            longitude=Decimal(row["longitude"].strip()),
        )
        station.full_clean(exclude=["id"])
        return {
            field: getattr(station, field)
            for field in (
                "name",
                "address",
                "phone",
                "email",
                "is_available",
                "price_per_kg",
                "operating_hours",
                "image",
                "latitude",
                "longitude",
            )
        }

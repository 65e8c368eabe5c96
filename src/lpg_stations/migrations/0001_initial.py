import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Station",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Timestamp when the record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when the record was last updated")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("address", models.TextField()),
                ("phone", models.CharField(max_length=20)),
                ("email", models.EmailField(max_length=254, unique=True)),
                (
                    "latitude",
                    models.DecimalField(
                        decimal_places=7,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(-90),
                            django.core.validators.MaxValueValidator(90),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        decimal_places=7,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(-180),
                            django.core.validators.MaxValueValidator(180),
                        ],
                    ),
                ),
                ("is_available", models.BooleanField(default=True)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "price_per_kg",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("operating_hours", models.CharField(max_length=100)),
                ("image", models.URLField(blank=True, max_length=500, null=True)),
            ],
            options={
                "verbose_name": "Station",
                "verbose_name_plural": "Stations",
                "db_table": "stations",
                "ordering": ["-updated_at"],
                "indexes": [
                    models.Index(fields=["latitude", "longitude"], name="idx_stations_location"),
                    models.Index(fields=["is_available"], name="idx_stations_is_available"),
                    models.Index(fields=["updated_at"], name="idx_stations_updated_at"),
                ],
            },
        ),
    ]

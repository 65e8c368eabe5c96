# History tables and the manager assignment ledger live in a second migration
# because they reference the user model, which itself points back at Station.

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("lpg_stations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AvailabilityLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_available", models.BooleanField()),
                ("changed_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "changed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="availability_changes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "station",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="availability_log",
                        to="lpg_stations.station",
                    ),
                ),
            ],
            options={
                "db_table": "station_availability_log",
                "ordering": ["-changed_at", "-id"],
                "indexes": [
                    models.Index(fields=["station", "changed_at"], name="idx_availability_log_station"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PriceHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "price_per_kg",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("effective_from", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "station",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="price_history",
                        to="lpg_stations.station",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="price_changes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Price history",
                "db_table": "price_history",
                "ordering": ["-effective_from", "-id"],
                "indexes": [
                    models.Index(fields=["station", "effective_from"], name="idx_price_history_station"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StationLocationHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("latitude", models.DecimalField(decimal_places=7, max_digits=10)),
                ("longitude", models.DecimalField(decimal_places=7, max_digits=10)),
                ("recorded_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "station",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="location_history",
                        to="lpg_stations.station",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Station location history",
                "db_table": "station_location_history",
                "ordering": ["-recorded_at", "-id"],
                "indexes": [
                    models.Index(fields=["station", "recorded_at"], name="idx_location_history_station"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ManagerAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Timestamp when the record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when the record was last updated")),
                ("assigned_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("removed_at", models.DateTimeField(blank=True, null=True)),
                ("removal_reason", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "assigned_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignments_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "manager",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="manager_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "removed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments_removed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "station",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="manager_assignments",
                        to="lpg_stations.station",
                    ),
                ),
            ],
            options={
                "db_table": "station_manager_assignments",
                "ordering": ["-assigned_at", "-id"],
                "indexes": [
                    models.Index(fields=["station"], name="idx_assignments_station"),
                    models.Index(fields=["manager"], name="idx_assignments_manager"),
                    models.Index(fields=["station", "removed_at"], name="idx_assignments_active"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("removed_at__isnull", True)),
                        fields=("station",),
                        name="uniq_active_assignment_per_station",
                    ),
                ],
            },
        ),
    ]

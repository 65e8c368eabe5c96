import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Visit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("url", models.TextField()),
                ("method", models.CharField(max_length=10)),
                ("user_agent", models.TextField(blank=True, default="")),
                ("device_type", models.CharField(default="desktop", max_length=20)),
                ("browser", models.CharField(blank=True, max_length=50, null=True)),
                ("os", models.CharField(blank=True, max_length=50, null=True)),
                ("response_code", models.PositiveSmallIntegerField(null=True)),
                ("response_time_ms", models.PositiveIntegerField(null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="visits",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "visits",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["ip_address", "created_at"], name="idx_visits_ip"),
                ],
            },
        ),
    ]

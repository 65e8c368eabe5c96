"""Base models shared across apps, plus the visit record written by the tracking middleware."""

from django.conf import settings
from django.db import models


class TimestampedModel(models.Model):
    """Abstract base model with created/updated timestamps."""

    created_at = models.DateTimeField(
        auto_now_add=True, help_text="Timestamp when the record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True, help_text="Timestamp when the record was last updated"
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]


class Visit(models.Model):
    """
    One tracked request.

    Written best-effort by `apps.core.tasks.record_visit`; nothing in the
    request path depends on a row existing.
    """

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    url = models.TextField()
    method = models.CharField(max_length=10)
    user_agent = models.TextField(blank=True, default="")
    device_type = models.CharField(max_length=20, default="desktop")
    browser = models.CharField(max_length=50, null=True, blank=True)
    os = models.CharField(max_length=50, null=True, blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="visits",
    )
    response_code = models.PositiveSmallIntegerField(null=True)
    response_time_ms = models.PositiveIntegerField(null=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "visits"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["ip_address", "created_at"], name="idx_visits_ip"),
        ]

    def __str__(self) -> str:
        return f"{self.method} {self.url} ({self.response_code})"

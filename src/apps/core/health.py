"""
Health check utilities for application monitoring.

Checks database connectivity, cache availability, the integrity of the
manager assignment ledger, and host resources.
"""

import logging
import time
from typing import Any, Callable

import psutil
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.db.models import Count
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods

from lpg_stations.models import ManagerAssignment

logger = logging.getLogger(__name__)


class HealthCheckStatus:
    """Health check status constants."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


def _result(status: str, message: str, **details: Any) -> dict[str, Any]:
    return {
        "status": status,
        "message": message,
        **details,
        "timestamp": timezone.now().isoformat(),
    }


def _timed(func: Callable[[], Any]) -> tuple[Any, float]:
    start = time.perf_counter()
    value = func()
    return value, (time.perf_counter() - start) * 1000


class HealthChecker:
    """Runs every registered check and folds them into one status."""

    def __init__(self) -> None:
        self.checks: dict[str, Callable[[], dict[str, Any]]] = {
            "database": self.check_database,
            "cache": self.check_cache,
            "assignment_ledger": self.check_assignment_ledger,
            "disk_space": self.check_disk_space,
            "memory": self.check_memory,
        }

    @property
    def thresholds(self) -> dict[str, Any]:
        return getattr(settings, "HEALTH_CHECK", {})

    def run_all_checks(self) -> dict[str, Any]:
        """Run all health checks and return status."""
        results = {}
        overall = HealthCheckStatus.HEALTHY

        for name, check in self.checks.items():
            try:
                result = check()
            except Exception as e:
                logger.error(f"Health check '{name}' failed: {e}")
                result = _result(HealthCheckStatus.UNHEALTHY, f"Check failed: {e}")
            results[name] = result

            if result["status"] == HealthCheckStatus.UNHEALTHY:
                overall = HealthCheckStatus.UNHEALTHY
            elif (
                result["status"] == HealthCheckStatus.DEGRADED
                and overall == HealthCheckStatus.HEALTHY
            ):
                overall = HealthCheckStatus.DEGRADED

        return {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "version": getattr(settings, "VERSION", "1.0.0"),
            "environment": getattr(settings, "ENVIRONMENT", "unknown"),
            "checks": results,
        }

    def check_database(self) -> dict[str, Any]:
        """Round-trip a trivial query."""

        def ping() -> None:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()

        _, elapsed = _timed(ping)
        if elapsed > 1000:
            return _result(
                HealthCheckStatus.DEGRADED,
                f"Slow database response: {elapsed:.2f}ms",
                response_time_ms=round(elapsed, 2),
            )
        return _result(
            HealthCheckStatus.HEALTHY,
            f"Database responsive: {elapsed:.2f}ms",
            response_time_ms=round(elapsed, 2),
        )

    def check_cache(self) -> dict[str, Any]:
        """Write, read back and delete a key. A broken cache only degrades service."""

        def round_trip() -> Any:
            cache.set("health_check_test", "ok", timeout=30)
            value = cache.get("health_check_test")
            cache.delete("health_check_test")
            return value

        value, elapsed = _timed(round_trip)
        if value != "ok":
            return _result(HealthCheckStatus.DEGRADED, "Cache read/write test failed")
        if elapsed > 500:
            return _result(
                HealthCheckStatus.DEGRADED,
                f"Slow cache response: {elapsed:.2f}ms",
                response_time_ms=round(elapsed, 2),
            )
        return _result(
            HealthCheckStatus.HEALTHY,
            f"Cache responsive: {elapsed:.2f}ms",
            response_time_ms=round(elapsed, 2),
        )

    def check_assignment_ledger(self) -> dict[str, Any]:
        """No station may have more than one active manager assignment."""
        conflicting = list(
            ManagerAssignment.objects.active()
            .order_by()
            .values("station_id")
            .annotate(active_rows=Count("id"))
            .filter(active_rows__gt=1)
            .values_list("station_id", flat=True)
        )
        if conflicting:
            return _result(
                HealthCheckStatus.UNHEALTHY,
                f"{len(conflicting)} station(s) with more than one active manager",
                station_ids=[str(pk) for pk in conflicting],
            )
        return _result(HealthCheckStatus.HEALTHY, "Assignment ledger consistent")

    def check_disk_space(self) -> dict[str, Any]:
        usage = psutil.disk_usage("/")
        used_percent = usage.used / usage.total * 100
        max_usage = self.thresholds.get("DISK_USAGE_MAX", 90)

        if used_percent >= max_usage:
            status, label = HealthCheckStatus.UNHEALTHY, "critical"
        elif used_percent >= max_usage - 10:
            status, label = HealthCheckStatus.DEGRADED, "high"
        else:
            status, label = HealthCheckStatus.HEALTHY, "normal"

        return _result(
            status,
            f"Disk usage {label}: {used_percent:.1f}%",
            disk_usage_percent=round(used_percent, 1),
            disk_free_gb=round(usage.free / (1024**3), 2),
        )

    def check_memory(self) -> dict[str, Any]:
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024**2)
        min_memory = self.thresholds.get("MEMORY_MIN", 100)

        if available_mb < min_memory:
            status, label = HealthCheckStatus.UNHEALTHY, "Low memory"
        elif available_mb < min_memory * 2:
            status, label = HealthCheckStatus.DEGRADED, "Memory usage high"
        else:
            status, label = HealthCheckStatus.HEALTHY, "Memory usage normal"

        return _result(
            status,
            f"{label}: {available_mb:.0f}MB available",
            memory_available_mb=round(available_mb),
            memory_usage_percent=round(memory.percent, 1),
        )


health_checker = HealthChecker()


@never_cache
@require_http_methods(["GET", "HEAD"])
def health_check_view(request: Any) -> JsonResponse:
    """Full health report; 503 when any check is unhealthy."""
    report = health_checker.run_all_checks()
    status_code = 503 if report["status"] == HealthCheckStatus.UNHEALTHY else 200
    return JsonResponse(report, status=status_code)


@never_cache
@require_http_methods(["GET"])
def readiness_check_view(request: Any) -> JsonResponse:
    """Ready when the database answers."""
    try:
        db_check = health_checker.check_database()
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JsonResponse({"status": "not_ready", "error": str(e)}, status=503)

    if db_check["status"] == HealthCheckStatus.UNHEALTHY:
        return JsonResponse(
            {"status": "not_ready", "message": "Database not available"}, status=503
        )
    return JsonResponse({"status": "ready", "timestamp": timezone.now().isoformat()})


@never_cache
@require_http_methods(["GET"])
def liveness_check_view(request: Any) -> JsonResponse:
    """Alive as long as the process answers."""
    return JsonResponse(
        {
            "status": "alive",
            "timestamp": timezone.now().isoformat(),
            "version": getattr(settings, "VERSION", "1.0.0"),
        }
    )

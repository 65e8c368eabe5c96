from apps.core.models import Visit
from apps.core.tasks import record_visit


def test_record_visit_links_user(station_manager) -> None:
    visit_id = record_visit(
        ip_address="41.66.1.2",
        url="/api/v1/stations/nearby/",
        method="POST",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) Firefox/121.0",
        user_id=str(station_manager.pk),
        response_code=200,
        response_time_ms=35,
    )

    visit = Visit.objects.get(pk=visit_id)
    assert visit.user == station_manager
    assert visit.os == "Windows"
    assert visit.browser == "Firefox"
    assert visit.device_type == "desktop"


def test_record_visit_unknown_user_and_blank_ip() -> None:
    visit_id = record_visit(
        ip_address="",
        url="/",
        method="GET",
        user_id="00000000-0000-0000-0000-000000000000",
    )

    visit = Visit.objects.get(pk=visit_id)
    assert visit.user is None
    assert visit.ip_address is None
    assert visit.browser is None

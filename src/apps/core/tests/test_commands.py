from io import StringIO
from typing import Any

from django.core.management import call_command

from apps.core.models import Visit


def _visit() -> Visit:
    return Visit.objects.create(ip_address="127.0.0.1", url="/", method="GET")


def test_clear_visits_force() -> None:
    _visit()
    _visit()
    out = StringIO()

    call_command("clear_visits", "--force", stdout=out)

    assert not Visit.objects.exists()
    assert "Successfully cleared 2 visit records." in out.getvalue()


def test_clear_visits_cancelled(mocker: Any) -> None:
    _visit()
    mocker.patch("builtins.input", return_value="n")
    out = StringIO()

    call_command("clear_visits", stdout=out)

    assert Visit.objects.count() == 1
    assert "Operation cancelled." in out.getvalue()


def test_clear_visits_confirmed(mocker: Any) -> None:
    _visit()
    mocker.patch("builtins.input", return_value="yes")

    call_command("clear_visits", stdout=StringIO())

    assert not Visit.objects.exists()


def test_clear_visits_empty() -> None:
    out = StringIO()
    call_command("clear_visits", stdout=out)
    assert "already empty" in out.getvalue()

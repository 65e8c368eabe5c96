"""Django management command to delete recorded visits."""

from typing import Any

from django.core.management.base import BaseCommand, CommandParser

from apps.core.models import Visit


class Command(BaseCommand):
    """
    Delete every visit record.

    Asks for confirmation unless --force is given.

    Usage:
        python manage.py clear_visits [--force]
    """

    help = "Delete all recorded visits"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--force",
            action="store_true",
            help="Delete without asking for confirmation",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        count = Visit.objects.count()
        if count == 0:
            self.stdout.write(self.style.SUCCESS("Visits table is already empty."))
            return

        if not options["force"]:
            answer = input(f"This will delete all {count} visit records. Are you sure? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                self.stdout.write("Operation cancelled.")
                return

        Visit.objects.all().delete()
        self.stdout.write(self.style.SUCCESS(f"Successfully cleared {count} visit records."))

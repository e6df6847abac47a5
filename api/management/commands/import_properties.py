from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from analytics.exceptions import ImportFailedError
from analytics.record_store import get_store


class Command(BaseCommand):
    help = "Replace the property CSV and the published collection with the rows of a CSV file."

    def add_arguments(self, parser):
        parser.add_argument("csv_path", help="Path to the property CSV to import.")

    def handle(self, *args, **options):
        try:
            imported = get_store().replace_from_csv(options["csv_path"])
        except ImportFailedError as exc:
            raise CommandError(exc.detail) from exc
        self.stdout.write(self.style.SUCCESS(f"Imported {imported} properties."))

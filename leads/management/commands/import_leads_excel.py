import pandas as pd
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from leads.management.commands.import_leads import normalize_record
from leads.models import Lead
from services.errors import CRMError
from services.leads_service import LeadsService


def parse_cell(value):
    """Spreadsheet cell -> str or None, handling NaN and phone numbers read as floats"""
    if pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    value = str(value).strip()
    if value == "" or value.lower() == "nan":
        return None
    return value


class Command(BaseCommand):
    help = "Import leads from an Excel file into the database"

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            default='data/leads.xlsx',
            help='Path to Excel file, relative to the project root'
        )
        parser.add_argument(
            '--sheet',
            type=str,
            default=None,
            help='Sheet name (defaults to the first sheet)'
        )
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete all unconverted leads before importing'
        )

    def handle(self, *args, **options):
        file_path = Path(settings.BASE_DIR) / options['file']

        if not file_path.exists():
            raise CommandError(f"Excel file not found at {file_path}")

        try:
            df = pd.read_excel(file_path, sheet_name=options['sheet'] or 0)
        except Exception as e:
            raise CommandError(f"Error reading Excel file: {e}")
        self.stdout.write(f"Found {len(df)} rows in Excel file")

        if options['reset']:
            deleted, _ = Lead.objects.filter(converted_to_customer=False).delete()
            self.stdout.write(self.style.WARNING(f"Deleted {deleted} existing records"))

        service = LeadsService()
        created_count = 0
        updated_count = 0
        error_count = 0

        for index, row in df.iterrows():
            record = {column: parse_cell(value) for column, value in row.items()}
            data = normalize_record(record)
            if not data:
                continue

            try:
                lead, created = service.upsert_lead(data)
            except CRMError as e:
                error_count += 1
                self.stdout.write(self.style.ERROR(f"Row {index + 2}: {e.message}"))
                continue

            if created:
                created_count += 1
            else:
                updated_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"\nImport complete:\n"
                f"  - {created_count} created\n"
                f"  - {updated_count} updated\n"
                f"  - {error_count} errors"
            )
        )

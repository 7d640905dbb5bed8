import json
from pathlib import Path
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from services.errors import CRMError
from services.leads_service import LeadsService

# Spreadsheet / export headers -> lead fields
COLUMN_MAPPING = {
    "Name": "name",
    "First name": "first_name",
    "Last name": "last_name",
    "ID number": "id_number",
    "Email": "email",
    "Phone": "phone",
    "Street": "street",
    "City": "city",
    "Province": "province",
    "Status": "status",
    "Priority": "priority",
    "Source": "source",
    "Brand": "brand",
    "Interest": "brand_interest",
    "Notes": "notes",
}

LEAD_FIELDS = set(COLUMN_MAPPING.values())


def normalize_record(record: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Map a raw import record onto lead fields; accepts headers or field names"""
    data = {}
    for key, value in record.items():
        field = COLUMN_MAPPING.get(key, key)
        if field not in LEAD_FIELDS:
            continue
        if value is None:
            continue
        value = str(value).strip()
        if value:
            data[field] = value.lower() if field in ("status", "priority", "source", "brand") else value
    return data


class Command(BaseCommand):
    help = "Import leads from a JSON file into the database"

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            default='data/leads.json',
            help='Path to the JSON file, relative to the project root'
        )

    def handle(self, *args, **options):
        json_path = Path(settings.BASE_DIR) / options['file']

        if not json_path.exists():
            raise CommandError(f"Leads JSON file not found at {json_path}")

        with open(json_path, "r", encoding="utf-8") as f:
            leads_data = json.load(f)

        if not isinstance(leads_data, list):
            raise CommandError("Leads JSON file must contain a list of records")

        service = LeadsService()
        created_count = 0
        updated_count = 0
        error_count = 0

        for index, record in enumerate(leads_data, start=1):
            try:
                lead, created = service.upsert_lead(normalize_record(record))
            except CRMError as e:
                error_count += 1
                self.stdout.write(self.style.ERROR(f"Record {index}: {e.message}"))
                continue

            if created:
                created_count += 1
            else:
                updated_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Import complete: {created_count} created, {updated_count} updated, {error_count} errors"
            )
        )

"""
Tests for name and phone helpers
"""
from types import SimpleNamespace

import pytest

from customers.models import Customer
from leads.models import Lead
from services.name_utils import (
    ensure_name_field,
    generate_full_name,
    is_name_consistent,
    split_full_name,
)
from services.phone_utils import join_phone_number, parse_phone_number


class TestGenerateFullName:
    """Test generate_full_name"""

    def test_joins_parts(self):
        assert generate_full_name("Ana", "Torres") == "Ana Torres"

    def test_trims_parts(self):
        assert generate_full_name("  Ana ", " Torres  ") == "Ana Torres"

    def test_single_part(self):
        assert generate_full_name("Ana", None) == "Ana"
        assert generate_full_name(None, "Torres") == "Torres"
        assert generate_full_name("   ", "Torres") == "Torres"

    def test_no_parts(self):
        assert generate_full_name(None, None) == ""
        assert generate_full_name("", "  ") == ""

    @pytest.mark.parametrize("full_name", ["Ana", "Ana Torres", "Ana Maria Torres", "Jos\u00e9 de la Cruz"])
    def test_round_trips_a_split_name(self, full_name):
        parts = full_name.split(" ")
        assert generate_full_name(parts[0], " ".join(parts[1:])) == full_name

    @pytest.mark.parametrize("first,last", [("a", "b"), (" x ", "y "), ("", "z"), ("q", "")])
    def test_never_has_surrounding_or_double_spaces(self, first, last):
        name = generate_full_name(first, last)
        assert name == name.strip()
        assert "  " not in name


class TestEnsureNameField:
    """Test ensure_name_field"""

    def test_sets_name_from_parts(self):
        record = {"first_name": "Ana", "last_name": "Torres", "name": "stale"}
        result = ensure_name_field(record)
        assert result["name"] == "Ana Torres"
        assert record["name"] == "stale"

    def test_idempotent(self):
        record = {"first_name": "Ana", "last_name": "Torres"}
        once = ensure_name_field(record)
        assert ensure_name_field(once) == once

    def test_without_parts_returns_record_unchanged(self):
        record = {"name": "Legacy Name"}
        assert ensure_name_field(record) is record

    def test_accepts_objects(self):
        record = SimpleNamespace(first_name="Ana", last_name=" Torres", name="stale")

        result = ensure_name_field(record)

        assert result.name == "Ana Torres"
        assert record.name == "stale"

    def test_accepts_model_instances(self):
        lead = Lead(first_name="Ana", last_name="Torres")
        assert ensure_name_field(lead).name == "Ana Torres"
        assert lead.name == ""


class TestIsNameConsistent:
    """Test is_name_consistent"""

    def test_consistent_record(self):
        assert is_name_consistent({"first_name": "Ana", "last_name": "Torres", "name": "Ana Torres"})

    def test_inconsistent_record(self):
        assert not is_name_consistent({"first_name": "Ana", "last_name": "Torres", "name": "Ana"})

    def test_missing_part_counts_as_consistent(self):
        assert is_name_consistent({"first_name": "Ana", "name": "whatever"})
        assert is_name_consistent({"name": "Legacy"})

    def test_after_ensure_name_field(self):
        assert is_name_consistent(ensure_name_field({"first_name": " Ana", "last_name": "Torres "}))


class TestSplitFullName:
    """Test split_full_name"""

    def test_splits_on_first_whitespace(self):
        assert split_full_name("Ana Maria Torres") == ("Ana", "Maria Torres")

    def test_single_token(self):
        assert split_full_name("Ana") == ("Ana", "")

    def test_empty(self):
        assert split_full_name(None) == ("", "")
        assert split_full_name("   ") == ("", "")


@pytest.mark.django_db
class TestModelNameSync:
    """Lead and Customer keep name in sync on save"""

    def test_lead_name_synced(self):
        lead = Lead.objects.create(first_name="Ana", last_name="Torres")
        assert lead.name == "Ana Torres"

        lead.last_name = "Vega"
        lead.save()
        lead.refresh_from_db()
        assert lead.name == "Ana Vega"

    def test_customer_name_synced(self):
        customer = Customer.objects.create(first_name="Luis", last_name="Mora")
        assert customer.name == "Luis Mora"
        assert is_name_consistent(customer)


class TestPhoneUtils:
    """Test phone number helpers"""

    def test_unparseable_number_gets_default_country(self, settings):
        settings.DEFAULT_PHONE_COUNTRY = "+593"
        assert parse_phone_number("12345") == ("+593", "12345")

    def test_parse_strips_formatting(self):
        country, number = parse_phone_number("+1 (555) 123-4567")
        assert (country + number).lstrip("+") == "15551234567"

    def test_join(self):
        assert join_phone_number("+593", "98 765 4321") == "+593987654321"

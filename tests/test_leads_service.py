"""
Tests for lead management and conversion
"""
import pytest

from activities.models import Activity
from customers.models import Customer
from leads.models import Lead
from services.errors import NotFoundError, ValidationError
from services.events import EventTypes
from services.leads_service import LeadsService
from tests.helpers import RecordingListener


@pytest.mark.django_db
class TestCreateLead:
    """Test LeadsService.create_lead"""

    def test_create_lead_splits_name_and_applies_defaults(self, event_bus, sample_lead_data, settings):
        settings.DEFAULT_BRAND = "sleepwear"
        recorder = RecordingListener(event_bus, EventTypes.LEAD_CREATED)
        data = dict(sample_lead_data)
        data.pop("source")
        data.pop("brand")

        lead = LeadsService(event_bus).create_lead(data)

        assert lead.first_name == "Ana"
        assert lead.last_name == "Torres"
        assert lead.name == "Ana Torres"
        assert lead.status == "new"
        assert lead.source == "website"
        assert lead.brand == "sleepwear"
        assert lead.phone_number
        assert recorder.of_type(EventTypes.LEAD_CREATED) == [lead]

    def test_create_lead_requires_name(self, event_bus):
        with pytest.raises(ValidationError, match="name"):
            LeadsService(event_bus).create_lead({"email": "x@example.com", "name": "   "})
        assert Lead.objects.count() == 0

    def test_create_lead_rejects_unknown_status(self, event_bus):
        with pytest.raises(ValidationError) as exc_info:
            LeadsService(event_bus).create_lead({"name": "Ana", "status": "bogus"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message.startswith("status:")


@pytest.mark.django_db
class TestConvertLead:
    """Test LeadsService.convert_lead_by_id"""

    def test_convert_creates_customer_and_marks_lead(self, event_bus, lead):
        recorder = RecordingListener(event_bus, EventTypes.LEAD_CONVERTED)
        lead.brand_interest = "Silk pajamas"
        lead.notes = "Prefers WhatsApp"
        lead.save()

        result = LeadsService(event_bus).convert_lead_by_id(lead.id)

        lead.refresh_from_db()
        customer = Customer.objects.get(id=result["customer"])
        assert result == {"lead": lead.id, "customer": customer.id, "success": True}
        assert lead.converted_to_customer is True
        assert lead.converted_customer_id == customer.id
        assert lead.status == "converted"
        assert customer.name == "Ana Torres"
        assert customer.email == lead.email
        assert customer.notes == "Specific interest: Silk pajamas\nPrefers WhatsApp"

        converted = recorder.of_type(EventTypes.LEAD_CONVERTED)
        assert len(converted) == 1
        assert converted[0]["customer"].id == customer.id

    def test_convert_is_idempotent(self, event_bus, lead):
        recorder = RecordingListener(event_bus, EventTypes.LEAD_CONVERTED)
        service = LeadsService(event_bus)

        first = service.convert_lead_by_id(lead.id)
        second = service.convert_lead_by_id(lead.id)

        assert first == second
        assert Customer.objects.count() == 1
        assert len(recorder.of_type(EventTypes.LEAD_CONVERTED)) == 1

    def test_convert_splits_legacy_name(self, event_bus):
        lead = Lead.objects.create(email="legacy@example.com")
        Lead.objects.filter(id=lead.id).update(name="Maria Jose Perez", first_name="", last_name="")

        result = LeadsService(event_bus).convert_lead_by_id(lead.id)

        customer = Customer.objects.get(id=result["customer"])
        assert customer.first_name == "Maria"
        assert customer.last_name == "Jose Perez"

    def test_convert_missing_lead(self, event_bus):
        with pytest.raises(NotFoundError):
            LeadsService(event_bus).convert_lead_by_id(9999)

    def test_status_update_to_converted_runs_conversion(self, event_bus, lead):
        lead = LeadsService(event_bus).update_lead(lead.id, {"status": "converted"})

        assert lead.converted_to_customer is True
        assert Customer.objects.filter(id=lead.converted_customer_id).exists()

    def test_convert_with_details_requires_id_number(self, event_bus, lead):
        with pytest.raises(ValidationError, match="id_number"):
            LeadsService(event_bus).convert_lead_with_details(lead.id, {"city": "Cuenca"})
        lead.refresh_from_db()
        assert lead.converted_to_customer is False

    def test_convert_with_details_copies_details(self, event_bus, lead):
        result = LeadsService(event_bus).convert_lead_with_details(
            lead.id, {"id_number": "1712345678", "city": "Cuenca"}
        )

        customer = Customer.objects.get(id=result["customer"])
        assert customer.id_number == "1712345678"
        assert customer.city == "Cuenca"


@pytest.mark.django_db
class TestUpdateAndDeleteLead:
    """Test partial updates, deletion and upserts"""

    def test_partial_update_keeps_other_fields(self, event_bus, lead):
        updated = LeadsService(event_bus).update_lead(lead.id, {"city": "Loja"})

        assert updated.city == "Loja"
        assert updated.email == lead.email
        assert updated.name == "Ana Torres"

    def test_delete_removes_activities(self, event_bus, lead):
        from django.utils import timezone

        now = timezone.now()
        Activity.objects.create(title="Call Ana", start_time=now, end_time=now, lead=lead)
        recorder = RecordingListener(event_bus, EventTypes.LEAD_DELETED)

        deleted = LeadsService(event_bus).delete_lead(lead.id)

        assert not Lead.objects.filter(id=lead.id).exists()
        assert Activity.objects.count() == 0
        assert recorder.of_type(EventTypes.LEAD_DELETED)[0].id == deleted.id

    def test_upsert_matches_on_email(self, event_bus, lead):
        service = LeadsService(event_bus)

        updated, created = service.upsert_lead({"name": "Ana Torres", "email": lead.email, "city": "Ambato"})
        new, new_created = service.upsert_lead({"name": "Pedro Paz", "email": "pedro@example.com"})

        assert created is False
        assert updated.id == lead.id
        assert updated.city == "Ambato"
        assert new_created is True
        assert Lead.objects.count() == 2

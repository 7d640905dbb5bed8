"""
Lead management and the lead -> customer conversion.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from customers.models import BRAND_CHOICES, SOURCE_CHOICES, Customer
from leads.models import Lead, LeadActivity
from services.errors import NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.name_utils import split_full_name
from services.phone_utils import join_phone_number, parse_phone_number

logger = logging.getLogger(__name__)

LEAD_STATUSES = [value for value, _ in Lead.STATUS_CHOICES]
LEAD_PRIORITIES = [value for value, _ in Lead.PRIORITY_CHOICES]
LEAD_ACTIVITY_STATUSES = [value for value, _ in LeadActivity.STATUS_CHOICES]
BRANDS = [value for value, _ in BRAND_CHOICES]
SOURCES = [value for value, _ in SOURCE_CHOICES]

# Plain text fields copied from the request body, blank -> None
LEAD_TEXT_FIELDS = (
    "email",
    "phone",
    "phone_country",
    "phone_number",
    "street",
    "city",
    "province",
    "delivery_instructions",
    "brand_interest",
    "id_number",
    "notes",
    "communication_preference",
)


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a string; blank becomes None"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def check_choice(value: Optional[str], allowed, field: str) -> None:
    if value is not None and value not in allowed:
        raise ValidationError(f"must be one of: {', '.join(allowed)}", field=field)


def resolve_name_parts(data: Dict[str, Any], current_first: str = "", current_last: str = ""):
    """
    Work out ``(first_name, last_name)`` from a request body.

    Explicit parts win; otherwise ``name`` is split on its first whitespace.
    """
    first = clean_text(data.get("first_name"))
    last = clean_text(data.get("last_name"))
    if first or last:
        return first or "", last or ""

    name = clean_text(data.get("name"))
    if name:
        return split_full_name(name)
    return current_first, current_last


def fill_phone_parts(values: Dict[str, Any]) -> None:
    """Fill whichever of phone or phone_country / phone_number is missing from the other"""
    phone = values.get("phone")
    if phone and not values.get("phone_number"):
        country, number = parse_phone_number(phone)
        values["phone_country"] = values.get("phone_country") or country
        values["phone_number"] = number
    elif not phone and values.get("phone_number"):
        country = values.get("phone_country") or settings.DEFAULT_PHONE_COUNTRY
        values["phone_country"] = country
        values["phone"] = join_phone_number(country, values["phone_number"])


class LeadsService:
    """Service responsible for managing leads"""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or get_event_bus()

    def list_leads(
        self,
        status: Optional[str] = None,
        source: Optional[str] = None,
        brand: Optional[str] = None,
        search: Optional[str] = None,
    ):
        queryset = Lead.objects.select_related("converted_customer").order_by("-created_at")
        if status:
            queryset = queryset.filter(status=status)
        if source:
            queryset = queryset.filter(source=source)
        if brand:
            queryset = queryset.filter(brand=brand)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
            )
        return queryset

    def get_lead(self, lead_id: int) -> Lead:
        try:
            return Lead.objects.select_related("converted_customer").get(id=lead_id)
        except Lead.DoesNotExist:
            raise NotFoundError("Lead", lead_id)

    def create_lead(self, data: Dict[str, Any]) -> Lead:
        first_name, last_name = resolve_name_parts(data)
        if not first_name and not last_name:
            raise ValidationError("Name is required", field="name")

        status = data.get("status") or Lead.STATUS_NEW
        source = data.get("source") or "website"
        brand = data.get("brand") or settings.DEFAULT_BRAND
        priority = data.get("priority") or "medium"
        check_choice(status, LEAD_STATUSES, "status")
        check_choice(source, SOURCES, "source")
        check_choice(brand, BRANDS, "brand")
        check_choice(priority, LEAD_PRIORITIES, "priority")

        values = {field: clean_text(data.get(field)) for field in LEAD_TEXT_FIELDS}
        fill_phone_parts(values)

        lead = Lead.objects.create(
            first_name=first_name,
            last_name=last_name,
            status=status,
            source=source,
            brand=brand,
            priority=priority,
            last_contact=data.get("last_contact"),
            next_follow_up=data.get("next_follow_up"),
            **values,
        )
        logger.info(f"Created lead {lead.id} ({lead.name})")

        self.events.emit(EventTypes.LEAD_CREATED, lead)
        return lead

    def update_lead(self, lead_id: int, data: Dict[str, Any]) -> Lead:
        """
        Apply a partial update.

        Moving the status to ``converted`` runs the conversion instead of just
        writing the status.
        """
        lead = self.get_lead(lead_id)

        status = data.get("status")
        check_choice(status, LEAD_STATUSES, "status")
        check_choice(data.get("source"), SOURCES, "source")
        check_choice(data.get("brand"), BRANDS, "brand")
        check_choice(data.get("priority"), LEAD_PRIORITIES, "priority")

        if "name" in data or "first_name" in data or "last_name" in data:
            first_name, last_name = resolve_name_parts(data, lead.first_name, lead.last_name)
            if not first_name and not last_name:
                raise ValidationError("Name is required", field="name")
            lead.first_name, lead.last_name = first_name, last_name

        for field in LEAD_TEXT_FIELDS:
            if field in data:
                setattr(lead, field, clean_text(data[field]))
        for field in ("source", "brand", "priority", "last_contact", "next_follow_up"):
            if data.get(field) is not None:
                setattr(lead, field, data[field])

        converting = status == Lead.STATUS_CONVERTED and lead.status != Lead.STATUS_CONVERTED
        if status and not converting:
            lead.status = status

        lead.save()

        if converting:
            self.convert_lead_by_id(lead.id)
            lead.refresh_from_db()

        logger.info(f"Updated lead {lead.id}")
        self.events.emit(EventTypes.LEAD_UPDATED, lead)
        return lead

    def delete_lead(self, lead_id: int) -> Lead:
        lead = self.get_lead(lead_id)

        with transaction.atomic():
            lead.activities.all().delete()
            deleted_id = lead.id
            lead.delete()
            lead.id = deleted_id

        logger.info(f"Deleted lead {deleted_id}")
        self.events.emit(EventTypes.LEAD_DELETED, lead)
        return lead

    def convert_lead_by_id(self, lead_id: int) -> Dict[str, Any]:
        """
        Convert a lead into a customer.

        Converting an already converted lead returns the existing pair and
        writes nothing. The customer insert and the lead update commit
        together.

        Returns:
            ``{"lead": lead_id, "customer": customer_id, "success": True}``
        """
        with transaction.atomic():
            try:
                lead = Lead.objects.select_for_update().get(id=lead_id)
            except Lead.DoesNotExist:
                raise NotFoundError("Lead", lead_id)

            if lead.is_converted:
                return {
                    "lead": lead.id,
                    "customer": lead.converted_customer_id,
                    "success": True,
                }

            first_name, last_name = lead.first_name, lead.last_name
            if not first_name and not last_name:
                first_name, last_name = split_full_name(lead.name)

            customer_notes = lead.notes or None
            if lead.brand_interest:
                customer_notes = f"Specific interest: {lead.brand_interest}\n{customer_notes or ''}".strip()

            customer = Customer.objects.create(
                first_name=first_name,
                last_name=last_name,
                email=lead.email,
                phone=lead.phone,
                phone_country=lead.phone_country,
                phone_number=lead.phone_number,
                street=lead.street,
                city=lead.city,
                province=lead.province,
                delivery_instructions=lead.delivery_instructions,
                id_number=lead.id_number,
                source=lead.source or "website",
                brand=lead.brand or settings.DEFAULT_BRAND,
                assigned_user=lead.assigned_user,
                notes=customer_notes,
            )

            lead.converted_to_customer = True
            lead.converted_customer = customer
            lead.status = Lead.STATUS_CONVERTED
            lead.save(update_fields=["converted_to_customer", "converted_customer", "status", "updated_at"])

        logger.info(f"Converted lead {lead.id} to customer {customer.id}")
        self.events.emit(EventTypes.LEAD_CONVERTED, {"lead": lead, "customer": customer})

        return {"lead": lead.id, "customer": customer.id, "success": True}

    def upsert_lead(self, data: Dict[str, Any]) -> Tuple[Lead, bool]:
        """
        Create a lead, or update the one with the same email (or phone).

        Used by the bulk importers. Returns ``(lead, created)``.
        """
        existing = None
        for field in ("email", "phone"):
            value = clean_text(data.get(field))
            if value:
                existing = Lead.objects.filter(**{field: value}).order_by("id").first()
                if existing:
                    break

        if existing is None:
            return self.create_lead(data), True

        update = {key: value for key, value in data.items() if value is not None}
        return self.update_lead(existing.id, update), False

    def convert_lead_with_details(self, lead_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update the lead with the details collected at conversion time, then convert it"""
        if not clean_text(data.get("id_number")):
            raise ValidationError("ID number is required", field="id_number")

        lead = self.get_lead(lead_id)
        if not lead.is_converted:
            update = {key: value for key, value in data.items() if key != "status" and value is not None}
            self.update_lead(lead.id, update)

        return self.convert_lead_by_id(lead.id)

    def list_lead_activities(self, lead_id: int):
        """Follow-up history of a lead, newest first"""
        lead = self.get_lead(lead_id)
        return lead.activity_log.order_by("-created_at", "-id")

    def add_lead_activity(self, lead_id: int, data: Dict[str, Any], user=None) -> LeadActivity:
        """
        Record a follow-up on a lead and stamp the lead's ``last_contact``.

        A completed entry without ``completed_date`` is dated now.
        """
        activity_type = clean_text(data.get("type"))
        if not activity_type:
            raise ValidationError("Type is required", field="type")

        status = data.get("status") or "pending"
        priority = data.get("priority") or "medium"
        check_choice(status, LEAD_ACTIVITY_STATUSES, "status")
        check_choice(priority, LEAD_PRIORITIES, "priority")

        completed_date = data.get("completed_date")
        if status == "completed" and completed_date is None:
            completed_date = timezone.now()

        with transaction.atomic():
            lead = Lead.objects.select_for_update().filter(id=lead_id).first()
            if lead is None:
                raise NotFoundError("Lead", lead_id)

            activity = LeadActivity.objects.create(
                lead=lead,
                type=activity_type,
                title=clean_text(data.get("title")),
                notes=clean_text(data.get("notes")),
                status=status,
                priority=priority,
                due_date=data.get("due_date"),
                completed_date=completed_date,
                assigned_user=user if user is not None and user.is_authenticated else None,
                result=clean_text(data.get("result")),
            )
            lead.last_contact = activity.created_at
            lead.save(update_fields=["last_contact", "updated_at"])

        logger.info(f"Logged {activity_type} activity {activity.id} on lead {lead.id}")
        self.events.emit(EventTypes.LEAD_ACTIVITY_LOGGED, activity)
        return activity

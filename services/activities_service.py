import logging
from datetime import datetime
from typing import Any, Dict, Optional

from django.contrib.auth.models import User

from activities.models import PRIORITY_CHOICES, Activity, Interaction, Opportunity
from customers.models import Customer
from leads.models import Lead
from services.errors import NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.leads_service import BRANDS, check_choice

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = [value for value, _ in Activity.TYPE_CHOICES]
ACTIVITY_STATUSES = [value for value, _ in Activity.STATUS_CHOICES]
PRIORITIES = [value for value, _ in PRIORITY_CHOICES]
OPPORTUNITY_STATUSES = [value for value, _ in Opportunity.STATUS_CHOICES]
INTERACTION_TYPES = [value for value, _ in Interaction.TYPE_CHOICES]
INTERACTION_CHANNELS = [value for value, _ in Interaction.CHANNEL_CHOICES]

ACTIVITY_FIELDS = (
    "type",
    "title",
    "description",
    "start_time",
    "end_time",
    "status",
    "priority",
    "reminder_time",
    "notes",
)


def _lookup(model, object_id, label):
    if object_id is None:
        return None
    try:
        return model.objects.get(id=object_id)
    except model.DoesNotExist:
        raise NotFoundError(label, object_id)


class ActivitiesService:
    """Calendar activities, sales opportunities and logged interactions"""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or get_event_bus()

    # Activities

    def list_activities(
        self,
        status: Optional[str] = None,
        type: Optional[str] = None,
        priority: Optional[str] = None,
        lead_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        assigned_user_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ):
        queryset = Activity.objects.select_related("customer", "lead", "assigned_user")
        if status:
            queryset = queryset.filter(status=status)
        if type:
            queryset = queryset.filter(type=type)
        if priority:
            queryset = queryset.filter(priority=priority)
        if lead_id is not None:
            queryset = queryset.filter(lead_id=lead_id)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        if assigned_user_id is not None:
            queryset = queryset.filter(assigned_user_id=assigned_user_id)
        if date_from:
            queryset = queryset.filter(start_time__gte=date_from)
        if date_to:
            queryset = queryset.filter(start_time__lte=date_to)
        return queryset.order_by("start_time")

    def calendar(self, start: datetime, end: datetime):
        """Activities overlapping the ``[start, end]`` window"""
        if end < start:
            raise ValidationError("end must not be before start", field="end")
        return (
            Activity.objects.select_related("customer", "lead")
            .filter(start_time__lte=end, end_time__gte=start)
            .order_by("start_time")
        )

    def get_activity(self, activity_id: int) -> Activity:
        try:
            return Activity.objects.select_related("customer", "lead", "assigned_user").get(id=activity_id)
        except Activity.DoesNotExist:
            raise NotFoundError("Activity", activity_id)

    def _validate_activity(self, data: Dict[str, Any]) -> None:
        check_choice(data.get("type"), ACTIVITY_TYPES, "type")
        check_choice(data.get("status"), ACTIVITY_STATUSES, "status")
        check_choice(data.get("priority"), PRIORITIES, "priority")
        if data.get("title") is not None and len(data["title"].strip()) < 3:
            raise ValidationError("must be at least 3 characters", field="title")

    def _apply_relations(self, activity: Activity, data: Dict[str, Any]) -> None:
        if "customer_id" in data:
            activity.customer = _lookup(Customer, data["customer_id"], "Customer")
        if "lead_id" in data:
            activity.lead = _lookup(Lead, data["lead_id"], "Lead")
        if "opportunity_id" in data:
            activity.opportunity = _lookup(Opportunity, data["opportunity_id"], "Opportunity")
        if "assigned_user_id" in data:
            activity.assigned_user = _lookup(User, data["assigned_user_id"], "User")

    def _check_activity(self, activity: Activity) -> None:
        if not (activity.customer_id or activity.lead_id):
            raise ValidationError("A customer or lead is required", field="customer_id")
        if activity.end_time < activity.start_time:
            raise ValidationError("must not be before start_time", field="end_time")

    def create_activity(self, data: Dict[str, Any], user: Optional[User] = None) -> Activity:
        for field in ("title", "start_time", "end_time"):
            if data.get(field) is None:
                raise ValidationError("is required", field=field)
        self._validate_activity(data)

        activity = Activity(**{field: data[field] for field in ACTIVITY_FIELDS if data.get(field) is not None})
        activity.title = activity.title.strip()
        self._apply_relations(activity, data)
        if activity.assigned_user_id is None and user is not None:
            activity.assigned_user = user
        self._check_activity(activity)
        activity.save()
        logger.info(f"Created activity {activity.id} ({activity.type})")

        self.events.emit(EventTypes.ACTIVITY_CREATED, activity)
        return activity

    def update_activity(self, activity_id: int, data: Dict[str, Any]) -> Activity:
        activity = self.get_activity(activity_id)
        self._validate_activity(data)

        for field in ACTIVITY_FIELDS:
            if data.get(field) is not None:
                setattr(activity, field, data[field])
        self._apply_relations(activity, data)
        self._check_activity(activity)
        activity.save()
        logger.info(f"Updated activity {activity.id}")

        self.events.emit(EventTypes.ACTIVITY_UPDATED, activity)
        return activity

    def delete_activity(self, activity_id: int) -> Activity:
        activity = self.get_activity(activity_id)
        deleted_id = activity.id
        activity.delete()
        activity.id = deleted_id
        logger.info(f"Deleted activity {deleted_id}")

        self.events.emit(EventTypes.ACTIVITY_DELETED, activity)
        return activity

    # Opportunities

    def list_opportunities(self, status: Optional[str] = None, customer_id: Optional[int] = None):
        queryset = Opportunity.objects.select_related("customer", "lead").order_by("-created_at")
        if status:
            queryset = queryset.filter(status=status)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        return queryset

    def create_opportunity(self, data: Dict[str, Any], user: Optional[User] = None) -> Opportunity:
        if not (data.get("name") or "").strip():
            raise ValidationError("is required", field="name")
        if not data.get("customer_id") and not data.get("lead_id"):
            raise ValidationError("A customer or lead is required", field="customer_id")
        check_choice(data.get("status"), OPPORTUNITY_STATUSES, "status")
        check_choice(data.get("brand"), BRANDS, "brand")
        probability = data.get("probability")
        if probability is not None and not 0 <= probability <= 100:
            raise ValidationError("must be between 0 and 100", field="probability")

        opportunity = Opportunity.objects.create(
            name=data["name"].strip(),
            customer=_lookup(Customer, data.get("customer_id"), "Customer"),
            lead=_lookup(Lead, data.get("lead_id"), "Lead"),
            estimated_value=data.get("estimated_value") or 0,
            probability=probability,
            status=data.get("status") or "negotiation",
            stage=data.get("stage") or "initial",
            assigned_user=user,
            brand=data.get("brand") or "sleepwear",
            estimated_close_date=data.get("estimated_close_date"),
            products_interested=data.get("products_interested") or [],
            notes=data.get("notes"),
        )
        logger.info(f"Created opportunity {opportunity.id}")
        return opportunity

    def update_opportunity_status(self, opportunity_id: int, status: str, stage: Optional[str] = None) -> Opportunity:
        opportunity = _lookup(Opportunity, opportunity_id, "Opportunity")
        check_choice(status, OPPORTUNITY_STATUSES, "status")
        opportunity.status = status
        if stage:
            opportunity.stage = stage
        opportunity.save(update_fields=["status", "stage", "updated_at"])
        logger.info(f"Opportunity {opportunity.id} moved to {status}")
        return opportunity

    # Interactions

    def list_interactions(
        self,
        customer_id: Optional[int] = None,
        lead_id: Optional[int] = None,
        resolved: Optional[bool] = None,
    ):
        queryset = Interaction.objects.select_related("customer", "lead").order_by("-created_at")
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        if lead_id is not None:
            queryset = queryset.filter(lead_id=lead_id)
        if resolved is not None:
            queryset = queryset.filter(is_resolved=resolved)
        return queryset

    def create_interaction(self, data: Dict[str, Any], user: Optional[User] = None) -> Interaction:
        if not (data.get("content") or "").strip():
            raise ValidationError("is required", field="content")
        if not data.get("customer_id") and not data.get("lead_id"):
            raise ValidationError("A customer or lead is required", field="customer_id")
        check_choice(data.get("type"), INTERACTION_TYPES, "type")
        check_choice(data.get("channel"), INTERACTION_CHANNELS, "channel")

        interaction = Interaction.objects.create(
            customer=_lookup(Customer, data.get("customer_id"), "Customer"),
            lead=_lookup(Lead, data.get("lead_id"), "Lead"),
            opportunity=_lookup(Opportunity, data.get("opportunity_id"), "Opportunity"),
            type=data.get("type") or "query",
            channel=data.get("channel") or "whatsapp",
            content=data["content"].strip(),
            attachments=data.get("attachments") or [],
            assigned_user=user,
        )
        logger.info(f"Logged {interaction.channel} interaction {interaction.id}")
        return interaction

    def resolve_interaction(self, interaction_id: int, resolution_notes: Optional[str] = None) -> Interaction:
        interaction = _lookup(Interaction, interaction_id, "Interaction")
        interaction.is_resolved = True
        interaction.resolution_notes = resolution_notes
        interaction.save(update_fields=["is_resolved", "resolution_notes"])
        return interaction

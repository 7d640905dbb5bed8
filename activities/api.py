from datetime import datetime
from typing import List, Optional
from ninja import Router

from activities.schemas import (
    ActivityCreateSchema,
    ActivityResponseSchema,
    ActivityUpdateSchema,
    InteractionCreateSchema,
    InteractionResolveSchema,
    InteractionResponseSchema,
    OpportunityCreateSchema,
    OpportunityResponseSchema,
    OpportunityStatusSchema,
)
from authentication.mixed_auth import mixed_auth
from services.activities_service import ActivitiesService


router = Router(auth=mixed_auth)
opportunities_router = Router(auth=mixed_auth)
interactions_router = Router(auth=mixed_auth)


@router.get("", response=List[ActivityResponseSchema])
def list_activities(
    request,
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    lead_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    assigned_user_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    return ActivitiesService().list_activities(
        status=status,
        type=type,
        priority=priority,
        lead_id=lead_id,
        customer_id=customer_id,
        assigned_user_id=assigned_user_id,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/calendar", response={200: List[ActivityResponseSchema], 400: dict})
def calendar(request, start: datetime, end: datetime):
    """Activities overlapping the ``start`` - ``end`` window"""
    return ActivitiesService().calendar(start, end)


@router.post("", response={201: ActivityResponseSchema, 400: dict, 404: dict})
def create_activity(request, data: ActivityCreateSchema):
    """Schedule an activity; it is assigned to the caller unless stated otherwise"""
    activity = ActivitiesService().create_activity(data.dict(exclude_unset=True), user=request.auth)
    return 201, activity


@router.get("/{activity_id}", response={200: ActivityResponseSchema, 404: dict})
def get_activity(request, activity_id: int):
    return ActivitiesService().get_activity(activity_id)


@router.patch("/{activity_id}", response={200: ActivityResponseSchema, 400: dict, 404: dict})
def update_activity(request, activity_id: int, data: ActivityUpdateSchema):
    return ActivitiesService().update_activity(activity_id, data.dict(exclude_unset=True))


@router.delete("/{activity_id}", response={200: dict, 404: dict})
def delete_activity(request, activity_id: int):
    activity = ActivitiesService().delete_activity(activity_id)
    return {"success": True, "id": activity.id}


@opportunities_router.get("", response=List[OpportunityResponseSchema])
def list_opportunities(request, status: Optional[str] = None, customer_id: Optional[int] = None):
    return ActivitiesService().list_opportunities(status=status, customer_id=customer_id)


@opportunities_router.post("", response={201: OpportunityResponseSchema, 400: dict, 404: dict})
def create_opportunity(request, data: OpportunityCreateSchema):
    opportunity = ActivitiesService().create_opportunity(data.dict(), user=request.auth)
    return 201, opportunity


@opportunities_router.patch("/{opportunity_id}/status", response={200: OpportunityResponseSchema, 400: dict, 404: dict})
def update_opportunity_status(request, opportunity_id: int, data: OpportunityStatusSchema):
    return ActivitiesService().update_opportunity_status(opportunity_id, data.status, stage=data.stage)


@interactions_router.get("", response=List[InteractionResponseSchema])
def list_interactions(
    request,
    customer_id: Optional[int] = None,
    lead_id: Optional[int] = None,
    resolved: Optional[bool] = None,
):
    return ActivitiesService().list_interactions(customer_id=customer_id, lead_id=lead_id, resolved=resolved)


@interactions_router.post("", response={201: InteractionResponseSchema, 400: dict, 404: dict})
def create_interaction(request, data: InteractionCreateSchema):
    """Log a message or call with a customer or lead"""
    interaction = ActivitiesService().create_interaction(data.dict(), user=request.auth)
    return 201, interaction


@interactions_router.post("/{interaction_id}/resolve", response={200: InteractionResponseSchema, 404: dict})
def resolve_interaction(request, interaction_id: int, data: InteractionResolveSchema):
    return ActivitiesService().resolve_interaction(interaction_id, data.resolution_notes)

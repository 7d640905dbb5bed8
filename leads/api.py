from typing import List, Optional
from ninja import Router

from authentication.mixed_auth import mixed_auth
from leads.schemas import (
    ConversionResponseSchema,
    ConvertWithDetailsSchema,
    LeadActivityCreateSchema,
    LeadActivityResponseSchema,
    LeadCreateSchema,
    LeadResponseSchema,
    LeadUpdateSchema,
)
from services.leads_service import LeadsService


router = Router(auth=mixed_auth)


@router.get("", response=List[LeadResponseSchema])
def list_leads(
    request,
    status: Optional[str] = None,
    source: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None,
):
    """List leads, newest first"""
    return LeadsService().list_leads(status=status, source=source, brand=brand, search=search)


@router.post("", response={201: LeadResponseSchema, 400: dict})
def create_lead(request, data: LeadCreateSchema):
    """Register a new lead"""
    lead = LeadsService().create_lead(data.dict())
    return 201, lead


@router.get("/{lead_id}", response={200: LeadResponseSchema, 404: dict})
def get_lead(request, lead_id: int):
    return LeadsService().get_lead(lead_id)


@router.put("/{lead_id}", response={200: LeadResponseSchema, 400: dict, 404: dict})
def update_lead(request, lead_id: int, data: LeadUpdateSchema):
    """
    Update a lead. Only the fields present in the body are changed.

    Setting ``status`` to ``converted`` converts the lead into a customer.
    """
    return LeadsService().update_lead(lead_id, data.dict(exclude_unset=True))


@router.delete("/{lead_id}", response={200: dict, 404: dict})
def delete_lead(request, lead_id: int):
    """Delete a lead together with its scheduled activities"""
    lead = LeadsService().delete_lead(lead_id)
    return {"success": True, "id": lead.id}


@router.post("/{lead_id}/convert", response={200: ConversionResponseSchema, 404: dict})
def convert_lead(request, lead_id: int):
    """
    Convert a lead into a customer.

    Converting an already converted lead returns the existing customer.
    """
    return LeadsService().convert_lead_by_id(lead_id)


@router.put("/{lead_id}/convert-with-id", response={200: ConversionResponseSchema, 400: dict, 404: dict})
def convert_lead_with_id(request, lead_id: int, data: ConvertWithDetailsSchema):
    """Store the ID number and contact details collected at sale time, then convert"""
    return LeadsService().convert_lead_with_details(lead_id, data.dict(exclude_unset=True))


@router.get("/{lead_id}/activities", response={200: List[LeadActivityResponseSchema], 404: dict})
def list_lead_activities(request, lead_id: int):
    """Follow-up history of a lead, newest first"""
    return LeadsService().list_lead_activities(lead_id)


@router.post("/{lead_id}/activities", response={201: LeadActivityResponseSchema, 400: dict, 404: dict})
def add_lead_activity(request, lead_id: int, data: LeadActivityCreateSchema):
    activity = LeadsService().add_lead_activity(lead_id, data.dict(), user=request.auth)
    return 201, activity

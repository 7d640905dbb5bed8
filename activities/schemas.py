from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from ninja import Schema


class ActivityCreateSchema(Schema):
    """Schema for scheduling an activity"""
    type: Optional[str] = None
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    assigned_user_id: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    reminder_time: Optional[datetime] = None
    notes: Optional[str] = None


class ActivityUpdateSchema(Schema):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    assigned_user_id: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    reminder_time: Optional[datetime] = None
    notes: Optional[str] = None


class ActivityResponseSchema(Schema):
    """Schema for activity response"""
    id: int
    type: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    assigned_user_id: Optional[int] = None
    status: str
    priority: str
    reminder_time: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OpportunityCreateSchema(Schema):
    name: str
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    estimated_value: Optional[Decimal] = None
    probability: Optional[int] = None
    status: Optional[str] = None
    stage: Optional[str] = None
    brand: Optional[str] = None
    estimated_close_date: Optional[datetime] = None
    products_interested: Optional[List[int]] = None
    notes: Optional[str] = None


class OpportunityStatusSchema(Schema):
    status: str
    stage: Optional[str] = None


class OpportunityResponseSchema(Schema):
    id: int
    name: str
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    estimated_value: Decimal
    probability: Optional[int] = None
    status: str
    stage: str
    assigned_user_id: Optional[int] = None
    brand: str
    estimated_close_date: Optional[datetime] = None
    products_interested: List[int] = []
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InteractionCreateSchema(Schema):
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    type: Optional[str] = None
    channel: Optional[str] = None
    content: str
    attachments: Optional[List[str]] = None


class InteractionResolveSchema(Schema):
    resolution_notes: Optional[str] = None


class InteractionResponseSchema(Schema):
    id: int
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    type: str
    channel: str
    content: str
    attachments: List[str] = []
    assigned_user_id: Optional[int] = None
    is_resolved: bool
    resolution_notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

"""Schemas de Webhook"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime


class WebhookSubscriptionCreate(BaseModel):
    """Schema para criar subscription de webhook"""
    url: str
    match_id: Optional[int] = None
    events: List[str]


class WebhookSubscriptionResponse(BaseModel):
    """Schema de resposta de subscription"""
    id: int
    url: str
    match_id: Optional[int] = None
    events: List[str]
    active: bool
    failure_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WebhookPayload(BaseModel):
    """Schema do payload enviado no webhook"""
    event: str
    match_id: Optional[int] = None
    data: dict
    timestamp: str

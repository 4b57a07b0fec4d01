"""Endpoints de Webhooks"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from app.core.database import get_db
from app.core.exceptions import NotFoundException, ValidationException
from app.core.security import Principal, get_current_principal, require_staff
from app.schemas.webhook import (
    WebhookSubscriptionCreate,
    WebhookSubscriptionResponse
)
from app.webhooks.manager import generate_secret
from app.models.webhook_subscription import MATCH_EVENTS, WebhookSubscription
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_subscription(db: AsyncSession, webhook_id: int) -> WebhookSubscription:
    result = await db.execute(
        select(WebhookSubscription).filter(
            WebhookSubscription.id == webhook_id
        )
    )
    webhook = result.scalar_one_or_none()
    if not webhook:
        raise NotFoundException("Webhook não encontrado")
    return webhook


@router.post("/", response_model=WebhookSubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_webhook(
    subscription: WebhookSubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Registra um novo webhook para eventos de partida"""
    invalid = [e for e in subscription.events if e not in MATCH_EVENTS]
    if not subscription.events or invalid:
        raise ValidationException(
            f"Eventos inválidos: {invalid}. Permitidos: {list(MATCH_EVENTS)}"
        )

    webhook = WebhookSubscription(
        url=subscription.url,
        match_id=subscription.match_id,
        events=list(subscription.events),
        secret=generate_secret(),
        active=True,
        failure_count=0,
    )
    db.add(webhook)
    await db.commit()
    logger.info(f"Webhook registrado: {webhook.id} -> {webhook.url}")
    return WebhookSubscriptionResponse.model_validate(webhook)


@router.get("/", response_model=List[WebhookSubscriptionResponse])
async def list_webhooks(
    match_id: Optional[int] = None,
    active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Lista todos os webhooks"""
    query = select(WebhookSubscription)

    if match_id:
        query = query.filter(WebhookSubscription.match_id == match_id)

    if active is not None:
        query = query.filter(WebhookSubscription.active == active)

    result = await db.execute(query.order_by(WebhookSubscription.id))
    webhooks = result.scalars().all()
    return [WebhookSubscriptionResponse.model_validate(w) for w in webhooks]


@router.get("/{webhook_id}", response_model=WebhookSubscriptionResponse)
async def get_webhook(
    webhook_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Obtém um webhook por ID"""
    return WebhookSubscriptionResponse.model_validate(await _get_subscription(db, webhook_id))


@router.delete("/{webhook_id}")
async def delete_webhook(
    webhook_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Desativa um webhook"""
    webhook = await _get_subscription(db, webhook_id)
    webhook.active = False
    await db.commit()
    return {"message": "Webhook desativado"}

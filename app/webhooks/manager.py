"""Gerenciador de Webhooks de eventos de partida"""
import requests
import json
import hmac
import hashlib
import secrets
import time
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from app.core.database import SessionLocal
from app.core.config import settings
from app.models.base import utc_now
from app.models.webhook_subscription import WebhookSubscription
from app.models.webhook_log import WebhookLog
import logging

logger = logging.getLogger(__name__)


def generate_secret() -> str:
    """Gera secret aleatório"""
    return secrets.token_urlsafe(32)


def generate_signature(payload: str, secret: str) -> str:
    """Gera assinatura HMAC-SHA256 para validação"""
    return hmac.new(
        secret.encode('utf-8'),
        payload.encode('utf-8'),
        hashlib.sha256
    ).hexdigest()


class WebhookManager:
    """Entrega eventos de partida aos assinantes (uso síncrono, em tasks Celery)"""

    def __init__(self, session_factory=SessionLocal, http: Optional[requests.Session] = None):
        self.session_factory = session_factory
        self.http = http or requests.Session()
        self.http.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'JuniorSquad-Webhook/1.0'
        })

    def subscribers(self, db: Session, event_type: str, match_id: Optional[int]) -> List[WebhookSubscription]:
        active = db.query(WebhookSubscription).filter(WebhookSubscription.active == True).all()  # noqa: E712
        return [s for s in active if s.listens_to(event_type, match_id)]

    def trigger_webhook(self, event_type: str, match_id: Optional[int], data: Dict) -> int:
        """Dispara o evento para todos os assinantes; retorna quantos foram chamados"""
        db = self.session_factory()
        try:
            subscriptions = self.subscribers(db, event_type, match_id)
            for subscription in subscriptions:
                self._deliver(db, subscription, event_type, match_id, data)
            return len(subscriptions)
        finally:
            db.close()

    def _deliver(
        self,
        db: Session,
        subscription: WebhookSubscription,
        event_type: str,
        match_id: Optional[int],
        data: Dict,
    ) -> None:
        payload = {
            "event": event_type,
            "match_id": match_id,
            "data": data,
            "timestamp": utc_now().isoformat()
        }
        payload_str = json.dumps(payload, default=str)
        headers = {
            'X-Webhook-Signature': generate_signature(
                payload_str,
                subscription.secret or settings.WEBHOOK_SECRET_KEY or ""
            ),
            'X-Webhook-Event': event_type,
            'X-Webhook-Timestamp': str(int(time.time()))
        }

        try:
            response = self.http.post(
                subscription.url,
                data=payload_str,
                headers=headers,
                timeout=settings.WEBHOOK_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Erro ao disparar webhook {subscription.id}: {e}")
            self._register_failure(subscription)
            db.commit()
            return

        db.add(WebhookLog(
            subscription_id=subscription.id,
            event_type=event_type,
            match_id=match_id,
            payload=json.loads(payload_str),
            response_code=response.status_code,
            response_body=response.text[:1000],
            triggered_at=utc_now()
        ))
        subscription.last_triggered_at = utc_now()

        if response.status_code >= 400:
            self._register_failure(subscription)
        else:
            subscription.failure_count = 0

        db.commit()
        logger.info(
            f"Webhook {subscription.id} disparado: "
            f"{event_type} -> {subscription.url} ({response.status_code})"
        )

    def _register_failure(self, subscription: WebhookSubscription) -> None:
        subscription.failure_count = (subscription.failure_count or 0) + 1
        if subscription.failure_count >= settings.WEBHOOK_MAX_FAILURES:
            subscription.active = False
            logger.warning(
                f"Webhook {subscription.id} desativado após {subscription.failure_count} falhas"
            )

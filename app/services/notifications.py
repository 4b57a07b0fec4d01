"""Notificações de eventos de partida (best-effort)"""
from typing import Optional, Protocol
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def emit(self, event: str, payload: dict) -> None:
        ...


class WebhookNotifier:
    """Enfileira o evento para entrega aos webhooks assinantes"""

    def emit(self, event: str, payload: dict) -> None:
        from app.tasks.notifications import broadcast_match_event_task
        broadcast_match_event_task.delay(event, payload)


def emit_safely(notifier: Optional[Notifier], event: str, payload: dict) -> None:
    """Falhas de notificação são apenas logadas"""
    if notifier is None:
        return
    try:
        notifier.emit(event, payload)
    except Exception as e:
        logger.warning(f"Falha ao emitir evento '{event}': {e}")


def get_notifier() -> Optional[Notifier]:
    """Dependency: notificador configurado (None quando desativado)"""
    if not settings.NOTIFICATIONS_ENABLED:
        return None
    return WebhookNotifier()

"""Task de entrega de eventos de partida aos webhooks"""
from app.tasks.celery_app import celery_app
from app.webhooks.manager import WebhookManager
import logging

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=10)
def broadcast_match_event_task(self, event_type: str, payload: dict):
    """Entrega o evento a todos os assinantes ativos"""
    try:
        delivered = WebhookManager().trigger_webhook(event_type, payload.get("match_id"), payload)
        logger.info(f"Evento {event_type} entregue a {delivered} webhooks")
        return {"status": "success", "event": event_type, "subscribers": delivered}
    except Exception as e:
        logger.error(f"Erro ao entregar evento {event_type}: {e}")
        raise self.retry(exc=e)

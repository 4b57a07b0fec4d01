"""Modelo WebhookSubscription"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON
from app.models.base import BaseModel

MATCH_EVENTS = (
    "substitution",
    "playtime_alert",
    "match_started",
    "match_completed",
)


class WebhookSubscription(BaseModel):
    """Assinatura de webhook para eventos de partida"""
    __tablename__ = "webhook_subscriptions"

    url = Column(Text, nullable=False)
    # None = todas as partidas
    match_id = Column(Integer, nullable=True, index=True)
    events = Column(JSON, nullable=False)  # lista de eventos
    secret = Column(String(255), nullable=True)
    active = Column(Boolean, default=True, nullable=False, index=True)
    last_triggered_at = Column(DateTime(timezone=True), nullable=True)
    failure_count = Column(Integer, default=0, nullable=False)

    def listens_to(self, event_type: str, match_id: int) -> bool:
        if event_type not in (self.events or []):
            return False
        return self.match_id is None or self.match_id == match_id

    def __repr__(self):
        return f"<WebhookSubscription(id={self.id}, url='{self.url[:50]}...', active={self.active})>"

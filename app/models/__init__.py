"""Models - modelos SQLAlchemy"""
from app.models.player import Player
from app.models.match import Match
from app.models.substitution import Substitution
from app.models.player_performance import PlayerPerformance
from app.models.statistics import Statistics
from app.models.webhook_subscription import WebhookSubscription
from app.models.webhook_log import WebhookLog

__all__ = [
    "Player",
    "Match",
    "Substitution",
    "PlayerPerformance",
    "Statistics",
    "WebhookSubscription",
    "WebhookLog",
]

"""Testes de registro e entrega de webhooks"""
import json

import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.models.webhook_log import WebhookLog
from app.models.webhook_subscription import WebhookSubscription
from app.webhooks.manager import WebhookManager, generate_signature
from tests.conftest import API


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code
        self.text = "ok" if status_code < 400 else "erro"


class FakeHttp:
    """Substitui requests.Session registrando as chamadas"""

    def __init__(self, status_code=200, error=None):
        self.headers = {}
        self.calls = []
        self.status_code = status_code
        self.error = error

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers})
        if self.error:
            raise self.error
        return FakeResponse(self.status_code)


def sync_sessions(database_path):
    return sessionmaker(bind=create_engine(f"sqlite:///{database_path}"))


class TestWebhookEndpoints:
    def test_register_and_list(self, client, coach):
        response = client.post(
            f"{API}/webhooks/",
            json={"url": "https://example.com/hook", "events": ["substitution", "match_completed"]},
            headers=coach,
        )
        assert response.status_code == 201
        assert response.json()["active"] is True

        listed = client.get(f"{API}/webhooks/", headers=coach).json()
        assert [w["url"] for w in listed] == ["https://example.com/hook"]

    def test_unknown_event_rejected(self, client, coach):
        response = client.post(
            f"{API}/webhooks/",
            json={"url": "https://example.com/hook", "events": ["goal_scored"]},
            headers=coach,
        )
        assert response.status_code == 400

    def test_delete_deactivates(self, client, coach):
        webhook = client.post(
            f"{API}/webhooks/",
            json={"url": "https://example.com/hook", "events": ["substitution"]},
            headers=coach,
        ).json()
        assert client.delete(f"{API}/webhooks/{webhook['id']}", headers=coach).status_code == 200
        assert client.get(f"{API}/webhooks/{webhook['id']}", headers=coach).json()["active"] is False

    def test_get_missing(self, client, coach):
        assert client.get(f"{API}/webhooks/999", headers=coach).status_code == 404


class TestWebhookManager:
    def _subscribe(self, factory, **values):
        db = factory()
        subscription = WebhookSubscription(
            url="https://example.com/hook",
            events=values.pop("events", ["substitution"]),
            secret="segredo",
            active=True,
            failure_count=values.pop("failure_count", 0),
            **values,
        )
        db.add(subscription)
        db.commit()
        subscription_id = subscription.id
        db.close()
        return subscription_id

    def test_delivers_signed_payload(self, database_path):
        factory = sync_sessions(database_path)
        self._subscribe(factory)
        http = FakeHttp()

        delivered = WebhookManager(factory, http).trigger_webhook("substitution", 7, {"player_in": 3})

        assert delivered == 1
        call = http.calls[0]
        assert json.loads(call["data"])["match_id"] == 7
        assert call["headers"]["X-Webhook-Signature"] == generate_signature(call["data"], "segredo")

        db = factory()
        log = db.query(WebhookLog).one()
        assert log.response_code == 200
        assert log.event_type == "substitution"
        db.close()

    def test_filters_by_event_and_match(self, database_path):
        factory = sync_sessions(database_path)
        self._subscribe(factory, match_id=1)
        http = FakeHttp()
        manager = WebhookManager(factory, http)

        assert manager.trigger_webhook("substitution", 2, {}) == 0
        assert manager.trigger_webhook("match_started", 1, {}) == 0
        assert http.calls == []

    def test_disabled_after_repeated_failures(self, database_path):
        factory = sync_sessions(database_path)
        subscription_id = self._subscribe(factory, failure_count=settings.WEBHOOK_MAX_FAILURES - 1)
        http = FakeHttp(error=requests.exceptions.ConnectionError("recusado"))

        WebhookManager(factory, http).trigger_webhook("substitution", 1, {})

        db = factory()
        subscription = db.get(WebhookSubscription, subscription_id)
        assert subscription.active is False
        assert subscription.failure_count == settings.WEBHOOK_MAX_FAILURES
        db.close()

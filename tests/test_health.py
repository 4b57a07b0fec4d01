"""Testes dos endpoints de saúde e monitoramento"""
from tests.conftest import API


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_lists_endpoints(client):
    data = client.get("/").json()
    assert "message" in data
    assert data["endpoints"]["players"] == f"{API}/players"


def test_request_id_header(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_monitoring_status_empty(client):
    data = client.get(f"{API}/monitoring/status").json()
    assert data["database"]["status"] == "empty"
    assert data["database"]["players"] == 0
    assert data["features"]["rate_limit"] is False


def test_monitoring_status_with_squad(client, squad):
    data = client.get(f"{API}/monitoring/status").json()
    assert data["database"]["players"] == 14
    assert data["database"]["status"] == "populated"


def test_integrity_check_requires_staff(client, assistant):
    assert client.get(f"{API}/data-integrity/check", headers=assistant).status_code == 403

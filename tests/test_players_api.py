"""Testes dos endpoints de jogadores"""
from datetime import date, timedelta

import pytest

from tests.conftest import API, create_player


class TestPlayerEndpoints:
    def test_requires_token(self, client):
        response = client.get(f"{API}/players/")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_invalid_token(self, client):
        response = client.get(f"{API}/players/", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_assistant_cannot_create(self, client, assistant):
        response = client.post(
            f"{API}/players/",
            json={"name": "Bia", "jersey_number": 7, "position": "Forward"},
            headers=assistant,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_create_defaults_preferred_positions(self, client, coach):
        player = create_player(client, coach, 7, "Forward")
        assert player["preferred_positions"] == ["Forward"]
        assert player["injury_status"] == "Healthy"
        assert player["availability"] is True

    def test_duplicate_jersey_is_conflict(self, client, coach):
        create_player(client, coach, 7)
        response = client.post(
            f"{API}/players/",
            json={"name": "Outro", "jersey_number": 7, "position": "Defender"},
            headers=coach,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_future_birth_date_rejected(self, client, coach):
        response = client.post(
            f"{API}/players/",
            json={
                "name": "Futuro",
                "jersey_number": 8,
                "position": "Defender",
                "date_of_birth": (date.today() + timedelta(days=1)).isoformat(),
            },
            headers=coach,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_failure"

    def test_list_with_filters_and_pagination(self, client, coach, assistant, squad):
        response = client.get(
            f"{API}/players/", params={"position": "Defender", "limit": 2}, headers=assistant
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert data["count"] == 2
        assert data["pagination"]["next"] == {"page": 2, "limit": 2}
        assert data["pagination"]["prev"] is None
        assert [p["jersey_number"] for p in data["data"]] == [2, 3]

    def test_sort_descending(self, client, coach, squad):
        response = client.get(
            f"{API}/players/", params={"sort_by": "jersey_number", "sort_order": "desc"}, headers=coach
        )
        assert response.json()["data"][0]["jersey_number"] == 14

    def test_update_jersey_clash(self, client, coach):
        first = create_player(client, coach, 7)
        create_player(client, coach, 8)
        response = client.put(f"{API}/players/{first['id']}", json={"jersey_number": 8}, headers=coach)
        assert response.status_code == 409

    def test_get_missing_player(self, client, coach):
        response = client.get(f"{API}/players/999", headers=coach)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_major_injury_clears_availability(self, client, coach):
        player = create_player(client, coach, 7)
        response = client.put(
            f"{API}/players/{player['id']}/injury",
            json={"injury_status": "Major Injury", "injury_notes": "Joelho"},
            headers=coach,
        )
        assert response.status_code == 200
        assert response.json()["availability"] is False
        assert response.json()["injury_notes"] == "Joelho"

        available = client.get(f"{API}/players/available", headers=coach).json()
        assert player["id"] not in [p["id"] for p in available]

    def test_players_by_position_includes_preferred(self, client, coach, squad):
        response = client.get(f"{API}/players/position/Forward", headers=coach)
        assert response.status_code == 200
        assert sorted(p["jersey_number"] for p in response.json()) == [9, 10, 11, 14]

    def test_players_by_unknown_position(self, client, coach):
        response = client.get(f"{API}/players/position/Libero", headers=coach)
        assert response.status_code == 400

    def test_delete(self, client, coach):
        player = create_player(client, coach, 7)
        assert client.delete(f"{API}/players/{player['id']}", headers=coach).status_code == 200
        assert client.get(f"{API}/players/{player['id']}", headers=coach).status_code == 404

    @pytest.mark.parametrize("field", ["name", "jersey_number", "position", "availability", "injury_status"])
    def test_update_rejects_null_for_required_fields(self, client, coach, field):
        player = create_player(client, coach, 7)
        response = client.put(f"{API}/players/{player['id']}", json={field: None}, headers=coach)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_failure"
        assert client.get(f"{API}/players/{player['id']}", headers=coach).json()["name"] == "Jogador 7"

    def test_update_accepts_null_optional_field(self, client, coach):
        player = create_player(client, coach, 7, date_of_birth="2012-05-01")
        response = client.put(f"{API}/players/{player['id']}", json={"date_of_birth": None}, headers=coach)
        assert response.status_code == 200
        assert response.json()["date_of_birth"] is None

    def test_too_old_for_junior_squad(self, client, coach):
        today = date.today()
        response = client.post(
            f"{API}/players/",
            json={
                "name": "Veterano",
                "jersey_number": 30,
                "position": "Defender",
                "date_of_birth": date(today.year - 22, 1, 1).isoformat(),
            },
            headers=coach,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_failure"

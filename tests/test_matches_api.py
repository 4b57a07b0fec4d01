"""Testes do ciclo de vida de partidas ao vivo"""
from datetime import datetime, timedelta, timezone

from app.services.statistics_service import StatisticsService
from tests.conftest import API


def parse_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def start_match(client, headers, team_sheet, match_type="match"):
    response = client.post(
        f"{API}/matches/start",
        json={
            "date": datetime.now(timezone.utc).isoformat(),
            "type": match_type,
            "team_sheet": team_sheet,
            "opponent": "Tigres Sub-15",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def schedule_match(client, headers, team_sheet=None, days_ahead=7):
    response = client.post(
        f"{API}/schedules/",
        json={
            "date": (datetime.now(timezone.utc) + timedelta(days=days_ahead)).isoformat(),
            "type": "match",
            "team_sheet": team_sheet or [],
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestStartMatch:
    def test_start_new_initializes_ledger(self, client, coach, squad, notifier):
        ids = [p["id"] for p in squad[:11]]
        match = start_match(client, coach, ids)

        assert match["status"] == "ongoing"
        assert match["team_sheet"] == ids
        assert match["playtime"] == {str(pid): 0 for pid in ids}
        assert match["started_at"] is not None
        assert notifier.names() == ["match_started"]

    def test_start_new_with_unavailable_player(self, client, coach, squad):
        injured = squad[0]["id"]
        client.put(
            f"{API}/players/{injured}/injury", json={"injury_status": "Major Injury"}, headers=coach
        )
        response = client.post(
            f"{API}/matches/start",
            json={
                "date": datetime.now(timezone.utc).isoformat(),
                "type": "training",
                "team_sheet": [injured, squad[1]["id"], 9999],
            },
            headers=coach,
        )
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert str(injured) in detail
        assert "9999" in detail

    def test_start_existing_scheduled_match(self, client, coach, squad):
        scheduled = schedule_match(client, coach)
        ids = [p["id"] for p in squad[:11]]

        response = client.put(
            f"{API}/matches/{scheduled['id']}/start", json={"team_sheet": ids}, headers=coach
        )

        assert response.status_code == 200
        assert response.json()["status"] == "ongoing"
        assert response.json()["playtime"] == {str(pid): 0 for pid in ids}

    def test_cannot_start_twice(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]])
        response = client.put(f"{API}/matches/{match['id']}/start", headers=coach)
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"


class TestSubstitution:
    def test_substitution_updates_sheet_and_ledger(self, client, coach, squad, notifier):
        ids = [p["id"] for p in squad[:11]]
        p3, p6 = ids[2], squad[11]["id"]
        match = start_match(client, coach, ids)
        at = parse_time(match["started_at"]) + timedelta(minutes=30)

        response = client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={"player_in": p6, "player_out": p3, "time": at.isoformat()},
            headers=coach,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["team_sheet"][2] == p6
        assert p3 not in data["team_sheet"]
        assert data["playtime"][str(p3)] == 30
        assert data["playtime"][str(p6)] == 0
        assert data["substitutions"][-1]["reason"] == "Tactical substitution"
        assert "substitution" in notifier.names()
        # diferença de 30 minutos passa do limite de 20
        assert "playtime_alert" in notifier.names()

    def test_substitution_requires_ongoing_match(self, client, coach, squad):
        scheduled = schedule_match(client, coach, [squad[0]["id"]])
        response = client.post(
            f"{API}/matches/{scheduled['id']}/substitute",
            json={"player_in": squad[1]["id"], "player_out": squad[0]["id"]},
            headers=coach,
        )
        assert response.status_code == 409

    def test_player_out_not_on_field(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"], squad[1]["id"]])
        response = client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={"player_in": squad[2]["id"], "player_out": squad[3]["id"]},
            headers=coach,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_failure"

    def test_player_in_already_on_field(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"], squad[1]["id"]])
        response = client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={"player_in": squad[1]["id"], "player_out": squad[0]["id"]},
            headers=coach,
        )
        assert response.status_code == 400

    def test_unknown_player(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]])
        response = client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={"player_in": 9999, "player_out": squad[0]["id"]},
            headers=coach,
        )
        assert response.status_code == 404

    def test_injury_substitution_updates_player(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"], squad[1]["id"]])
        client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={
                "player_in": squad[2]["id"],
                "player_out": squad[1]["id"],
                "reason": "Ankle injury",
                "injury_status": "Minor Injury",
            },
            headers=coach,
        )
        player = client.get(f"{API}/players/{squad[1]['id']}", headers=coach).json()
        assert player["injury_status"] == "Minor Injury"
        assert player["injury_notes"]

    def test_invalid_injury_status_does_not_block_substitution(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"], squad[1]["id"]])
        response = client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={
                "player_in": squad[2]["id"],
                "player_out": squad[1]["id"],
                "reason": "injury",
                "injury_status": "Broken",
            },
            headers=coach,
        )
        assert response.status_code == 200
        player = client.get(f"{API}/players/{squad[1]['id']}", headers=coach).json()
        assert player["injury_status"] == "Healthy"


class TestPlaytimeReport:
    def test_report_does_not_change_stored_ledger(self, client, coach, squad):
        ids = [p["id"] for p in squad[:3]]
        match = start_match(client, coach, ids)

        report = client.get(f"{API}/matches/{match['id']}/playtime", headers=coach)
        assert report.status_code == 200
        data = report.json()
        assert data["total_players_used"] == 3
        assert all(row["is_currently_playing"] for row in data["playtime_stats"])
        assert data["fair_play"]["is_fair"] is True

        stored = client.get(f"{API}/matches/{match['id']}", headers=coach).json()
        assert stored["playtime"] == {str(pid): 0 for pid in ids}


class TestEndMatch:
    def test_end_match_recomputes_score_and_materializes(self, client, coach, squad, notifier):
        ids = [p["id"] for p in squad[:11]]
        p3, p6 = ids[2], squad[11]["id"]
        match = start_match(client, coach, ids)
        at = parse_time(match["started_at"]) + timedelta(minutes=30)
        client.post(
            f"{API}/matches/{match['id']}/substitute",
            json={"player_in": p6, "player_out": p3, "time": at.isoformat()},
            headers=coach,
        )

        response = client.put(
            f"{API}/matches/{match['id']}/end",
            json={
                "match_result": {"result": "win", "our_score": 10, "opponent_score": 1},
                "player_performances": [
                    {"player_id": ids[0], "goals": 2, "rating": 8},
                    {"player_id": p3, "goals": 1, "assists": 1},
                ],
            },
            headers=coach,
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["status"] == "completed"
        assert data["match_result"] == {"result": "win", "our_score": 3, "opponent_score": 1}
        performances = {p["player_id"]: p for p in data["player_performances"]}
        assert performances[p3]["minutes_played"] == 30
        assert "match_completed" in notifier.names()

        report = client.get(f"{API}/stats/match/{match['id']}", headers=coach).json()
        # 11 em campo no fim + o jogador substituído
        assert report["match_summary"]["players_used"] == 12
        assert report["match_summary"]["total_goals"] == 3
        assert report["match_summary"]["total_substitutions"] == 1

        stats = {s["player_id"]: s for s in report["player_stats"]}
        assert stats[p3]["substitutions_count"] == 1
        assert stats[p6]["substitutions_count"] == 1
        assert stats[ids[0]]["positions_played"] == [squad[0]["position"]]

    def test_rematerialization_is_idempotent(self, client, coach, squad):
        ids = [p["id"] for p in squad[:11]]
        match = start_match(client, coach, ids, match_type="training")
        client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)

        first = client.post(f"{API}/matches/{match['id']}/statistics/materialize", headers=coach)
        second = client.post(f"{API}/matches/{match['id']}/statistics/materialize", headers=coach)

        assert first.status_code == 200
        assert first.json()["records"] == second.json()["records"] == 11
        status = client.get(f"{API}/monitoring/status").json()
        assert status["database"]["statistics"] == 11

    def test_materialize_requires_completed_match(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]])
        response = client.post(f"{API}/matches/{match['id']}/statistics/materialize", headers=coach)
        assert response.status_code == 409

    def test_match_requires_result(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]])
        response = client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)
        assert response.status_code == 400

        response = client.put(
            f"{API}/matches/{match['id']}/end",
            json={"match_result": {"result": "victory"}},
            headers=coach,
        )
        assert response.status_code == 400
        assert client.get(f"{API}/matches/{match['id']}", headers=coach).json()["status"] == "ongoing"

    def test_training_ends_without_result(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]], match_type="training")
        response = client.put(
            f"{API}/matches/{match['id']}/end",
            json={"player_performances": [{"player_id": squad[0]["id"], "assists": 2}]},
            headers=coach,
        )
        assert response.status_code == 200
        assert response.json()["match_result"] is None
        assert response.json()["player_performances"][0]["assists"] == 2

    def test_cannot_end_completed_match(self, client, coach, squad):
        match = start_match(client, coach, [squad[0]["id"]], match_type="training")
        client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)
        response = client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)
        assert response.status_code == 409

    def test_integrity_check_after_match(self, client, coach, squad):
        ids = [p["id"] for p in squad[:11]]
        match = start_match(client, coach, ids)
        client.put(
            f"{API}/matches/{match['id']}/end",
            json={
                "match_result": {"result": "draw", "opponent_score": 0},
                "player_performances": [],
            },
            headers=coach,
        )
        report = client.get(f"{API}/data-integrity/check", headers=coach).json()
        assert report["status"] == "ok", report["issues"]


def test_list_matches_newest_first(client, coach, squad):
    first = start_match(client, coach, [squad[0]["id"]])
    second = schedule_match(client, coach)
    response = client.get(f"{API}/matches/", headers=coach)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [m["id"] for m in data["data"]] == [second["id"], first["id"]]


def test_materialization_failure_keeps_match_completed(client, coach, squad, monkeypatch):
    async def failing_materialize(self, match):
        raise RuntimeError("banco indisponível")

    monkeypatch.setattr(StatisticsService, "materialize", failing_materialize)
    match = start_match(client, coach, [squad[0]["id"]], match_type="training")

    response = client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)

    assert response.status_code == 500
    assert response.json()["error"] == "materialization_failed"
    assert f"/matches/{match['id']}/statistics/materialize" in response.json()["detail"]
    stored = client.get(f"{API}/matches/{match['id']}", headers=coach).json()
    assert stored["status"] == "completed"

    monkeypatch.undo()
    repaired = client.post(f"{API}/matches/{match['id']}/statistics/materialize", headers=coach)
    assert repaired.json()["records"] == 1

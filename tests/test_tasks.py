"""Testes das rotinas síncronas usadas pelas tasks Celery"""
from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.models.match import Match
from app.models.statistics import Statistics
from app.tasks.statistics import (
    find_matches_missing_statistics,
    materialize_match,
    playtime_alerts_due,
)
from tests.conftest import API


def test_repair_recreates_missing_statistics(client, coach, squad, database_path):
    ids = [p["id"] for p in squad[:11]]
    match = client.post(
        f"{API}/matches/start",
        json={"date": datetime.now(timezone.utc).isoformat(), "type": "training", "team_sheet": ids},
        headers=coach,
    ).json()
    client.put(f"{API}/matches/{match['id']}/end", json={}, headers=coach)

    db = sessionmaker(bind=create_engine(f"sqlite:///{database_path}"))()
    try:
        assert find_matches_missing_statistics(db) == []

        db.query(Statistics).filter(Statistics.player_id == ids[0]).delete()
        db.commit()
        missing = find_matches_missing_statistics(db)
        assert [m.id for m in missing] == [match["id"]]

        assert materialize_match(db, db.get(Match, match["id"])) == 11
        assert find_matches_missing_statistics(db) == []
        assert db.query(Statistics).count() == 11
    finally:
        db.close()


def test_zeroed_statistics_defaults():
    stats = Statistics.zeroed(4, match_id=9)
    assert (stats.player_id, stats.match_id) == (4, 9)
    assert stats.minutes_played == stats.goals == stats.substitutions_count == 0
    assert stats.positions_played == [] and stats.injuries == []
    assert stats.player_of_match is False


class TestPlaytimeAlerts:
    def _ongoing_match(self, db, started_at):
        match = Match(
            date=started_at,
            type="training",
            status="ongoing",
            started_at=started_at,
            team_sheet=[1, 2],
            playtime={"1": 0, "2": 0, "3": 0},
            substitutions=[],
            player_performances=[],
        )
        db.add(match)
        db.commit()
        return match.id

    def test_alert_is_not_repeated_until_gap_grows(self, database_path):
        db = sessionmaker(bind=create_engine(f"sqlite:///{database_path}"))()
        try:
            kickoff = datetime.now(timezone.utc) - timedelta(minutes=40)
            match_id = self._ongoing_match(db, kickoff)
            now = kickoff + timedelta(minutes=40)

            first = playtime_alerts_due(db, now, 20)
            assert [(m.id, alert["difference"]) for m, alert in first] == [(match_id, 40)]

            # mesma diferença (e pouco maior) não gera novo alerta
            assert playtime_alerts_due(db, now, 20) == []
            assert playtime_alerts_due(db, now + timedelta(minutes=10), 20) == []

            again = playtime_alerts_due(db, now + timedelta(minutes=20), 20)
            assert [alert["difference"] for _, alert in again] == [60]
        finally:
            db.close()

    def test_alert_resets_when_spread_is_fair(self, database_path):
        db = sessionmaker(bind=create_engine(f"sqlite:///{database_path}"))()
        try:
            kickoff = datetime.now(timezone.utc) - timedelta(minutes=40)
            match_id = self._ongoing_match(db, kickoff)
            playtime_alerts_due(db, kickoff + timedelta(minutes=40), 20)

            match = db.get(Match, match_id)
            match.playtime = {"1": 0, "2": 0, "3": 40}
            db.commit()
            assert playtime_alerts_due(db, kickoff + timedelta(minutes=40), 20) == []
            assert db.get(Match, match_id).last_alert_difference is None
        finally:
            db.close()

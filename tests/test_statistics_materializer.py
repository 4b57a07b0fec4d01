"""Testes da montagem de linhas de estatísticas"""
from types import SimpleNamespace

from app.services.statistics_materializer import build_statistics_rows, participants


def performance(player_id, **values):
    base = dict(
        player_id=player_id,
        goals=0,
        assists=0,
        yellow_cards=0,
        red_cards=0,
        rating=None,
        player_of_match=False,
        minutes_played=0,
    )
    base.update(values)
    return SimpleNamespace(**base)


def make_match():
    return SimpleNamespace(
        team_sheet=[1, 2, 6],
        playtime={"1": 90, "2": 90, "3": 30, "6": 60},
        substitutions=[SimpleNamespace(player_in=6, player_out=3)],
        player_performances=[performance(1, goals=2, rating=8.5, minutes_played=90)],
    )


PLAYERS = {
    1: SimpleNamespace(position="Forward"),
    2: SimpleNamespace(position="Defender"),
    3: SimpleNamespace(position="Midfielder"),
    6: SimpleNamespace(position="Midfielder"),
}


def test_participants_include_substituted_players():
    assert participants(make_match()) == [1, 2, 6, 3]


def test_rows_cover_every_participant_once():
    rows = dict(build_statistics_rows(make_match(), PLAYERS))
    assert sorted(rows) == [1, 2, 3, 6]


def test_performance_fields_are_copied():
    rows = dict(build_statistics_rows(make_match(), PLAYERS))
    assert rows[1]["goals"] == 2
    assert rows[1]["rating"] == 8.5
    assert rows[1]["minutes_played"] == 90
    assert rows[1]["positions_played"] == ["Forward"]


def test_participants_without_performance_get_ledger_minutes():
    rows = dict(build_statistics_rows(make_match(), PLAYERS))
    assert rows[3] == {"minutes_played": 30, "positions_played": ["Midfielder"], "substitutions_count": 1}
    assert rows[2]["substitutions_count"] == 0


def test_removed_player_has_no_position():
    rows = dict(build_statistics_rows(make_match(), {}))
    assert rows[2]["positions_played"] == []

"""Testes do gerador automático de escalação"""
from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationException
from app.models.player import Player
from app.services.team_generator import (
    aggregate_recent_minutes,
    generate_team,
    parse_formation,
    selection_score,
)


def make_player(player_id, position, preferred=None):
    return Player(
        id=player_id,
        name=f"Jogador {player_id}",
        jersey_number=player_id,
        position=position,
        preferred_positions=preferred or [position],
        injury_status="Healthy",
        availability=True,
    )


def squad():
    positions = (
        ["Goalkeeper"] * 2
        + ["Defender"] * 5
        + ["Midfielder"] * 5
        + ["Forward"] * 3
    )
    return [make_player(i + 1, position) for i, position in enumerate(positions)]


class TestFormation:
    def test_parse(self):
        formation = parse_formation("4-3-3")
        assert formation.requirements == {
            "Goalkeeper": 1,
            "Defender": 4,
            "Midfielder": 3,
            "Forward": 3,
        }
        assert str(formation) == "4-3-3"

    @pytest.mark.parametrize("value", ["4-4", "a-b-c", "", "4-4-2-1"])
    def test_malformed(self, value):
        with pytest.raises(ValidationException):
            parse_formation(value)


class TestGenerateTeam:
    def test_four_four_two_has_one_goalkeeper(self):
        team = generate_team(squad(), {}, parse_formation("4-4-2"))

        positions = [p.position for p in team]
        assert len(team) == 11
        assert positions.count("Goalkeeper") == 1
        assert positions.count("Defender") == 4
        assert positions.count("Midfielder") == 4
        assert positions.count("Forward") == 2
        assert len({p.id for p in team}) == 11

    def test_not_enough_players(self):
        with pytest.raises(ValidationException):
            generate_team(squad()[:10], {}, parse_formation("4-4-2"))

    def test_unselectable_players_are_ignored(self):
        players = squad()[:12]
        players[0].injury_status = "Major Injury"
        players[1].availability = False
        players[2].injury_status = "Recovering"

        with pytest.raises(ValidationException):
            generate_team(players, {}, parse_formation("4-4-2"))

    def test_minor_injury_is_still_selectable(self):
        players = squad()[:11]
        players[5].injury_status = "Minor Injury"
        assert len(generate_team(players, {}, parse_formation("4-4-2"))) == 11

    def test_rested_players_are_preferred(self):
        players = squad()
        # goleiro 1 jogou muito nas últimas semanas
        team = generate_team(players, {1: 300}, parse_formation("4-4-2"), prioritize_rest=True)
        assert [p.id for p in team if p.position == "Goalkeeper"] == [2]

    def test_fill_phase_when_positions_are_short(self):
        players = [make_player(1, "Goalkeeper")] + [make_player(i, "Defender") for i in range(2, 13)]
        team = generate_team(players, {}, parse_formation("4-4-2"))
        assert len(team) == 11
        assert sum(1 for p in team if p.position == "Goalkeeper") == 1

    def test_out_of_position_penalty(self):
        versatile = make_player(20, "Defender", ["Defender", "Midfielder"])
        natural = make_player(21, "Midfielder")
        assert selection_score(versatile, "Midfielder", {20: 0, 21: 5}, False) == 10
        assert selection_score(natural, "Midfielder", {20: 0, 21: 5}, False) == 5
        assert selection_score(versatile, "Midfielder", {20: 0}, True) == 0


def test_aggregate_recent_minutes_only_counts_eligible_players():
    matches = [
        SimpleNamespace(playtime={"1": 60, "2": 30, "99": 90}),
        SimpleNamespace(playtime={"1": 20}),
    ]
    assert aggregate_recent_minutes(matches, [1, 2, 3]) == {1: 80, 2: 30, 3: 0}

"""
Montagem dos relatórios de estatísticas (jogador, partida e time).

Funções puras sobre registros Statistics/Match já carregados; o
StatisticsService cuida das consultas e do cache.
"""
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional, Sequence, Tuple
import re

from app.core.exceptions import ValidationException
from app.services.playtime_ledger import PlaytimeLedger, fairness_percentage

SEASON_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")
FULL_MATCH_MINUTES = 90
RECENT_FORM_MATCHES = 5
RECENT_MATCHES = 10


def season_bounds(season: str) -> Tuple[datetime, datetime]:
    """Temporada "2023-2024": de 1º de setembro a 31 de agosto (inclusive)"""
    found = SEASON_PATTERN.match(season or "")
    if not found or int(found.group(2)) != int(found.group(1)) + 1:
        raise ValidationException(f"Temporada inválida: '{season}'. Use o formato 2023-2024")
    start_year, end_year = int(found.group(1)), int(found.group(2))
    return (
        datetime(start_year, 9, 1, tzinfo=timezone.utc),
        datetime.combine(date(end_year, 8, 31), time.max).replace(tzinfo=timezone.utc),
    )


def current_season(today: datetime) -> str:
    start_year = today.year if today.month >= 9 else today.year - 1
    return f"{start_year}-{start_year + 1}"


def _average(total: float, count: int, digits: int = 2) -> float:
    return round(total / count, digits) if count else 0


def average_rating(stats: Sequence) -> float:
    """Média apenas entre os registros com nota"""
    ratings = [s.rating for s in stats if s.rating]
    return _average(sum(ratings), len(ratings))


def recent_form(stats: Sequence) -> int:
    """Pontuação de forma: nota x10, gols x15, assistências x10, cartões e craque do jogo"""
    if not stats:
        return 0
    score = 0
    for stat in stats:
        score += (stat.rating or 5) * 10
        score += stat.goals * 15
        score += stat.assists * 10
        score -= stat.yellow_cards * 5
        score -= stat.red_cards * 20
        if stat.player_of_match:
            score += 25
    return round(score / len(stats))


def statistics_entry(stat) -> dict:
    match = stat.match
    return {
        "match_id": stat.match_id,
        "date": match.date.isoformat() if match is not None and match.date else None,
        "type": match.type if match is not None else None,
        "opponent": match.opponent if match is not None else None,
        "minutes_played": stat.minutes_played,
        "positions_played": list(stat.positions_played or []),
        "goals": stat.goals,
        "assists": stat.assists,
        "yellow_cards": stat.yellow_cards,
        "red_cards": stat.red_cards,
        "rating": stat.rating,
        "player_of_match": stat.player_of_match,
        "substitutions_count": stat.substitutions_count,
        "injuries": list(stat.injuries or []),
    }


def player_report(player, stats: Sequence, period: str) -> dict:
    """stats em ordem cronológica"""
    total_matches = len(stats)
    total_minutes = sum(s.minutes_played for s in stats)
    total_goals = sum(s.goals for s in stats)
    total_assists = sum(s.assists for s in stats)
    yellow_cards = sum(s.yellow_cards for s in stats)
    red_cards = sum(s.red_cards for s in stats)

    positions = []
    for stat in stats:
        for position in stat.positions_played or []:
            if position not in positions:
                positions.append(position)

    average_minutes = _average(total_minutes, total_matches)
    aggregate = {
        "total_matches": total_matches,
        "total_minutes": total_minutes,
        "total_goals": total_goals,
        "total_assists": total_assists,
        "total_substitutions": sum(s.substitutions_count for s in stats),
        "total_yellow_cards": yellow_cards,
        "total_red_cards": red_cards,
        "player_of_match_count": sum(1 for s in stats if s.player_of_match),
        "total_injuries": sum(len(s.injuries or []) for s in stats),
        "average_rating": average_rating(stats),
        "positions_played": positions,
        "average_minutes_per_match": average_minutes,
    }
    metrics = {
        "goals_per_match": _average(total_goals, total_matches),
        "assists_per_match": _average(total_assists, total_matches),
        "minutes_per_goal": _average(total_minutes, total_goals),
        "disciplinary_points": yellow_cards + red_cards * 3,
        "versatility": len(positions),
        "consistency": _average(average_minutes * 100, FULL_MATCH_MINUTES),
        "form": recent_form(stats[-RECENT_FORM_MATCHES:]),
    }
    breakdown = {
        "matches": sum(1 for s in stats if s.match is not None and s.match.type == "match"),
        "training": sum(1 for s in stats if s.match is not None and s.match.type == "training"),
    }
    return {
        "player": {
            "id": player.id,
            "name": player.name,
            "jersey_number": player.jersey_number,
            "position": player.position,
            "preferred_positions": list(player.preferred_positions or []),
        },
        "aggregate_stats": aggregate,
        "performance_metrics": metrics,
        "match_breakdown": breakdown,
        "recent_matches": [statistics_entry(s) for s in reversed(stats[-RECENT_MATCHES:])],
        "period": period,
    }


def _top(stats: Sequence, key) -> Optional[dict]:
    """Primeiro registro com o maior valor positivo"""
    best = None
    for stat in stats:
        if key(stat) > (key(best) if best is not None else 0):
            best = stat
    if best is None:
        return None
    return {"player_id": best.player_id, "value": key(best)}


def playtime_analysis(playtime: Optional[Dict]) -> dict:
    ledger = PlaytimeLedger(playtime)
    minutes = list(ledger.as_dict().values())
    return {
        "total_minutes_played": ledger.total(),
        "average_playtime": _average(ledger.total(), len(minutes)),
        "max_playtime": max(minutes) if minutes else 0,
        "min_playtime": min(minutes) if minutes else 0,
        "playtime_fairness": fairness_percentage(minutes),
    }


def match_report(match, stats: Sequence) -> dict:
    player_of_match = next((s.player_id for s in stats if s.player_of_match), None)
    summary = {
        "total_goals": sum(s.goals for s in stats),
        "total_assists": sum(s.assists for s in stats),
        "total_yellow_cards": sum(s.yellow_cards for s in stats),
        "total_red_cards": sum(s.red_cards for s in stats),
        "total_substitutions": len(match.substitutions),
        "players_used": len(stats),
        "average_rating": average_rating(stats),
        "player_of_match": player_of_match,
        "injuries_reported": sum(len(s.injuries or []) for s in stats),
    }

    most_minutes = None
    for key, minutes in PlaytimeLedger(match.playtime).as_dict().items():
        if minutes > (most_minutes["minutes"] if most_minutes else 0):
            most_minutes = {"player_id": int(key), "minutes": minutes}

    top_performers = {
        "top_scorer": _top(stats, lambda s: s.goals),
        "top_assister": _top(stats, lambda s: s.assists),
        "highest_rated": _top(stats, lambda s: s.rating or 0),
        "most_minutes": most_minutes,
    }

    position_stats: Dict[str, dict] = {}
    for stat in stats:
        for position in stat.positions_played or []:
            entry = position_stats.setdefault(position, {
                "players_used": 0,
                "total_minutes": 0,
                "total_goals": 0,
                "total_assists": 0,
                "average_rating": 0,
            })
            entry["players_used"] += 1
            entry["total_minutes"] += stat.minutes_played
            entry["total_goals"] += stat.goals
            entry["total_assists"] += stat.assists
            entry["average_rating"] += stat.rating or 0
    for entry in position_stats.values():
        entry["average_rating"] = _average(entry["average_rating"], entry["players_used"])

    return {
        "match": {
            "id": match.id,
            "date": match.date.isoformat() if match.date else None,
            "type": match.type,
            "opponent": match.opponent,
            "venue": match.venue,
            "status": match.status,
            "duration": match.duration,
        },
        "match_summary": summary,
        "playtime_analysis": playtime_analysis(match.playtime),
        "top_performers": top_performers,
        "position_stats": position_stats,
        "player_stats": [statistics_entry(s) | {"player_id": s.player_id} for s in stats],
        "substitutions": [
            {
                "player_in": sub.player_in,
                "player_out": sub.player_out,
                "time": sub.time.isoformat(),
                "reason": sub.reason,
            }
            for sub in match.substitutions
        ],
        "team_sheet": list(match.team_sheet or []),
    }


def team_report(matches: Sequence, stats: Sequence, players_by_id: Dict[int, object], period: str) -> dict:
    completed = [m for m in matches if m.status == "completed" and m.type == "match" and m.result]
    wins = sum(1 for m in completed if m.result == "win")
    draws = sum(1 for m in completed if m.result == "draw")
    losses = sum(1 for m in completed if m.result == "loss")
    goals_for = sum(m.our_score or 0 for m in completed)
    goals_against = sum(m.opponent_score or 0 for m in completed)

    participation: Dict[int, dict] = {}
    for stat in stats:
        player = players_by_id.get(stat.player_id)
        entry = participation.setdefault(stat.player_id, {
            "player_id": stat.player_id,
            "name": player.name if player is not None else None,
            "jersey_number": player.jersey_number if player is not None else None,
            "matches_played": 0,
            "total_minutes": 0,
            "goals": 0,
            "assists": 0,
            "average_rating": 0,
            "ratings_count": 0,
        })
        entry["matches_played"] += 1
        entry["total_minutes"] += stat.minutes_played
        entry["goals"] += stat.goals
        entry["assists"] += stat.assists
        if stat.rating:
            entry["average_rating"] += stat.rating
            entry["ratings_count"] += 1
    for entry in participation.values():
        entry["average_rating"] = _average(entry["average_rating"], entry["ratings_count"])

    rows: List[dict] = sorted(participation.values(), key=lambda e: e["matches_played"], reverse=True)

    def best(field):
        top = None
        for entry in participation.values():
            if entry[field] > (top[field] if top else 0):
                top = entry
        return top

    overview = {
        "total_matches": len(matches),
        "matches_won": wins,
        "matches_drawn": draws,
        "matches_lost": losses,
        "total_goals": sum(s.goals for s in stats),
        "total_assists": sum(s.assists for s in stats),
        "total_minutes_played": sum(s.minutes_played for s in stats),
        "total_players": len(participation),
        "average_players_per_match": _average(len(stats), len(matches)),
        "competitive_matches": len(completed),
        "training_matches": sum(1 for m in matches if m.type == "training"),
        "win_percentage": round(wins / len(completed) * 100) if completed else 0,
        "goal_difference": goals_for - goals_against,
        "average_goals_for": _average(goals_for, len(completed), 1),
        "average_goals_against": _average(goals_against, len(completed), 1),
    }
    return {
        "team_overview": overview,
        "player_participation": rows,
        "top_performers": {
            "top_scorer": best("goals"),
            "top_assister": best("assists"),
            "most_consistent": best("matches_played"),
            "highest_rated": best("average_rating"),
        },
        "period": period,
    }

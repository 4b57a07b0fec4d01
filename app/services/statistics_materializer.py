"""
Materialização de estatísticas a partir de uma partida completa.

build_statistics_rows() é puro e decide o que gravar; a gravação (upsert por
jogador+partida) é feita pelo StatisticsService (async) ou pela task Celery de
reparo (sync), de modo que rodar de novo nunca duplica registros.
"""
from collections import Counter
from typing import Dict, List, Tuple

from app.services.playtime_ledger import PlaytimeLedger

PERFORMANCE_FIELDS = (
    "goals",
    "assists",
    "yellow_cards",
    "red_cards",
    "rating",
    "player_of_match",
    "minutes_played",
)


def count_substitutions(substitutions) -> Counter:
    """Número de substituições (entrando ou saindo) por jogador"""
    counts = Counter()
    for sub in substitutions:
        counts[sub.player_in] += 1
        counts[sub.player_out] += 1
    return counts


def participants(match) -> List[int]:
    """Escalação final seguida de quem passou pelo ledger, sem repetição"""
    ordered = []
    for player_id in list(match.team_sheet or []) + PlaytimeLedger(match.playtime).player_ids():
        if player_id not in ordered:
            ordered.append(player_id)
    return ordered


def build_statistics_rows(match, players_by_id: Dict[int, object]) -> List[Tuple[int, dict]]:
    """
    Lista (player_id, valores) a gravar para a partida.

    Desempenhos registrados copiam todos os campos; participantes sem
    desempenho recebem apenas minutos, posição e substituições (os contadores
    ficam zerados na criação). A posição é a posição principal atual do
    jogador.
    """
    ledger = PlaytimeLedger(match.playtime)
    sub_counts = count_substitutions(match.substitutions)

    def positions_for(player_id):
        player = players_by_id.get(player_id)
        return [player.position] if player is not None else []

    rows = []
    covered = set()
    for performance in match.player_performances:
        values = {field: getattr(performance, field) for field in PERFORMANCE_FIELDS}
        values["positions_played"] = positions_for(performance.player_id)
        values["substitutions_count"] = sub_counts.get(performance.player_id, 0)
        rows.append((performance.player_id, values))
        covered.add(performance.player_id)

    for player_id in participants(match):
        if player_id in covered:
            continue
        rows.append((player_id, {
            "minutes_played": ledger.get(player_id),
            "positions_played": positions_for(player_id),
            "substitutions_count": sub_counts.get(player_id, 0),
        }))
        covered.add(player_id)

    return rows

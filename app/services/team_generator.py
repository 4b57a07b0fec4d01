"""Geração automática de escalação por formação e rodízio de minutos"""
from dataclasses import dataclass
from typing import Dict, List, Sequence
import logging

from app.core.exceptions import ValidationException

logger = logging.getLogger(__name__)

TEAM_SIZE = 11
GOALKEEPERS = 1
# Penalidade (em minutos) para quem não tem a posição como principal
OUT_OF_POSITION_PENALTY = 10


@dataclass(frozen=True)
class Formation:
    defenders: int
    midfielders: int
    forwards: int

    @property
    def requirements(self) -> Dict[str, int]:
        return {
            "Goalkeeper": GOALKEEPERS,
            "Defender": self.defenders,
            "Midfielder": self.midfielders,
            "Forward": self.forwards,
        }

    def __str__(self):
        return f"{self.defenders}-{self.midfielders}-{self.forwards}"


def parse_formation(value: str) -> Formation:
    """Converte "4-4-2" em Formation (goleiro implícito)"""
    parts = (value or "").strip().split("-")
    if len(parts) != 3:
        raise ValidationException(f"Formação inválida: '{value}'. Use o formato D-M-F, ex.: 4-4-2")
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        raise ValidationException(f"Formação inválida: '{value}'. Use apenas números, ex.: 4-4-2")
    if any(n < 0 for n in numbers):
        raise ValidationException(f"Formação inválida: '{value}'")
    return Formation(*numbers)


def build_position_buckets(players: Sequence) -> Dict[str, List]:
    """Goleiros só pela posição principal; demais também pelas preferidas"""
    return {
        "Goalkeeper": [p for p in players if p.position == "Goalkeeper"],
        "Defender": [p for p in players if p.plays("Defender")],
        "Midfielder": [p for p in players if p.plays("Midfielder")],
        "Forward": [p for p in players if p.plays("Forward")],
    }


def selection_score(player, position: str, recent_minutes: Dict[int, int], prioritize_rest: bool) -> int:
    minutes = recent_minutes.get(player.id, 0)
    if prioritize_rest:
        return minutes
    penalty = 0 if player.position == position else 1
    return minutes + OUT_OF_POSITION_PENALTY * penalty


def generate_team(
    players: Sequence,
    recent_minutes: Dict[int, int],
    formation: Formation,
    prioritize_rest: bool = False,
) -> List:
    """
    Seleciona até 11 jogadores elegíveis (disponíveis e sem lesão grave).

    Cada grupo de posição é ordenado pelo score (menos minutos recentes
    primeiro) e preenchido na ordem GK, D, M, F. Um jogador escolhido em um
    grupo não é escolhido de novo em outro. Vagas restantes são completadas
    com os jogadores de menos minutos, deixando goleiros extras por último.
    """
    players = [p for p in players if p.is_selectable]
    if len(players) < TEAM_SIZE:
        raise ValidationException(
            f"Jogadores disponíveis insuficientes para um time completo "
            f"({len(players)} de {TEAM_SIZE})"
        )

    # ordem estável e determinística para desempates
    players = sorted(players, key=lambda p: (p.jersey_number, p.id))
    buckets = build_position_buckets(players)

    selected = []
    selected_ids = set()
    for position, needed in formation.requirements.items():
        bucket = sorted(
            buckets[position],
            key=lambda p: selection_score(p, position, recent_minutes, prioritize_rest),
        )
        taken = 0
        for player in bucket:
            if taken >= needed:
                break
            if player.id in selected_ids:
                continue
            selected.append(player)
            selected_ids.add(player.id)
            taken += 1
        if taken < needed:
            logger.info(f"Posição {position}: {taken} de {needed} jogadores encontrados")

    if len(selected) < TEAM_SIZE:
        has_goalkeeper = any(p.position == "Goalkeeper" for p in selected)
        remaining = [p for p in players if p.id not in selected_ids]
        remaining.sort(key=lambda p: (
            has_goalkeeper and p.position == "Goalkeeper",
            recent_minutes.get(p.id, 0),
        ))
        for player in remaining:
            if len(selected) >= TEAM_SIZE:
                break
            selected.append(player)
            selected_ids.add(player.id)

    return selected[:TEAM_SIZE]


def aggregate_recent_minutes(matches: Sequence, player_ids: Sequence[int]) -> Dict[int, int]:
    """Soma o ledger das partidas informadas para os jogadores elegíveis"""
    totals = {player_id: 0 for player_id in player_ids}
    for match in matches:
        for key, minutes in (match.playtime or {}).items():
            player_id = int(key)
            if player_id in totals:
                totals[player_id] += int(minutes or 0)
    return totals

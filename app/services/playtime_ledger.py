"""
Ledger de tempo de jogo.

O valor armazenado em Match.playtime só é alterado em dois momentos:
substituições (crédito do jogador que sai) e encerramento da partida. Leituras
de uma partida em andamento usam live_snapshot(), que calcula os minutos
correntes a partir do log de substituições sem gravar nada.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional
import math

from app.models.base import as_utc


def minutes_between(start: datetime, end: datetime) -> int:
    """Minutos inteiros (arredondados para baixo) entre dois instantes"""
    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return max(0, math.floor(seconds / 60))


class PlaytimeLedger:
    """Mapeamento jogador -> minutos acumulados"""

    def __init__(self, entries: Optional[Dict] = None):
        self._entries: Dict[str, int] = {
            str(player_id): int(minutes) for player_id, minutes in (entries or {}).items()
        }

    def get(self, player_id) -> int:
        return self._entries.get(str(player_id), 0)

    def set(self, player_id, minutes: int) -> None:
        """Sobrescreve o valor (não incrementa)"""
        if minutes < 0:
            raise ValueError("Minutos jogados não podem ser negativos")
        self._entries[str(player_id)] = int(minutes)

    def ensure(self, player_id) -> None:
        """Garante entrada para o jogador sem alterar um valor existente"""
        self.set(player_id, self.get(player_id))

    def credit(self, player_id, minutes: int) -> int:
        self.set(player_id, self.get(player_id) + minutes)
        return self.get(player_id)

    def total(self) -> int:
        return sum(self._entries.values())

    def spread(self) -> Optional[int]:
        """max - min entre jogadores registrados (None com menos de 2)"""
        if len(self._entries) < 2:
            return None
        values = self._entries.values()
        return max(values) - min(values)

    def player_ids(self) -> List[int]:
        return [int(player_id) for player_id in self._entries]

    def as_dict(self) -> Dict[str, int]:
        return dict(self._entries)

    def __contains__(self, player_id) -> bool:
        return str(player_id) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"<PlaytimeLedger({self._entries})>"


def continuous_play_start(player_id: int, substitutions: Iterable, kickoff: datetime) -> datetime:
    """Horário da última entrada do jogador em campo, ou o início do jogo"""
    entries = [as_utc(sub.time) for sub in substitutions if sub.player_in == player_id]
    return max(entries) if entries else as_utc(kickoff)


def live_snapshot(
    kickoff: datetime,
    team_sheet: Iterable[int],
    substitutions: Iterable,
    stored: Optional[Dict],
    now: datetime,
) -> PlaytimeLedger:
    """
    Calcula o ledger corrente de uma partida em andamento.

    Para cada jogador em campo soma ao valor armazenado os minutos desde o
    início do seu período contínuo em campo. Função pura: chamadas repetidas
    com o mesmo `now` devolvem o mesmo resultado.
    """
    substitutions = list(substitutions)
    ledger = PlaytimeLedger(stored)
    for player_id in team_sheet:
        start = continuous_play_start(player_id, substitutions, kickoff)
        ledger.credit(player_id, minutes_between(start, now))
    return ledger


def fairness_alert(ledger: PlaytimeLedger, threshold: int) -> Optional[dict]:
    """Alerta quando a diferença de minutos entre jogadores passa do limite"""
    difference = ledger.spread()
    if difference is None or difference <= threshold:
        return None
    values = ledger.as_dict().values()
    return {
        "type": "unfair_playtime",
        "message": f"Playtime difference is {difference} minutes. Consider rotating players.",
        "max_playtime": max(values),
        "min_playtime": min(values),
        "difference": difference,
    }


def fair_play_summary(minutes: List[int], tolerance: int) -> dict:
    if not minutes:
        return {
            "average_minutes": 0,
            "max_minutes": 0,
            "min_minutes": 0,
            "difference": 0,
            "is_fair": True,
        }
    max_minutes = max(minutes)
    min_minutes = min(minutes)
    return {
        "average_minutes": round(sum(minutes) / len(minutes)),
        "max_minutes": max_minutes,
        "min_minutes": min_minutes,
        "difference": max_minutes - min_minutes,
        "is_fair": (max_minutes - min_minutes) <= tolerance,
    }


def fairness_percentage(minutes: List[int]) -> int:
    """100% sem diferença, 0% com diferença de 45 minutos ou mais"""
    if len(minutes) <= 1:
        return 100
    difference = max(minutes) - min(minutes)
    return max(0, round(100 - (difference / 45) * 100))

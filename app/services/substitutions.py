"""Regras de aplicação de uma substituição sobre escalação e ledger"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from app.core.exceptions import ValidationException
from app.models.player import INJURY_STATUSES
from app.models.substitution import DEFAULT_SUBSTITUTION_REASON
from app.services.playtime_ledger import PlaytimeLedger, continuous_play_start, minutes_between


@dataclass
class SubstitutionPlan:
    team_sheet: List[int]
    ledger: PlaytimeLedger
    elapsed_minutes: int
    slot: int
    reason: str


def is_injury_reason(reason: Optional[str]) -> bool:
    return bool(reason) and "injury" in reason.lower()


def normalize_injury_status(value: Optional[str]) -> Optional[str]:
    """Retorna o status válido correspondente (sem diferenciar maiúsculas) ou None"""
    if not value:
        return None
    for status in INJURY_STATUSES:
        if status.lower() == value.strip().lower():
            return status
    return None


def plan_substitution(
    team_sheet: Iterable[int],
    stored_playtime: dict,
    substitutions: Iterable,
    kickoff: datetime,
    player_in: int,
    player_out: int,
    at: datetime,
    reason: Optional[str] = None,
) -> SubstitutionPlan:
    """
    Calcula o efeito de trocar player_out por player_in no instante `at`.

    Não altera os argumentos: devolve a nova escalação (troca na mesma
    posição) e o novo ledger, com os minutos do período contínuo de
    player_out creditados.
    """
    sheet = list(team_sheet)
    if player_out not in sheet:
        raise ValidationException("Jogador a ser substituído não está em campo")
    if player_in in sheet:
        raise ValidationException("Jogador que entra já está em campo")

    ledger = PlaytimeLedger(stored_playtime)
    start = continuous_play_start(player_out, substitutions, kickoff)
    elapsed = minutes_between(start, at)
    ledger.credit(player_out, elapsed)
    ledger.ensure(player_in)

    slot = sheet.index(player_out)
    sheet[slot] = player_in

    return SubstitutionPlan(
        team_sheet=sheet,
        ledger=ledger,
        elapsed_minutes=elapsed,
        slot=slot,
        reason=reason or DEFAULT_SUBSTITUTION_REASON,
    )

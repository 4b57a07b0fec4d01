"""Sistema de validação e integridade de dados"""
from collections import Counter
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Dict, List, Optional
import logging

from app.models.base import utc_now
from app.models.match import Match
from app.models.player import Player
from app.models.statistics import Statistics
from app.services.statistics_materializer import participants

logger = logging.getLogger(__name__)


class DataIntegrityChecker:
    """Verifica as regras de consistência entre partidas, estatísticas e elenco"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def validate_match(self, match: Match) -> List[str]:
        """Valida placar e ledger de uma partida"""
        errors = []
        for player_id, minutes in (match.playtime or {}).items():
            if minutes is None or minutes < 0:
                errors.append(f"Minutos negativos para jogador {player_id}")

        if match.status == "completed" and match.type == "match":
            if match.result is None:
                errors.append("Partida completa sem resultado")
            elif (match.our_score or 0) != match.calculate_team_goals():
                errors.append(
                    f"Placar ({match.our_score}) difere da soma dos gols ({match.calculate_team_goals()})"
                )
        return errors

    def validate_statistics_coverage(self, match: Match, records: Counter) -> List[str]:
        """Cada participante de partida completa tem exatamente um registro"""
        if match.status != "completed":
            return []
        errors = []
        for player_id in participants(match):
            count = records.get((player_id, match.id), 0)
            if count != 1:
                errors.append(f"Jogador {player_id} tem {count} registros de estatísticas")
        return errors

    def validate_player(self, player: Player) -> Optional[str]:
        if not player.name or len(player.name.strip()) == 0:
            return "Nome do jogador é obrigatório"
        if not player.preferred_positions:
            return "Jogador sem posições preferidas"
        return None

    async def check_data_consistency(self) -> Dict[str, Any]:
        """Verifica consistência geral dos dados no banco"""
        issues = []

        players = (await self.db.execute(select(Player))).scalars().all()
        jerseys = Counter(player.jersey_number for player in players)
        for number, count in jerseys.items():
            if count > 1:
                issues.append(f"Camisa {number} usada por {count} jogadores")
        for player in players:
            error = self.validate_player(player)
            if error:
                issues.append(f"Jogador {player.id}: {error}")

        stats = (await self.db.execute(select(Statistics))).unique().scalars().all()
        records = Counter((stat.player_id, stat.match_id) for stat in stats)

        matches = (await self.db.execute(select(Match))).scalars().all()
        for match in matches:
            for error in self.validate_match(match) + self.validate_statistics_coverage(match, records):
                issues.append(f"Partida {match.id}: {error}")

        if issues:
            logger.warning(f"Verificação de integridade encontrou {len(issues)} problemas")

        return {
            "timestamp": utc_now().isoformat(),
            "issues_found": len(issues),
            "issues": issues,
            "status": "ok" if len(issues) == 0 else "issues_found"
        }

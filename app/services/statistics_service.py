"""Service de Statistics (Async)"""
from datetime import date, datetime, time, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple
import logging

from app.core.cache import cache, report_cache_key
from app.core.exceptions import InvalidStateException, NotFoundException, ValidationException
from app.models.match import Match
from app.models.statistics import Statistics
from app.repositories.match_repository import MatchRepository
from app.repositories.player_repository import PlayerRepository
from app.repositories.statistics_repository import StatisticsRepository
from app.schemas.statistics import InjuryLogRequest
from app.services import reports
from app.services.playtime_ledger import PlaytimeLedger
from app.services.statistics_materializer import build_statistics_rows, participants

logger = logging.getLogger(__name__)

SEVERITY_TO_INJURY_STATUS = {
    "minor": "Minor Injury",
    "major": "Major Injury",
    "severe": "Major Injury",
}


def injury_status_for_severity(severity: str) -> str:
    """Severidades desconhecidas contam como lesão leve"""
    return SEVERITY_TO_INJURY_STATUS.get(severity.strip().lower(), "Minor Injury")


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min).replace(tzinfo=timezone.utc)


def _day_end(value: date) -> datetime:
    return datetime.combine(value, time.max).replace(tzinfo=timezone.utc)


def resolve_period(
    season: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    default_to_current_season: bool,
) -> Tuple[Optional[datetime], Optional[datetime], str]:
    """Temporada explícita, intervalo de datas ou (opcionalmente) a temporada atual"""
    if season:
        date_from, date_to = reports.season_bounds(season)
        return date_from, date_to, season
    if start_date or end_date:
        if start_date and end_date and start_date > end_date:
            raise ValidationException("start_date deve ser anterior a end_date")
        return (
            _day_start(start_date) if start_date else None,
            _day_end(end_date) if end_date else None,
            f"{start_date or 'start'} to {end_date or 'now'}",
        )
    if default_to_current_season:
        current = reports.current_season(datetime.now(timezone.utc))
        date_from, date_to = reports.season_bounds(current)
        return date_from, date_to, current
    return None, None, "all"


class StatisticsService:
    """Materialização de estatísticas e relatórios"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = StatisticsRepository(db)
        self.match_repository = MatchRepository(db)
        self.player_repository = PlayerRepository(db)

    async def materialize(self, match: Match) -> List[Statistics]:
        """
        Grava (upsert) uma linha por participante da partida.

        Idempotente: rodar de novo atualiza os mesmos registros
        (jogador, partida) em vez de criar novos.
        """
        player_ids = participants(match) + [p.player_id for p in match.player_performances]
        players_by_id = await self.player_repository.get_by_ids(player_ids)
        rows = build_statistics_rows(match, players_by_id)

        records = []
        for player_id, values in rows:
            records.append(await self.repository.upsert(match, player_id, values))
        await self.repository.commit()

        await cache.invalidate_statistics(match.id, [player_id for player_id, _ in rows])
        logger.info(f"Partida {match.id}: {len(records)} registros de estatísticas materializados")
        return records

    async def rematerialize(self, match_id: int) -> List[Statistics]:
        """Reparo manual para partidas completas sem estatísticas"""
        match = await self.match_repository.get_by_id(match_id)
        if not match:
            raise NotFoundException(f"Partida {match_id} não encontrada")
        if match.status != "completed":
            raise InvalidStateException(
                f"Estatísticas só podem ser materializadas para partidas completas (status: {match.status})"
            )
        return await self.materialize(match)

    async def log_injury(self, data: InjuryLogRequest) -> Statistics:
        player = await self.player_repository.get_by_id(data.player_id)
        if not player:
            raise NotFoundException(f"Jogador {data.player_id} não encontrado")
        match = await self.match_repository.get_by_id(data.match_id)
        if not match:
            raise NotFoundException(f"Partida {data.match_id} não encontrada")

        stats = await self.repository.get(player.id, match.id)
        if stats is None:
            stats = await self.repository.upsert(match, player.id, {
                "minutes_played": PlaytimeLedger(match.playtime).get(player.id),
                "positions_played": [player.position],
            })
        stats.injuries.append(data.injury_description)

        if data.severity:
            status = injury_status_for_severity(data.severity)
            player.injury_status = status
            if status == "Major Injury":
                player.availability = False
            logger.info(f"Jogador {player.id}: lesão registrada ({data.severity}) -> {status}")

        await self.repository.commit()
        await cache.invalidate_statistics(match.id, [player.id])
        return stats

    async def player_report(
        self,
        player_id: int,
        season: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        player = await self.player_repository.get_by_id(player_id)
        if not player:
            raise NotFoundException(f"Jogador {player_id} não encontrado")

        date_from, date_to, period = resolve_period(season, start_date, end_date, True)
        cache_key = report_cache_key("player", player_id, period)
        cached = await cache.get(cache_key)
        if cached:
            return cached

        stats = await self.repository.find_for_player(player_id, date_from, date_to)
        report = reports.player_report(player, stats, period)
        await cache.set(cache_key, report)
        return report

    async def match_report(self, match_id: int) -> dict:
        match = await self.match_repository.get_by_id(match_id)
        if not match:
            raise NotFoundException(f"Partida {match_id} não encontrada")

        cache_key = report_cache_key("match", match_id)
        # partidas em andamento mudam a cada substituição
        cacheable = match.status == "completed"
        if cacheable:
            cached = await cache.get(cache_key)
            if cached:
                return cached

        stats = await self.repository.find_for_match(match_id)
        report = reports.match_report(match, stats)
        if cacheable:
            await cache.set(cache_key, report)
        return report

    async def team_report(
        self,
        season: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        date_from, date_to, period = resolve_period(season, start_date, end_date, False)
        cache_key = report_cache_key("team", period)
        cached = await cache.get(cache_key)
        if cached:
            return cached

        matches = await self.match_repository.find_in_period(date_from, date_to)
        stats = await self.repository.find_in_period(date_from, date_to)
        players_by_id = await self.player_repository.get_by_ids(s.player_id for s in stats)
        report = reports.team_report(matches, stats, players_by_id, period)
        await cache.set(cache_key, report)
        return report

    async def player_aggregate(self, player_id: int) -> dict:
        """Totais de todas as partidas calculados no banco"""
        player = await self.player_repository.get_by_id(player_id)
        if not player:
            raise NotFoundException(f"Jogador {player_id} não encontrado")
        aggregate = await self.repository.aggregate_for_player(player_id)
        return {
            "player_id": player_id,
            "name": player.name,
            "aggregate": aggregate,
        }

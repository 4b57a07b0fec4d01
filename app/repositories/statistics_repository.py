"""Repository de Statistics (Async)"""
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case
from typing import List, Optional
from app.models.match import Match
from app.models.statistics import Statistics


class StatisticsRepository:
    """Repository async para estatísticas materializadas"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, player_id: int, match_id: int) -> Optional[Statistics]:
        """Busca única por (jogador, partida)"""
        result = await self.db.execute(
            select(Statistics).filter(
                Statistics.player_id == player_id,
                Statistics.match_id == match_id,
            )
        )
        return result.unique().scalar_one_or_none()

    async def find_for_match(self, match_id: int) -> List[Statistics]:
        result = await self.db.execute(
            select(Statistics)
            .filter(Statistics.match_id == match_id)
            .order_by(Statistics.id.asc())
        )
        return list(result.unique().scalars().all())

    async def find_for_player(
        self,
        player_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Statistics]:
        """Estatísticas do jogador em ordem cronológica da partida"""
        query = (
            select(Statistics)
            .join(Match, Statistics.match_id == Match.id)
            .filter(Statistics.player_id == player_id)
        )
        if date_from:
            query = query.filter(Match.date >= date_from)
        if date_to:
            query = query.filter(Match.date <= date_to)
        result = await self.db.execute(query.order_by(Match.date.asc(), Statistics.id.asc()))
        return list(result.unique().scalars().all())

    async def find_in_period(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Statistics]:
        query = select(Statistics).join(Match, Statistics.match_id == Match.id)
        if date_from:
            query = query.filter(Match.date >= date_from)
        if date_to:
            query = query.filter(Match.date <= date_to)
        result = await self.db.execute(query.order_by(Match.date.asc(), Statistics.id.asc()))
        return list(result.unique().scalars().all())

    async def aggregate_for_player(self, player_id: int) -> Optional[dict]:
        """Totais e médias do jogador (todas as partidas)"""
        result = await self.db.execute(
            select(
                func.count(Statistics.id).label("matches_played"),
                func.coalesce(func.sum(Statistics.minutes_played), 0).label("total_minutes"),
                func.coalesce(func.sum(Statistics.substitutions_count), 0).label("total_substitutions"),
                func.coalesce(func.sum(Statistics.goals), 0).label("total_goals"),
                func.coalesce(func.sum(Statistics.assists), 0).label("total_assists"),
                func.coalesce(func.sum(Statistics.yellow_cards), 0).label("total_yellow_cards"),
                func.coalesce(func.sum(Statistics.red_cards), 0).label("total_red_cards"),
                func.coalesce(
                    func.sum(case((Statistics.player_of_match == True, 1), else_=0)), 0  # noqa: E712
                ).label("player_of_match_count"),
                func.avg(Statistics.rating).label("average_rating"),
            ).filter(Statistics.player_id == player_id)
        )
        row = result.one()
        if not row.matches_played:
            return None
        aggregate = dict(row._mapping)
        if aggregate["average_rating"] is not None:
            aggregate["average_rating"] = round(float(aggregate["average_rating"]), 2)
        return aggregate

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Statistics.id)))
        return result.scalar() or 0

    async def upsert(self, match: Match, player_id: int, values: dict) -> Statistics:
        """Cria ou atualiza o registro único (jogador, partida). Não faz commit."""
        stats = await self.get(player_id, match.id)
        if stats is None:
            stats = Statistics.zeroed(player_id, match=match)
            self.db.add(stats)
        for key, value in values.items():
            setattr(stats, key, value)
        await self.db.flush()
        return stats

    async def commit(self):
        await self.db.commit()

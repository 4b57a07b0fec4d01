"""Repository de Match (Async)"""
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Dict, List, Optional, Sequence, Tuple
from app.models.match import Match


class MatchRepository:
    """Repository async para partidas e treinos"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, match_id: int) -> Optional[Match]:
        result = await self.db.execute(
            select(Match).filter(Match.id == match_id)
        )
        return result.scalar_one_or_none()

    def _filtered(
        self,
        match_type: Optional[str] = None,
        status: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ):
        query = select(Match)
        if match_type:
            query = query.filter(Match.type == match_type)
        if status:
            query = query.filter(Match.status == status)
        if statuses:
            query = query.filter(Match.status.in_(statuses))
        if date_from:
            query = query.filter(Match.date >= date_from)
        if date_to:
            query = query.filter(Match.date <= date_to)
        return query

    async def find(
        self,
        match_type: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 25,
    ) -> Tuple[List[Match], int]:
        """Lista partidas (mais recentes primeiro) com total para paginação"""
        query = self._filtered(match_type, status, date_from=date_from, date_to=date_to)
        total_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = total_result.scalar() or 0
        result = await self.db.execute(
            query.order_by(Match.date.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    async def find_schedule(
        self,
        date_from: datetime,
        date_to: datetime,
        match_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Match]:
        """Agenda em ordem cronológica"""
        query = self._filtered(match_type, status, date_from=date_from, date_to=date_to)
        result = await self.db.execute(query.order_by(Match.date.asc()))
        return list(result.scalars().all())

    async def find_completed_between(self, date_from: datetime, date_before: datetime) -> List[Match]:
        """Partidas completas em [date_from, date_before)"""
        result = await self.db.execute(
            select(Match).filter(
                Match.status == "completed",
                Match.date >= date_from,
                Match.date < date_before,
            )
        )
        return list(result.scalars().all())

    async def find_in_period(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Match]:
        query = self._filtered(date_from=date_from, date_to=date_to)
        result = await self.db.execute(query.order_by(Match.date.asc()))
        return list(result.scalars().all())

    async def find_upcoming_with_player(self, player_id: int, now: datetime) -> List[Match]:
        """Partidas futuras (agendadas ou em andamento) em que o jogador está escalado"""
        query = self._filtered(statuses=("scheduled", "ongoing"), date_from=now)
        result = await self.db.execute(query.order_by(Match.date.asc()))
        return [match for match in result.scalars().all() if player_id in (match.team_sheet or [])]

    async def count_by_status(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(Match.status, func.count(Match.id)).group_by(Match.status)
        )
        return {status: count for status, count in result.all()}

    async def create(self, match_data: dict) -> Match:
        match = Match(substitutions=[], player_performances=[], **match_data)
        self.db.add(match)
        await self.db.commit()
        return match

    async def save(self, match: Match) -> Match:
        """Persiste alterações feitas na partida"""
        self.db.add(match)
        await self.db.commit()
        return match

"""Service de partidas ao vivo: início, substituições, tempo de jogo e encerramento"""
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Iterable, List, Optional, Tuple
import logging

from app.core.config import settings
from app.core.exceptions import (
    APIException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from app.models.base import as_utc, utc_now
from app.models.match import Match, MATCH_RESULTS
from app.models.player_performance import PlayerPerformance
from app.models.substitution import Substitution
from app.repositories.match_repository import MatchRepository
from app.repositories.player_repository import PlayerRepository
from app.schemas.match import EndMatchRequest, MatchCreate, SubstitutionRequest
from app.services.notifications import Notifier, emit_safely
from app.services.playtime_ledger import (
    PlaytimeLedger,
    fair_play_summary,
    fairness_alert,
    live_snapshot,
)
from app.services.statistics_service import StatisticsService
from app.services.substitutions import is_injury_reason, normalize_injury_status, plan_substitution

logger = logging.getLogger(__name__)


class MaterializationFailedException(APIException):
    """Partida encerrada, mas as estatísticas não foram gravadas"""

    kind = "materialization_failed"

    def __init__(self, match_id: int):
        super().__init__(
            status_code=500,
            detail=(
                f"Partida {match_id} encerrada, mas a geração de estatísticas falhou. "
                f"Use POST /matches/{match_id}/statistics/materialize para reprocessar"
            ),
        )


def current_playtime(match: Match, now: Optional[datetime] = None) -> PlaytimeLedger:
    """Ledger corrente: snapshot ao vivo para partidas em andamento, valor gravado nas demais"""
    if match.status != "ongoing":
        return PlaytimeLedger(match.playtime)
    return live_snapshot(
        match.kickoff_time,
        match.team_sheet or [],
        match.substitutions,
        match.playtime,
        now or utc_now(),
    )


class MatchService:
    """Service async para o ciclo de vida de partidas"""

    def __init__(self, db: AsyncSession, notifier: Optional[Notifier] = None):
        self.db = db
        self.notifier = notifier
        self.repository = MatchRepository(db)
        self.player_repository = PlayerRepository(db)

    async def list_matches(
        self,
        match_type: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        page: int = 1,
        limit: int = 25,
    ) -> Tuple[List[Match], int]:
        return await self.repository.find(
            match_type=match_type,
            status=status,
            date_from=date_from,
            date_to=date_to,
            skip=(page - 1) * limit,
            limit=limit,
        )

    async def get_match(self, match_id: int) -> Match:
        match = await self.repository.get_by_id(match_id)
        if not match:
            raise NotFoundException(f"Partida {match_id} não encontrada")
        return match

    async def validate_team_sheet(self, team_sheet: Iterable[int]) -> None:
        """Todos os jogadores devem existir e estar disponíveis"""
        team_sheet = list(team_sheet)
        if not team_sheet:
            return
        players = await self.player_repository.get_by_ids(team_sheet)
        missing = [pid for pid in team_sheet if pid not in players]
        unavailable = [pid for pid in team_sheet if pid in players and not players[pid].availability]
        if missing or unavailable:
            parts = []
            if missing:
                parts.append(f"não encontrados: {missing}")
            if unavailable:
                parts.append(f"indisponíveis: {unavailable}")
            raise ValidationException(
                "Alguns jogadores da escalação não estão disponíveis (" + "; ".join(parts) + ")"
            )

    def _kickoff(self, match: Match, team_sheet: List[int]) -> None:
        match.status = "ongoing"
        match.team_sheet = list(team_sheet)
        match.started_at = utc_now()
        ledger = PlaytimeLedger(match.playtime)
        for player_id in team_sheet:
            ledger.set(player_id, 0)
        match.playtime = ledger.as_dict()

    async def start_new_match(self, data: MatchCreate) -> Match:
        """Cria a partida já em andamento"""
        await self.validate_team_sheet(data.team_sheet)
        now = utc_now()
        ledger = PlaytimeLedger({player_id: 0 for player_id in data.team_sheet})
        match = await self.repository.create({
            **data.model_dump(),
            "status": "ongoing",
            "started_at": now,
            "playtime": ledger.as_dict(),
        })
        logger.info(f"Partida {match.id} iniciada com {len(match.team_sheet)} jogadores")
        self._emit("match_started", match)
        return match

    async def start_existing_match(self, match_id: int, team_sheet: Optional[List[int]] = None) -> Match:
        match = await self.get_match(match_id)
        if match.status != "scheduled":
            raise InvalidStateException(
                f"Não é possível iniciar partida com status '{match.status}'. "
                f"Apenas partidas agendadas podem ser iniciadas"
            )
        if team_sheet is not None:
            await self.validate_team_sheet(team_sheet)
        self._kickoff(match, team_sheet if team_sheet is not None else list(match.team_sheet or []))
        await self.repository.save(match)
        logger.info(f"Partida agendada {match.id} iniciada")
        self._emit("match_started", match)
        return match

    async def substitute(self, match_id: int, data: SubstitutionRequest) -> Match:
        match = await self.get_match(match_id)
        if match.status != "ongoing":
            raise InvalidStateException("Substituições só são permitidas em partidas em andamento")

        players = await self.player_repository.get_by_ids([data.player_in, data.player_out])
        if data.player_in not in players or data.player_out not in players:
            raise NotFoundException("Um ou ambos os jogadores não foram encontrados")

        at = as_utc(data.time) if data.time else utc_now()
        plan = plan_substitution(
            match.team_sheet or [],
            match.playtime,
            match.substitutions,
            match.kickoff_time,
            data.player_in,
            data.player_out,
            at,
            data.reason,
        )

        match.team_sheet = plan.team_sheet
        match.playtime = plan.ledger.as_dict()
        match.substitutions.append(Substitution(
            player_in=data.player_in,
            player_out=data.player_out,
            time=at,
            reason=plan.reason,
        ))

        if is_injury_reason(plan.reason) and data.injury_status:
            self._record_substitution_injury(players[data.player_out], data)

        await self.repository.save(match)
        logger.info(
            f"Partida {match.id}: {data.player_out} -> {data.player_in} "
            f"({plan.elapsed_minutes} min creditados)"
        )

        substitution = match.substitutions[-1]
        emit_safely(self.notifier, "substitution", {
            "match_id": match.id,
            "substitution": {
                "player_in": substitution.player_in,
                "player_out": substitution.player_out,
                "time": substitution.time.isoformat(),
                "reason": substitution.reason,
            },
            "playtime": plan.ledger.as_dict(),
        })
        alert = fairness_alert(plan.ledger, settings.FAIRNESS_ALERT_THRESHOLD)
        if alert:
            emit_safely(self.notifier, "playtime_alert", {"match_id": match.id, "alert": alert})
        return match

    def _record_substitution_injury(self, player, data: SubstitutionRequest) -> None:
        """Atualização best-effort: falhas não impedem a substituição"""
        status = normalize_injury_status(data.injury_status)
        if status is None:
            logger.warning(
                f"Status de lesão inválido '{data.injury_status}' para jogador {player.id}; ignorado"
            )
            return
        player.injury_status = status
        player.injury_notes = data.injury_notes or (
            f"Lesionado durante partida em {utc_now().date().isoformat()}"
        )
        logger.info(f"Jogador {player.id}: status de lesão -> {status}")

    async def playtime_report(self, match_id: int) -> dict:
        """Minutos correntes por jogador; não altera a partida"""
        match = await self.get_match(match_id)
        ledger = current_playtime(match)
        players = await self.player_repository.get_by_ids(ledger.player_ids())
        team_sheet = set(match.team_sheet or [])

        rows = []
        for player_id in ledger.player_ids():
            player = players.get(player_id)
            rows.append({
                "player": {
                    "id": player_id,
                    "name": player.name if player else None,
                    "jersey_number": player.jersey_number if player else None,
                    "position": player.position if player else None,
                },
                "minutes_played": ledger.get(player_id),
                "is_currently_playing": player_id in team_sheet,
            })
        rows.sort(key=lambda row: row["minutes_played"], reverse=True)

        return {
            "match": {
                "id": match.id,
                "type": match.type,
                "date": match.date,
                "status": match.status,
                "duration": match.duration,
            },
            "playtime_stats": rows,
            "fair_play": fair_play_summary(
                [row["minutes_played"] for row in rows], settings.FAIR_PLAY_TOLERANCE
            ),
            "total_players_used": len(rows),
        }

    async def end_match(self, match_id: int, data: EndMatchRequest) -> Match:
        match = await self.get_match(match_id)
        if match.status != "ongoing":
            raise InvalidStateException("A partida não está em andamento")

        result = data.match_result
        if match.type == "match":
            if result is None or not result.result:
                raise ValidationException("Resultado é obrigatório ao encerrar uma partida")
            if result.result not in MATCH_RESULTS:
                raise ValidationException("Resultado deve ser win, loss ou draw")

        ledger = current_playtime(match)
        match.playtime = ledger.as_dict()

        for performance in data.player_performances:
            values = performance.model_dump(exclude={"player_id"})
            values["minutes_played"] = ledger.get(performance.player_id)
            existing = match.get_performance(performance.player_id)
            if existing is None:
                match.player_performances.append(
                    PlayerPerformance(player_id=performance.player_id, **values)
                )
            else:
                for key, value in values.items():
                    setattr(existing, key, value)

        if match.type == "match":
            calculated = match.calculate_team_goals()
            if result.our_score is not None and result.our_score != calculated:
                logger.warning(
                    f"Partida {match.id}: placar informado {result.our_score} difere da soma "
                    f"dos gols ({calculated}); usando {calculated}"
                )
            match.result = result.result
            match.our_score = calculated
            match.opponent_score = result.opponent_score or 0

        match.status = "completed"
        match.ended_at = utc_now()
        await self.repository.save(match)
        logger.info(f"Partida {match.id} encerrada ({match.type})")

        try:
            await StatisticsService(self.db).materialize(match)
        except Exception as e:
            logger.error(f"Erro ao gerar estatísticas da partida {match.id}: {e}")
            await self.db.rollback()
            raise MaterializationFailedException(match.id)

        self._emit("match_completed", match)
        return match

    def _emit(self, event: str, match: Match) -> None:
        emit_safely(self.notifier, event, {
            "match_id": match.id,
            "status": match.status,
            "team_sheet": list(match.team_sheet or []),
            "playtime": dict(match.playtime or {}),
            "match_result": match.match_result,
        })

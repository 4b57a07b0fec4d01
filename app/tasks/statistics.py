"""Tasks de reparo de estatísticas e monitoramento de partidas em andamento"""
from sqlalchemy.orm import Session
from typing import List, Tuple
from app.tasks.celery_app import celery_app
from app.core.config import settings
from app.core.database import SessionLocal
from app.models.base import utc_now
from app.models.match import Match
from app.models.player import Player
from app.models.statistics import Statistics
from app.services.playtime_ledger import fairness_alert, live_snapshot
from app.services.statistics_materializer import build_statistics_rows, participants
from app.webhooks.manager import WebhookManager
import logging

logger = logging.getLogger(__name__)


def materialize_match(db: Session, match: Match) -> int:
    """Versão síncrona da materialização (upsert por jogador + partida)"""
    player_ids = participants(match) + [p.player_id for p in match.player_performances]
    players = db.query(Player).filter(Player.id.in_(set(player_ids))).all()
    rows = build_statistics_rows(match, {player.id: player for player in players})

    for player_id, values in rows:
        stats = db.query(Statistics).filter(
            Statistics.player_id == player_id,
            Statistics.match_id == match.id,
        ).first()
        if stats is None:
            stats = Statistics.zeroed(player_id, match_id=match.id)
            db.add(stats)
        for key, value in values.items():
            setattr(stats, key, value)
    db.commit()
    return len(rows)


def find_matches_missing_statistics(db: Session) -> List[Match]:
    """Partidas completas com algum participante sem registro"""
    missing = []
    for match in db.query(Match).filter(Match.status == "completed").all():
        recorded = {
            player_id for (player_id,) in db.query(Statistics.player_id).filter(
                Statistics.match_id == match.id
            ).all()
        }
        expected = set(participants(match)) | {p.player_id for p in match.player_performances}
        if not expected.issubset(recorded):
            missing.append(match)
    return missing


@celery_app.task(bind=True, max_retries=3, default_retry_delay=30)
def materialize_match_statistics_task(self, match_id: int):
    """Reprocessa estatísticas de uma partida completa"""
    db = SessionLocal()
    try:
        match = db.query(Match).filter(Match.id == match_id).first()
        if not match:
            return {"status": "skipped", "reason": "match_not_found"}
        if match.status != "completed":
            return {"status": "skipped", "reason": f"status_{match.status}"}
        records = materialize_match(db, match)
        logger.info(f"Partida {match_id}: {records} registros de estatísticas materializados")
        return {"status": "success", "match_id": match_id, "records": records}
    except Exception as e:
        db.rollback()
        logger.error(f"Erro ao materializar estatísticas da partida {match_id}: {e}")
        raise self.retry(exc=e)
    finally:
        db.close()


@celery_app.task
def repair_missing_statistics():
    """Varre partidas completas e agenda a materialização das que ficaram sem estatísticas"""
    db = SessionLocal()
    try:
        matches = find_matches_missing_statistics(db)
        for match in matches:
            materialize_match_statistics_task.delay(match.id)
        if matches:
            logger.warning(f"{len(matches)} partidas completas sem estatísticas; reparo agendado")
        return {"status": "success", "scheduled": [match.id for match in matches]}
    finally:
        db.close()


def playtime_alerts_due(db: Session, now, threshold: int) -> List[Tuple[Match, dict]]:
    """
    Alertas de rodízio das partidas em andamento.

    Um alerta só se repete quando a diferença cresceu pelo menos `threshold`
    minutos desde o último enviado para a partida.
    """
    due = []
    for match in db.query(Match).filter(Match.status == "ongoing").all():
        ledger = live_snapshot(
            match.kickoff_time, match.team_sheet or [], match.substitutions, match.playtime, now
        )
        alert = fairness_alert(ledger, threshold)
        if alert is None:
            match.last_alert_difference = None
            continue
        last = match.last_alert_difference
        if last is not None and alert["difference"] - last < threshold:
            continue
        match.last_alert_difference = alert["difference"]
        due.append((match, alert))
    db.commit()
    return due


@celery_app.task
def monitor_ongoing_matches():
    """Emite playtime_alert para partidas em andamento com rodízio desequilibrado"""
    db = SessionLocal()
    try:
        manager = WebhookManager()
        due = playtime_alerts_due(db, utc_now(), settings.FAIRNESS_ALERT_THRESHOLD)
        for match, alert in due:
            manager.trigger_webhook("playtime_alert", match.id, {"match_id": match.id, "alert": alert})
        return {"status": "success", "alerts": len(due)}
    finally:
        db.close()

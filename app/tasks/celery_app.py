"""Configuração do Celery"""
from celery import Celery
from celery.schedules import crontab
from app.core.config import settings

celery_app = Celery(
    'junior_squad',
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend
)

# Importa todas as tasks para registro automático no worker
from app.tasks import notifications, statistics  # noqa

celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,
    worker_max_tasks_per_child=50,
    worker_prefetch_multiplier=4,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    # Partidas completas sem estatísticas (falha após o encerramento)
    'repair-missing-statistics': {
        'task': 'app.tasks.statistics.repair_missing_statistics',
        'schedule': crontab(minute='*/15'),
    },
    # Alerta de rodízio em partidas em andamento
    'monitor-ongoing-matches': {
        'task': 'app.tasks.statistics.monitor_ongoing_matches',
        'schedule': crontab(minute='*/5'),
    },
}

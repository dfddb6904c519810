# taskboard/tasks.py
from celery import Celery
from taskboard.core.config import settings

celery_app = Celery(
    "taskboard",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[],
)

celery_app.conf.update(
    broker_connection_retry_on_startup=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,    # fair dispatch
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    enable_utc=True,
    beat_schedule={
        "purge-revoked-tokens": {
            "task": "tasks.purge_revoked_tokens",
            "schedule": float(settings.REVOCATION_PURGE_SECONDS),
        },
    },
)

@celery_app.task(name="tasks.purge_revoked_tokens")
def purge_revoked_tokens() -> int:
    from taskboard.db.session import SessionLocal
    from taskboard.services.revocation import purge_expired
    db = SessionLocal()
    try:
        return purge_expired(db)
    finally:
        db.close()

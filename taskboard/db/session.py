import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from taskboard.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        kw = {"connect_args": {"check_same_thread": False}}
        # in-memory sqlite must share one connection or every session sees an empty db
        if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            kw["poolclass"] = StaticPool
        return kw
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


engine = create_engine(settings.DATABASE_URL, future=True, **_engine_kwargs())

# a fresh Session per call; worker threads are reused across requests
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()

def init_db():
    # Import models to register metadata, then create tables if missing
    import taskboard.models  # noqa
    Base.metadata.create_all(bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session):
    """
    All-or-nothing write scope over ``db``.

    Commits when the block exits cleanly. On any exception the session is
    rolled back and the original exception propagates, so no partial state
    is ever committed.
    """
    try:
        yield db
        db.commit()
    except Exception as exc:
        logger.warning("unit of work rolled back: %s", exc.__class__.__name__)
        db.rollback()
        raise

"""Revocation store for logged-out tokens. Entries are useless once the token expires and get purged."""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.db.session import unit_of_work
from taskboard.models import RevokedToken
from taskboard.security import utcnow

logger = logging.getLogger(__name__)


def is_revoked(db: Session, token: str) -> bool:
    row = db.query(RevokedToken.id).filter(
        RevokedToken.token == token, RevokedToken.expires_at > utcnow()
    ).first()
    return row is not None


def revoke(db: Session, token: str, expires_at: datetime) -> None:
    """Idempotent: revoking a token twice keeps a single entry with the latest expiry."""
    with unit_of_work(db):
        row = db.query(RevokedToken).filter(RevokedToken.token == token).first()
        if row is None:
            db.add(RevokedToken(token=token, expires_at=expires_at))
        else:
            row.expires_at = expires_at


def purge_expired(db: Session) -> int:
    with unit_of_work(db):
        removed = db.query(RevokedToken).filter(
            RevokedToken.expires_at <= utcnow()
        ).delete(synchronize_session=False)
    if removed:
        logger.info("purged %d expired revoked token(s)", removed)
    return removed

"""Revocation store and its purge task."""
from datetime import timedelta

from taskboard.models import RevokedToken
from taskboard.security import create_token, read_claims, token_expiry, utcnow
from taskboard.services.revocation import is_revoked, purge_expired, revoke
from taskboard.tasks import purge_revoked_tokens


def test_revoke_is_idempotent(db):
    later = utcnow() + timedelta(hours=1)
    revoke(db, "tok-a", later)
    revoke(db, "tok-a", later + timedelta(hours=1))
    assert db.query(RevokedToken).count() == 1
    assert is_revoked(db, "tok-a")
    assert not is_revoked(db, "tok-b")


def test_expired_entries_are_ignored_and_purged(db):
    revoke(db, "old", utcnow() - timedelta(minutes=5))
    revoke(db, "fresh", utcnow() + timedelta(minutes=5))
    assert not is_revoked(db, "old")
    assert purge_expired(db) == 1
    assert [r.token for r in db.query(RevokedToken).all()] == ["fresh"]


def test_celery_task_purges(db):
    revoke(db, "old", utcnow() - timedelta(seconds=1))
    assert purge_revoked_tokens() == 1
    assert db.query(RevokedToken).count() == 0


def test_expiry_read_without_verification():
    token = create_token("7", "Member")
    expires_at = token_expiry(read_claims(token))
    assert expires_at > utcnow()
    assert read_claims("garbage") is None

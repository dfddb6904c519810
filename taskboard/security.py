from passlib.hash import bcrypt
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from taskboard.core.config import settings

_hasher = bcrypt.using(rounds=settings.BCRYPT_ROUNDS)

def hash_password(pw: str) -> str: return _hasher.hash(pw)
def verify_password(pw: str, pw_hash: str) -> bool: return bcrypt.verify(pw, pw_hash)

def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the revocation table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def create_token(sub: str, role: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {"sub": sub, "role": role, "exp": exp}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def decode_token(token: str) -> Optional[dict]:
    try: return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError: return None

def read_claims(token: str) -> Optional[dict]:
    # no signature check; logout only needs the expiry
    try: return jwt.get_unverified_claims(token)
    except JWTError: return None

def token_expiry(claims: dict) -> Optional[datetime]:
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)

import logging
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from taskboard.core.errors import AuthenticationError, AuthorizationError, ValidationError
from taskboard.db.session import get_db
from taskboard.models import GlobalRole, User
from taskboard.repositories.user_repo import find_by_id, user_to_dict
from taskboard.schemas.auth import SignupReq, LoginReq
from taskboard.security import create_token, decode_token, read_claims, token_expiry
from taskboard.services import revocation, user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _bearer(authorization) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        return ""
    return authorization.split(" ", 1)[1].strip()

@router.post("/signup", status_code=201)
def signup(req: SignupReq, db: Session = Depends(get_db)):
    u = user_service.signup(db, req)
    return {"message": "User registered successfully", "user": user_to_dict(u)}

@router.post("/login")
def login(req: LoginReq, db: Session = Depends(get_db)):
    u = user_service.login(db, req.email, req.password)
    token = create_token(str(u.id), u.role.value)
    logger.info("user %s logged in", u.id)
    return {"message": "Login successful", "user": user_to_dict(u), "token": token}

def require_user(request: Request, authorization: str = Header(None), db: Session = Depends(get_db)) -> User:
    token = _bearer(authorization)
    if not token:
        raise AuthenticationError("No token provided")
    if revocation.is_revoked(db, token):
        raise AuthenticationError("Token revoked")
    payload = decode_token(token)
    if not payload or not str(payload.get("sub", "")).isdigit():
        raise AuthenticationError("Invalid token")
    u = find_by_id(db, int(payload["sub"]))
    if not u:
        raise AuthenticationError("Invalid token: user not found")
    request.state.token = token
    return u

def require_admin(user: User = Depends(require_user)) -> User:
    if user.role != GlobalRole.admin:
        raise AuthorizationError("Forbidden: Admin role required")
    return user

@router.post("/logout")
def logout(request: Request, user: User = Depends(require_user), db: Session = Depends(get_db)):
    token = request.state.token
    claims = read_claims(token)
    expires_at = token_expiry(claims) if claims else None
    if expires_at is None:
        raise ValidationError("Invalid token")
    revocation.revoke(db, token, expires_at)
    logger.info("user %s logged out", user.id)
    return {"message": "Successfully logged out (token revoked)"}

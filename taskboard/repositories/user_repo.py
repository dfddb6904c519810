from typing import Dict, Iterable, Optional
from sqlalchemy.orm import Session
from taskboard.models import User

def find_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)

def find_by_ids(db: Session, user_ids: Iterable[int]) -> Dict[int, User]:
    ids = set(user_ids)
    if not ids:
        return {}
    rows = db.query(User).filter(User.id.in_(ids)).all()
    return {u.id: u for u in rows}

def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()

def list_users(db: Session):
    return db.query(User).order_by(User.id).all()

def user_ref(u: Optional[User]):
    if u is None:
        return None
    return {"id": u.id, "name": u.name, "email": u.email}

def user_to_dict(u: User):
    return {
        "id": u.id, "name": u.name, "email": u.email, "role": u.role.value,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }

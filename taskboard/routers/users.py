from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from taskboard.db.session import get_db
from taskboard.repositories.user_repo import list_users as all_users, user_to_dict
from taskboard.routers.auth import require_admin
from taskboard.schemas.user import UserUpdate
from taskboard.services import user_service

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])

@router.get("")
def list_users(db: Session = Depends(get_db)):
    return [user_to_dict(u) for u in all_users(db)]

@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_to_dict(user_service.get_user(db, user_id))

@router.put("/update/{user_id}")
def update_user(user_id: int, changes: UserUpdate, db: Session = Depends(get_db)):
    return user_to_dict(user_service.update_user(db, user_id, changes))

@router.delete("/delete/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return {"message": "User removed successfully"}

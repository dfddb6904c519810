import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    UserStillReferenced,
)
from taskboard.db.session import unit_of_work
from taskboard.models import GlobalRole, Project, ProjectMember, User
from taskboard.repositories import project_repo, task_repo, user_repo
from taskboard.schemas.auth import SignupReq
from taskboard.schemas.user import UserUpdate
from taskboard.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def signup(db: Session, req: SignupReq) -> User:
    email = req.email.strip().lower()
    if user_repo.find_by_email(db, email):
        raise ConflictError("Email already registered")
    user = User(name=req.name.strip(), email=email, password_hash=hash_password(req.password), role=req.role)
    try:
        with unit_of_work(db):
            db.add(user)
    except IntegrityError:
        # lost a race against another signup with the same email
        raise ConflictError("Email already registered")
    logger.info("user %s signed up as %s", user.id, user.role.value)
    return user


def login(db: Session, email: str, password: str) -> User:
    user = user_repo.find_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def get_user(db: Session, user_id: int) -> User:
    user = user_repo.find_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _check_role_change(db: Session, user: User, new_role: GlobalRole) -> None:
    """A global role change must not break ownership or membership role invariants."""
    if user.role == GlobalRole.admin and new_role != GlobalRole.admin:
        if db.query(Project.id).filter(Project.owner_id == user.id).first():
            raise UserStillReferenced("Cannot change role: User owns projects.")
    if db.query(ProjectMember.id).filter(ProjectMember.user_id == user.id).first():
        raise UserStillReferenced("Cannot change role: User is a member of projects.")


def update_user(db: Session, user_id: int, changes: UserUpdate) -> User:
    user = get_user(db, user_id)
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in fields:
        email = fields["email"].strip().lower()
        other = user_repo.find_by_email(db, email)
        if other is not None and other.id != user.id:
            raise ConflictError("Email already registered")
        fields["email"] = email
    if "role" in fields and fields["role"] != user.role:
        _check_role_change(db, user, fields["role"])

    try:
        with unit_of_work(db):
            if "name" in fields:
                user.name = fields["name"].strip()
            if "email" in fields:
                user.email = fields["email"]
            if "role" in fields:
                user.role = fields["role"]
            if "password" in fields:
                user.password_hash = hash_password(fields["password"])
    except IntegrityError:
        raise ConflictError("Email already registered")
    logger.info("user %s updated (%s)", user.id, ", ".join(sorted(fields)) or "no changes")
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    if project_repo.is_referenced(db, user_id):
        raise UserStillReferenced("Cannot delete user: User is associated with projects.")
    if task_repo.is_assigned(db, user_id):
        raise UserStillReferenced("Cannot delete user: User is assigned to tasks.")
    with unit_of_work(db):
        db.delete(user)
    logger.info("user %s deleted", user_id)

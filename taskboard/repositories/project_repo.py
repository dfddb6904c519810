from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from taskboard.models import Project, ProjectMember, ProjectStatus
from taskboard.repositories.user_repo import user_ref

def get_project(db: Session, project_id: int) -> Optional[Project]:
    return (
        db.query(Project)
        .options(selectinload(Project.members))
        .filter(Project.id == project_id)
        .first()
    )

def list_projects(
    db: Session,
    *,
    visible_to: Optional[int] = None,
    status: Optional[ProjectStatus] = None,
    owner: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
):
    """Return ``(rows, total)``; ``visible_to`` limits rows to projects that user owns or belongs to."""
    q = db.query(Project)
    if status is not None:
        q = q.filter(Project.status == status)
    if owner is not None:
        q = q.filter(Project.owner_id == owner)
    if search:
        # % and _ in the search term match literally
        q = q.filter(Project.name.icontains(search, autoescape=True))
    if visible_to is not None:
        member_of = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == visible_to)
        q = q.filter(or_(Project.owner_id == visible_to, Project.id.in_(member_of)))
    total = q.count()
    skip = (max(page, 1) - 1) * limit
    rows = q.order_by(Project.id).offset(skip).limit(limit).all()
    return rows, total

def is_referenced(db: Session, user_id: int) -> bool:
    owned = db.query(Project.id).filter(Project.owner_id == user_id).first()
    member = db.query(ProjectMember.id).filter(ProjectMember.user_id == user_id).first()
    return owned is not None or member is not None

def project_to_dict(p: Project):
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description or "",
        "status": p.status.value,
        "owner": user_ref(p.owner),
        "members": [{"user": user_ref(m.user), "role": m.role.value} for m in (p.members or [])],
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from taskboard.db.session import get_db
from taskboard.models import GlobalRole, ProjectStatus, User
from taskboard.repositories import project_repo
from taskboard.repositories.project_repo import project_to_dict
from taskboard.routers.auth import require_user
from taskboard.schemas.project import AssignMembersIn, ProjectIn
from taskboard.services import project_service
from taskboard.services.authorization import Decision, Operation, authorize

router = APIRouter(prefix="/projects", tags=["projects"])

def manage_access(user: User = Depends(require_user), db: Session = Depends(get_db)) -> Decision:
    """Project management depends on the actor alone, so it is decided before any project is loaded."""
    return authorize(db, user, Operation.manage_project)

def managed_project(project_id: int, decision: Decision = Depends(manage_access),
                    db: Session = Depends(get_db)) -> Decision:
    # non-admins were already refused, so they get 403 even for unknown ids
    decision.project = project_service.load_project(db, project_id)
    return decision

@router.post("", status_code=201)
def create_project(payload: ProjectIn, decision: Decision = Depends(manage_access), db: Session = Depends(get_db)):
    pr = project_service.create_project(db, payload)
    return project_to_dict(pr)

@router.get("")
def list_projects(
    status: Optional[ProjectStatus] = None,
    owner: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    # non-admins only see projects they own or belong to
    visible_to = None if user.role == GlobalRole.admin else user.id
    rows, total = project_repo.list_projects(
        db, visible_to=visible_to, status=status, owner=owner, search=search, page=page, limit=limit,
    )
    return {"data": [project_to_dict(p) for p in rows], "total": total, "page": page, "limit": limit}

@router.get("/{project_id}")
def get_project(project_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    decision = authorize(db, user, Operation.view_project, project_id=project_id)
    return project_to_dict(decision.project)

@router.put("/{project_id}")
def update_project(payload: ProjectIn, decision: Decision = Depends(managed_project),
                   db: Session = Depends(get_db)):
    return project_to_dict(project_service.update_project(db, decision.project, payload))

@router.delete("/{project_id}")
def delete_project(decision: Decision = Depends(managed_project), db: Session = Depends(get_db)):
    project_service.delete_project(db, decision.project)
    return {"message": "Project and tasks deleted"}

@router.post("/{project_id}/assign")
def assign_members(payload: AssignMembersIn, decision: Decision = Depends(managed_project),
                   db: Session = Depends(get_db)):
    return project_to_dict(project_service.assign_members(db, decision.project, payload.members))

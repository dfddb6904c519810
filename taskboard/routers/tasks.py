from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from taskboard.db.session import get_db
from taskboard.models import TaskPriority, TaskStatus, User
from taskboard.repositories.task_repo import task_to_dict
from taskboard.routers.auth import require_user
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services import task_service
from taskboard.services.authorization import Decision, Operation, authorize

router = APIRouter(prefix="/tasks", tags=["tasks"])

def project_access(operation: Operation):
    def dependency(project_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)) -> Decision:
        return authorize(db, user, operation, project_id=project_id)
    return dependency

def task_access(operation: Operation):
    def dependency(task_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)) -> Decision:
        return authorize(db, user, operation, task_id=task_id)
    return dependency

@router.get("/projects/{project_id}/tasks")
def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assignee: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    decision: Decision = Depends(project_access(Operation.list_tasks)),
    db: Session = Depends(get_db),
):
    rows, total = task_service.list_tasks(
        db, decision, status=status, priority=priority, assignee=assignee, page=page, limit=limit,
    )
    return {"data": [task_to_dict(t) for t in rows], "total": total, "page": page, "limit": limit}

@router.post("/projects/{project_id}/tasks", status_code=201)
def create_task(payload: TaskCreate, decision: Decision = Depends(project_access(Operation.create_task)),
                db: Session = Depends(get_db)):
    return task_to_dict(task_service.create_task(db, decision, payload))

@router.get("/{task_id}")
def get_task(decision: Decision = Depends(task_access(Operation.view_task))):
    return task_to_dict(decision.task)

@router.put("/{task_id}")
def update_task(payload: TaskUpdate, decision: Decision = Depends(task_access(Operation.update_task)),
                db: Session = Depends(get_db)):
    return task_to_dict(task_service.update_task(db, decision, payload))

@router.delete("/{task_id}")
def delete_task(decision: Decision = Depends(task_access(Operation.delete_task)), db: Session = Depends(get_db)):
    task_service.delete_task(db, decision)
    return {"message": "Task deleted"}

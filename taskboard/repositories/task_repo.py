from typing import Optional
from sqlalchemy.orm import Session
from taskboard.models import Task, TaskPriority, TaskStatus
from taskboard.repositories.user_repo import user_ref

def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.query(Task).filter(Task.id == task_id).first()

def add_tasks(db: Session, tasks):
    db.add_all(tasks)
    db.flush()
    return tasks

def list_tasks(
    db: Session,
    project_id: int,
    *,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assignee: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
):
    q = db.query(Task).filter(Task.project_id == project_id)
    if status is not None:
        q = q.filter(Task.status == status)
    if priority is not None:
        q = q.filter(Task.priority == priority)
    if assignee is not None:
        q = q.filter(Task.assignee_id == assignee)
    total = q.count()
    skip = (max(page, 1) - 1) * limit
    rows = q.order_by(Task.id).offset(skip).limit(limit).all()
    return rows, total

def count_for_project(db: Session, project_id: int) -> int:
    return db.query(Task).filter(Task.project_id == project_id).count()

def delete_for_project(db: Session, project_id: int) -> int:
    return db.query(Task).filter(Task.project_id == project_id).delete(synchronize_session=False)

def is_assigned(db: Session, user_id: int) -> bool:
    return db.query(Task.id).filter(Task.assignee_id == user_id).first() is not None

def task_to_dict(t: Task):
    return {
        "id": t.id,
        "project": t.project_id,
        "title": t.title,
        "description": t.description or "",
        "status": t.status.value,
        "priority": t.priority.value,
        "due_date": t.due_date.isoformat() if t.due_date else None,
        "assignee": user_ref(t.assignee),
        "created_at": t.created_at.isoformat() if t.created_at else None,
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }

import logging
from typing import Optional

from sqlalchemy.orm import Session

from taskboard.core.errors import InvalidAssignee
from taskboard.db.session import unit_of_work
from taskboard.models import Project, Task
from taskboard.repositories import task_repo, user_repo
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services.authorization import Decision, Operation, decide, enforce
from taskboard.services.membership import relationship

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "status", "priority", "due_date")


def ensure_assignable(db: Session, project: Project, user_id: int) -> None:
    """Raise InvalidAssignee unless ``user_id`` exists and is currently a member (or the owner)."""
    if user_repo.find_by_id(db, user_id) is None:
        raise InvalidAssignee("Invalid assignee")
    if not relationship(project, user_id).is_member:
        raise InvalidAssignee("Assignee must be project member")


def create_task(db: Session, decision: Decision, data: TaskCreate) -> Task:
    project = decision.project
    if data.assignee is not None:
        ensure_assignable(db, project, data.assignee)
    with unit_of_work(db):
        task = Task(
            project_id=project.id,
            title=data.title,
            description=data.description or "",
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            assignee_id=data.assignee,
        )
        db.add(task)
    logger.info("task %s created in project %s by user %s", task.id, project.id, decision.actor.id)
    return task


def list_tasks(db: Session, decision: Decision, *, status=None, priority=None,
               assignee: Optional[int] = None, page: int = 1, limit: int = 10):
    scope = decision.assignee_scope
    if scope is not None:
        # plain members only ever see their own tasks, whatever filter they sent
        assignee = scope
    return task_repo.list_tasks(
        db, decision.project.id,
        status=status, priority=priority, assignee=assignee, page=page, limit=limit,
    )


def update_task(db: Session, decision: Decision, changes: TaskUpdate) -> Task:
    """
    Apply a partial update to the task resolved by ``decision``.

    Changing the assignee re-runs the reassignment rule and the membership
    check; the other fields only need the update permission already granted.
    """
    task = decision.task
    project = decision.project
    fields = changes.model_dump(exclude_unset=True)

    if "assignee" in fields and fields["assignee"] != task.assignee_id:
        target = fields["assignee"]
        enforce(decide(decision.actor, Operation.reassign_task, project, task, target))
        if target is not None:
            ensure_assignable(db, project, target)

    with unit_of_work(db):
        for name in EDITABLE_FIELDS:
            if name in fields:
                setattr(task, name, fields[name])
        if "assignee" in fields:
            task.assignee_id = fields["assignee"]
    logger.info("task %s updated by user %s", task.id, decision.actor.id)
    return task


def delete_task(db: Session, decision: Decision) -> None:
    task_id = decision.task.id
    with unit_of_work(db):
        db.delete(decision.task)
    logger.info("task %s deleted by user %s", task_id, decision.actor.id)

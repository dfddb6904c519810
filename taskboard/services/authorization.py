"""
Authorization decision engine.

Every route that touches a project or a task goes through ``authorize``. The
actor is first classified against the loaded project (and task, if any) by
``classify``; the class is then looked up in ``POLICY`` for the requested
operation. Classification order is fixed and the first match wins::

    admin > owner > project_manager > assignee > member > other

On allow the caller gets a ``Decision`` holding the project and task that
were read for the check, so mutators work on the same rows instead of
fetching them a second time.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from sqlalchemy.orm import Session

from taskboard.core.errors import AuthorizationError, NotFoundError
from taskboard.models import GlobalRole, Project, Task, User
from taskboard.repositories import project_repo, task_repo
from taskboard.services.membership import relationship

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    view_project = "view_project"
    manage_project = "manage_project"  # create / update / delete / assign members
    list_tasks = "list_tasks"
    create_task = "create_task"
    view_task = "view_task"
    update_task = "update_task"
    reassign_task = "reassign_task"
    delete_task = "delete_task"


class ActorClass(str, enum.Enum):
    admin = "admin"
    owner = "owner"
    project_manager = "project_manager"
    assignee = "assignee"
    member = "member"
    other = "other"


_A = ActorClass
_STAFF = frozenset({_A.admin, _A.owner, _A.project_manager})

POLICY: Dict[Operation, FrozenSet[ActorClass]] = {
    Operation.view_project: _STAFF | {_A.member},
    Operation.manage_project: frozenset({_A.admin}),
    Operation.list_tasks: _STAFF | {_A.member},
    Operation.create_task: _STAFF,
    Operation.view_task: _STAFF | {_A.assignee},
    Operation.update_task: _STAFF | {_A.assignee},
    Operation.reassign_task: _STAFF | {_A.assignee},
    Operation.delete_task: _STAFF,
}

DENIAL_MESSAGES: Dict[Operation, str] = {
    Operation.view_project: "Forbidden: not a member",
    Operation.manage_project: "Forbidden: Admin role required",
    Operation.list_tasks: "Forbidden: User is not a member of this project or an Admin.",
    Operation.create_task: "Forbidden: User is not an Admin, Project Manager, or Owner of this project.",
    Operation.view_task: "Forbidden: Insufficient permissions to view or edit this task.",
    Operation.update_task: "Forbidden: Insufficient permissions to view or edit this task.",
    Operation.reassign_task: "Members can only reassign tasks to themselves",
    Operation.delete_task: "Forbidden: Only Admins, Project Managers, or Owners can delete tasks.",
}


@dataclass
class Decision:
    allow: bool
    operation: Operation
    actor: User
    actor_class: ActorClass
    project: Optional[Project] = None
    task: Optional[Task] = None
    reason: Optional[str] = None

    @property
    def assignee_scope(self) -> Optional[int]:
        """User id task listings must be restricted to, or None for the full list."""
        if self.operation == Operation.list_tasks and self.actor_class == ActorClass.member:
            return self.actor.id
        return None

    @property
    def is_staff(self) -> bool:
        return self.actor_class in _STAFF


def classify(actor: User, project: Optional[Project] = None, task: Optional[Task] = None) -> ActorClass:
    if actor.role == GlobalRole.admin:
        return ActorClass.admin
    rel = relationship(project, actor.id)
    if rel.is_owner:
        return ActorClass.owner
    if rel.is_project_manager:
        return ActorClass.project_manager
    if task is not None and task.assignee_id == actor.id:
        return ActorClass.assignee
    if rel.is_member:
        return ActorClass.member
    return ActorClass.other


def decide(
    actor: User,
    operation: Operation,
    project: Optional[Project] = None,
    task: Optional[Task] = None,
    target_user_id: Optional[int] = None,
) -> Decision:
    """
    Pure decision for ``operation``.

    For ``reassign_task``, ``target_user_id`` is the requested new assignee
    (None when the assignee is being cleared). An assignee may only move the
    task onto themselves.
    """
    actor_class = classify(actor, project, task)
    allow = actor_class in POLICY[operation]
    if allow and operation == Operation.reassign_task and actor_class == ActorClass.assignee:
        allow = target_user_id is not None and target_user_id == actor.id
    return Decision(
        allow=allow,
        operation=operation,
        actor=actor,
        actor_class=actor_class,
        project=project,
        task=task,
        reason=None if allow else DENIAL_MESSAGES[operation],
    )


def enforce(decision: Decision) -> Decision:
    if not decision.allow:
        logger.info(
            "denied %s for user %s (%s)",
            decision.operation.value, decision.actor.id, decision.actor_class.value,
        )
        raise AuthorizationError(decision.reason)
    return decision


def authorize(
    db: Session,
    actor: User,
    operation: Operation,
    *,
    project_id: Optional[int] = None,
    task_id: Optional[int] = None,
    target_user_id: Optional[int] = None,
) -> Decision:
    """Load the referenced task/project, decide, and raise AuthorizationError on denial."""
    task = None
    project = None
    if task_id is not None:
        task = task_repo.get_task(db, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        project_id = task.project_id
    if project_id is not None:
        project = project_repo.get_project(db, project_id)
        if project is None:
            raise NotFoundError("Project not found")
    return enforce(decide(actor, operation, project, task, target_user_id))

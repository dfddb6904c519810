import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.sql import func

from taskboard.core.errors import ConflictError, InvalidAssignee, NotFoundError
from taskboard.db.session import unit_of_work
from taskboard.models import Project, ProjectMember, ProjectStatus, Task
from taskboard.repositories import project_repo, task_repo, user_repo
from taskboard.schemas.project import MemberIn, ProjectIn, SeedTaskIn
from taskboard.services.membership import relationship
from taskboard.services.role_validator import (
    MemberSpec,
    ValidatedMembers,
    merge_members,
    validate_members,
)

logger = logging.getLogger(__name__)


def _specs(members: Optional[Sequence[MemberIn]]) -> List[MemberSpec]:
    return [MemberSpec(user_id=m.user, role=m.role) for m in (members or [])]


def _current_specs(project: Project) -> List[MemberSpec]:
    return [MemberSpec(user_id=m.user_id, role=m.role) for m in (project.members or [])]


def _validate(db: Session, owner_id: int, members: Sequence[MemberSpec]) -> ValidatedMembers:
    return validate_members(owner_id, members, lambda ids: user_repo.find_by_ids(db, ids))


def _sync_members(project: Project, members: Sequence[MemberSpec]) -> None:
    """Make ``project.members`` equal ``members`` in order, reusing existing rows by user id."""
    current = {m.user_id: m for m in (project.members or [])}
    rows = []
    for spec in members:
        row = current.get(spec.user_id)
        if row is None:
            row = ProjectMember(user_id=spec.user_id, role=spec.role)
        else:
            row.role = spec.role
        rows.append(row)
    project.members = rows
    project.members.reorder()


def load_project(db: Session, project_id: int) -> Project:
    project = project_repo.get_project(db, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


def _seed_tasks(project: Project, seeds: Sequence[SeedTaskIn]) -> List[Task]:
    tasks = []
    for s in seeds:
        if s.assignee is not None and not relationship(project, s.assignee).is_member:
            raise InvalidAssignee(f"Assignee {s.assignee} is not a member of this project")
        tasks.append(Task(
            project_id=project.id,
            title=s.title,
            description=s.description or "",
            status=s.status,
            priority=s.priority,
            due_date=s.due_date,
            assignee_id=s.assignee,
        ))
    return tasks


def create_project(db: Session, data: ProjectIn) -> Project:
    """Create a project and its seed tasks; nothing is persisted unless both succeed."""
    members = merge_members([], _specs(data.members))
    _validate(db, data.owner, members)

    with unit_of_work(db):
        project = Project(
            name=data.name,
            description=data.description or "",
            status=data.status or ProjectStatus.active,
            owner_id=data.owner,
        )
        _sync_members(project, members)
        db.add(project)
        db.flush()
        if data.default_tasks:
            task_repo.add_tasks(db, _seed_tasks(project, data.default_tasks))

    logger.info("project %s created with %d member(s)", project.id, len(members))
    return project


def update_project(db: Session, project: Project, data: ProjectIn) -> Project:
    members = _current_specs(project) if data.members is None else merge_members([], _specs(data.members))
    _validate(db, data.owner, members)

    try:
        with unit_of_work(db):
            project.name = data.name
            if data.description is not None:
                project.description = data.description
            if data.status is not None:
                project.status = data.status
            project.owner_id = data.owner
            _sync_members(project, members)
            project.updated_at = func.now()
    except StaleDataError:
        raise ConflictError("Project was modified concurrently; retry the request")
    logger.info("project %s updated", project.id)
    return project


def assign_members(db: Session, project: Project, incoming: Sequence[MemberIn]) -> Project:
    """
    Merge ``incoming`` into the project's members and persist the result.

    The merged set is validated as a whole, so repeating the same call is a
    no-op and a second Project Manager is rejected no matter which call
    introduced it.
    """
    members = merge_members(_current_specs(project), _specs(incoming))
    _validate(db, project.owner_id, members)

    try:
        with unit_of_work(db):
            _sync_members(project, members)
            # bump the row so the version check covers member-only changes
            project.updated_at = func.now()
    except StaleDataError:
        raise ConflictError("Project was modified concurrently; retry the request")
    logger.info("project %s now has %d member(s)", project.id, len(members))
    return project


def delete_project(db: Session, project: Project) -> int:
    """Delete a project with all its tasks. Returns the number of tasks removed."""
    project_id = project.id
    try:
        with unit_of_work(db):
            removed = task_repo.delete_for_project(db, project_id)
            db.delete(project)
    except StaleDataError:
        raise ConflictError("Project was modified concurrently; retry the request")
    logger.info("project %s deleted with %d task(s)", project_id, removed)
    return removed

from taskboard.models.user import User, GlobalRole
from taskboard.models.project import Project, ProjectMember, ProjectRole, ProjectStatus
from taskboard.models.task import Task, TaskStatus, TaskPriority
from taskboard.models.revoked_token import RevokedToken

__all__ = [
    "User", "GlobalRole",
    "Project", "ProjectMember", "ProjectRole", "ProjectStatus",
    "Task", "TaskStatus", "TaskPriority",
    "RevokedToken",
]

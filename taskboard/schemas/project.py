from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from taskboard.models import ProjectRole, ProjectStatus, TaskPriority, TaskStatus

class MemberIn(BaseModel):
    user: int
    role: ProjectRole

class SeedTaskIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    assignee: Optional[int] = None

class ProjectIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    owner: int
    members: Optional[List[MemberIn]] = None
    default_tasks: List[SeedTaskIn] = Field(default_factory=list, alias="defaultTasks")

class AssignMembersIn(BaseModel):
    members: List[MemberIn] = Field(min_length=1)

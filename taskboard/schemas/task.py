from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from taskboard.models import TaskPriority, TaskStatus

class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    assignee: Optional[int] = None

# fields that may be sent as null to clear them
CLEARABLE_FIELDS = ("due_date", "assignee")

class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    assignee: Optional[int] = None

    @model_validator(mode="after")
    def _no_null_required_fields(self):
        nulled = sorted(
            name for name in self.model_fields_set
            if name not in CLEARABLE_FIELDS and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self

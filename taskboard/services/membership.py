from dataclasses import dataclass
from typing import Optional

from taskboard.models import ProjectRole


@dataclass(frozen=True)
class Relationship:
    is_owner: bool = False
    is_project_manager: bool = False
    is_member: bool = False


NONE = Relationship()


def relationship(project, user_id: Optional[int]) -> Relationship:
    """
    How ``user_id`` relates to an already loaded ``project``.

    Owners count as members. ``project.members`` may be missing or empty.
    """
    if project is None or user_id is None:
        return NONE
    is_owner = project.owner_id == user_id
    is_member = is_owner
    is_pm = False
    for m in getattr(project, "members", None) or []:
        if m.user_id != user_id:
            continue
        is_member = True
        if m.role == ProjectRole.project_manager:
            is_pm = True
    return Relationship(is_owner=is_owner, is_project_manager=is_pm, is_member=is_member)

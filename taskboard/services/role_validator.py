"""
Membership invariants shared by project create, update and member assignment.

One policy everywhere: a project may have zero or one Project Manager, the
owner must be an Admin, and each membership role must be the project-scoped
twin of the member's global role.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

from taskboard.core.errors import (
    InvalidOwnerRole,
    MultipleProjectManagers,
    RoleMismatch,
    UnknownUser,
)
from taskboard.models import GlobalRole, ProjectRole, User

# global role a user must hold to take a given project role
COMPATIBLE_GLOBAL_ROLE: Dict[ProjectRole, GlobalRole] = {
    ProjectRole.project_manager: GlobalRole.project_manager,
    ProjectRole.member: GlobalRole.member,
}

UserLookup = Callable[[Iterable[int]], Dict[int, User]]


@dataclass(frozen=True)
class MemberSpec:
    user_id: int
    role: ProjectRole


@dataclass
class ValidatedMembers:
    owner: User
    members: List[MemberSpec]
    users: Dict[int, User]


def merge_members(existing: Sequence[MemberSpec], incoming: Sequence[MemberSpec]) -> List[MemberSpec]:
    """Replace by user id, append new users; order of first appearance is kept."""
    merged: List[MemberSpec] = list(existing)
    index = {m.user_id: i for i, m in enumerate(merged)}
    for m in incoming:
        if m.user_id in index:
            merged[index[m.user_id]] = m
        else:
            index[m.user_id] = len(merged)
            merged.append(m)
    return merged


def validate_members(owner_id: int, members: Sequence[MemberSpec], lookup: UserLookup) -> ValidatedMembers:
    wanted = {owner_id, *(m.user_id for m in members)}
    users = lookup(wanted)
    missing = wanted - set(users)
    if missing:
        raise UnknownUser(missing)

    owner = users[owner_id]
    if owner.role != GlobalRole.admin:
        raise InvalidOwnerRole()

    for m in members:
        actual = users[m.user_id].role
        if COMPATIBLE_GLOBAL_ROLE.get(m.role) != actual:
            raise RoleMismatch(m.user_id, getattr(m.role, "value", m.role), actual.value)

    managers = sum(1 for m in members if m.role == ProjectRole.project_manager)
    if managers > 1:
        raise MultipleProjectManagers()

    return ValidatedMembers(owner=owner, members=list(members), users=users)

"""
Error taxonomy.

Every error carries the HTTP status it maps to and a user-facing message.
They are raised where the problem is detected and rendered by the handlers
registered in ``taskboard.app``.
"""
from typing import Iterable, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Invalid token"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    status_code = 500


# ---- invariant violations (400) ----

class InvariantViolation(AppError):
    status_code = 400
    default_message = "Invariant violation"


class UnknownUser(InvariantViolation):
    def __init__(self, user_ids: Iterable[int]):
        self.user_ids = sorted(user_ids)
        super().__init__(
            "Invalid user ID(s) provided: " + ", ".join(str(i) for i in self.user_ids)
        )


class InvalidOwnerRole(InvariantViolation):
    default_message = "Project owner must have an Admin role."


class RoleMismatch(InvariantViolation):
    def __init__(self, user_id: int, declared_role: str, actual_role: str):
        self.user_id = user_id
        self.declared_role = declared_role
        self.actual_role = actual_role
        super().__init__(
            f"User {user_id} with role {actual_role} cannot be a {declared_role}."
        )


class MultipleProjectManagers(InvariantViolation):
    default_message = "Only one Project Manager is allowed per project."


class InvalidAssignee(InvariantViolation):
    default_message = "Assignee must be project member"


class UserStillReferenced(InvariantViolation):
    pass

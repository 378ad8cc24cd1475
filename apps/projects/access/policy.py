"""
The access-control evaluator.

``decide`` maps (principal, context, operation) to a ``Decision``. Each
operation owns an ordered tuple of predicates; the first predicate that
holds allows the operation. A denial never raises: callers translate the
decision's reason into an HTTP refusal.

When the principal is refused and cannot read the resource either, the
reason is ``not_found`` so the resource's existence is not disclosed. A
principal who can read the resource but not act on it gets ``forbidden``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from .context import AccessContext
from .principal import Principal

ROLE_MANAGER = "manager"

REASON_NOT_AUTHENTICATED = "not_authenticated"
REASON_NOT_FOUND = "not_found"
REASON_FORBIDDEN = "forbidden"


class Operation(str, Enum):
    CREATE_PROJECT = "create_project"
    READ_PROJECT = "read_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    ADD_TEAM_MEMBER = "add_team_member"
    REMOVE_TEAM_MEMBER = "remove_team_member"
    CREATE_TASK = "create_task"
    READ_TASK = "read_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    ADD_ATTACHMENT = "add_attachment"
    REMOVE_ATTACHMENT = "remove_attachment"
    ADD_COMMENT = "add_comment"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self):
        return self.allowed


Predicate = Callable[[Principal, AccessContext], bool]


def has_manager_role(principal: Principal, context: AccessContext) -> bool:
    return principal.role == ROLE_MANAGER


def is_project_manager(principal: Principal, context: AccessContext) -> bool:
    return principal.id == context.project.manager_id


def is_managing_manager(principal: Principal, context: AccessContext) -> bool:
    return has_manager_role(principal, context) and is_project_manager(principal, context)


def is_team_lead(principal: Principal, context: AccessContext) -> bool:
    return (
        context.project.team_lead_id is not None
        and principal.id == context.project.team_lead_id
    )


def is_team_member(principal: Principal, context: AccessContext) -> bool:
    return principal.id in context.project.members


def is_assignee(principal: Principal, context: AccessContext) -> bool:
    return principal.id == context.task.assigned_to_id


def is_creator(principal: Principal, context: AccessContext) -> bool:
    return principal.id == context.task.created_by_id


READ_TASK_RULE = (is_project_manager, is_assignee, is_creator, is_team_member, is_team_lead)
UPDATE_TASK_RULE = (is_assignee, is_creator, is_project_manager, is_team_lead)

RULES: Dict[Operation, Tuple[Predicate, ...]] = {
    Operation.CREATE_PROJECT: (has_manager_role,),
    Operation.READ_PROJECT: (is_managing_manager, is_team_member, is_team_lead),
    Operation.UPDATE_PROJECT: (is_project_manager,),
    Operation.DELETE_PROJECT: (is_project_manager,),
    Operation.ADD_TEAM_MEMBER: (is_project_manager,),
    Operation.REMOVE_TEAM_MEMBER: (is_project_manager,),
    Operation.CREATE_TASK: (is_project_manager, is_team_lead),
    Operation.READ_TASK: READ_TASK_RULE,
    Operation.UPDATE_TASK: UPDATE_TASK_RULE,
    Operation.DELETE_TASK: (is_creator, is_project_manager, is_team_lead),
    Operation.ADD_ATTACHMENT: UPDATE_TASK_RULE,
    Operation.REMOVE_ATTACHMENT: UPDATE_TASK_RULE,
    Operation.ADD_COMMENT: READ_TASK_RULE,
}

PROJECT_OPERATIONS = frozenset(
    {
        Operation.READ_PROJECT,
        Operation.UPDATE_PROJECT,
        Operation.DELETE_PROJECT,
        Operation.ADD_TEAM_MEMBER,
        Operation.REMOVE_TEAM_MEMBER,
        Operation.CREATE_TASK,
    }
)

TASK_OPERATIONS = frozenset(
    {
        Operation.READ_TASK,
        Operation.UPDATE_TASK,
        Operation.DELETE_TASK,
        Operation.ADD_ATTACHMENT,
        Operation.REMOVE_ATTACHMENT,
        Operation.ADD_COMMENT,
    }
)


def _holds(operation: Operation, principal: Principal, context: AccessContext) -> bool:
    return any(predicate(principal, context) for predicate in RULES[operation])


def _visibility_operation(operation: Operation) -> Optional[Operation]:
    if operation in PROJECT_OPERATIONS:
        return Operation.READ_PROJECT
    if operation in TASK_OPERATIONS:
        return Operation.READ_TASK
    return None


def decide(
    principal: Optional[Principal], context: AccessContext, operation: Operation
) -> Decision:
    """Decide whether ``principal`` may perform ``operation`` on ``context``."""
    if principal is None:
        return Decision.deny(REASON_NOT_AUTHENTICATED)

    if operation in PROJECT_OPERATIONS and context.project is None:
        return Decision.deny(REASON_NOT_FOUND)
    if operation in TASK_OPERATIONS and (context.task is None or context.project is None):
        return Decision.deny(REASON_NOT_FOUND)

    if _holds(operation, principal, context):
        return Decision.allow()

    visibility = _visibility_operation(operation)
    if visibility is None or _holds(visibility, principal, context):
        return Decision.deny(REASON_FORBIDDEN)
    return Decision.deny(REASON_NOT_FOUND)


def can(principal: Optional[Principal], context: AccessContext, operation: Operation) -> bool:
    return decide(principal, context, operation).allowed

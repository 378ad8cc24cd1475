"""
Route guards for project and task resources.

The guard resolves the operation for the current view action, has the view
load the target resource, and asks the access-control evaluator. Views never
evaluate access predicates themselves.
"""
import logging

from rest_framework import permissions
from rest_framework.exceptions import NotFound

from apps.logging.services import LoggerService, get_client_ip
from apps.projects.access import AccessContext, Principal, decide
from apps.projects.access.policy import REASON_NOT_FOUND

logger = logging.getLogger(__name__)


class AccessPolicyPermission(permissions.BasePermission):
    """
    Enforces ``decide`` for the operation mapped to ``view.action``.

    The view declares ``access_operations`` (action name -> Operation) and
    implements ``load_access_resource(operation)`` returning a
    ``LoadedResource`` or ``None`` for operations without a target. The
    loaded resource is stored on ``view.loaded_resource`` for reuse.
    Actions absent from ``access_operations`` are left to the view (list
    endpoints filter their queryset with the query form of the read rule).
    """

    message = "You do not have permission to perform this action."
    code = "forbidden"

    def has_permission(self, request, view):
        operation = view.access_operations.get(view.action)
        if operation is None:
            return True
        return self.check_operation(request, view, operation)

    def check_operation(self, request, view, operation):
        principal = Principal.from_user(request.user)
        if principal is None:
            return False

        loaded = view.load_access_resource(operation)
        view.loaded_resource = loaded
        context = loaded.context if loaded is not None else AccessContext.empty()

        decision = decide(principal, context, operation)
        if decision.allowed:
            return True

        resource = None
        if loaded is not None:
            resource = loaded.task or loaded.project

        logger.info(
            f"Access denied: user={principal.id} role={principal.role} "
            f"operation={operation.value} reason={decision.reason}"
        )
        LoggerService.log_security_event(
            action="access_denied",
            user=request.user,
            ip_address=get_client_ip(request),
            details={"operation": operation.value, "reason": decision.reason},
            resource=resource,
        )

        if decision.reason == REASON_NOT_FOUND:
            raise NotFound(f"{self._resource_label(loaded)} not found.")
        return False

    @staticmethod
    def _resource_label(loaded):
        if loaded is not None and loaded.task is not None:
            return "Task"
        return "Project"

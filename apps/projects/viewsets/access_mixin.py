from rest_framework.permissions import IsAuthenticated

from apps.logging.services import get_client_ip
from apps.projects.access import Principal
from apps.projects.permissions import AccessPolicyPermission


class AccessControlledViewMixin:
    """
    Wires a viewset to ``AccessPolicyPermission``.

    Subclasses map actions to operations in ``access_operations`` and load
    the target in ``load_access_resource``; handlers read the already-loaded
    instances from ``self.loaded_resource``.
    """

    permission_classes = [IsAuthenticated, AccessPolicyPermission]
    access_operations = {}
    loaded_resource = None
    object_fallback_action = "update"

    def load_access_resource(self, operation):
        raise NotImplementedError

    def get_loaded_resource(self):
        """
        Return the guarded resource, running the guard for
        ``object_fallback_action`` when the current action is unmapped.
        DRF's OPTIONS metadata calls ``get_object`` to describe PUT.
        """
        if self.loaded_resource is None:
            operation = self.access_operations[self.object_fallback_action]
            guard = AccessPolicyPermission()
            if not guard.check_operation(self.request, self, operation):
                self.permission_denied(self.request, message=guard.message, code=guard.code)
        return self.loaded_resource

    def get_principal(self):
        return Principal.from_user(self.request.user)

    def get_client_ip(self):
        return get_client_ip(self.request)

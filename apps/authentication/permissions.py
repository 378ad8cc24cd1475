from rest_framework import permissions


class IsManager(permissions.BasePermission):
    """Allows access only to users holding the manager role."""

    message = "Only managers can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_manager)


class IsSelfOrManager(permissions.BasePermission):
    """Allows a user to access their own record, managers to access any."""

    message = "You can only access your own account."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        return request.user.is_manager or obj.pk == request.user.pk

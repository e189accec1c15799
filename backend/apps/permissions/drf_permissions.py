from rest_framework.permissions import SAFE_METHODS, BasePermission

from shared.tenancy import resolve_company

from .permissions import has_permission

ACTION_BY_METHOD = {
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'update',
    'DELETE': 'delete',
}


class IsAdmin(BasePermission):
    """Administrators only (role ``admin`` or superuser)."""
    message = 'Administrator access is required.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and getattr(request.user, 'is_admin', False))


class IsAdminOrReadOnly(IsAdmin):
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)


class HasAccessRight(BasePermission):
    """
    Integrates DRF views with per-user access rights.

    Reads are open to any authenticated user; writes require an administrator
    or an access right on the view's ``access_resource`` granting the action
    derived from the HTTP method.

    Example:
        class ClientViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, HasAccessRight]
            access_resource = 'masterData'
    """
    message = 'You do not have permission to perform this action.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)

        resource = getattr(view, 'access_resource', None)
        if not resource:
            # Deny writes on views that do not declare what they protect.
            return False

        action = ACTION_BY_METHOD.get(request.method)
        if action is None:
            return False
        return has_permission(request.user, resource, action, resolve_company(request))

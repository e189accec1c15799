"""
Core permission checking logic.
"""
from django.db.models import Q

from .models import AccessRight, PermissionAction

# Broader grants that imply an action
IMPLIED_BY = {
    PermissionAction.READ.value: {PermissionAction.WRITE.value},
    PermissionAction.CREATE.value: {PermissionAction.WRITE.value},
    PermissionAction.UPDATE.value: {PermissionAction.WRITE.value},
    PermissionAction.DELETE.value: {PermissionAction.WRITE.value},
}


def grants(permissions, action: str) -> bool:
    """True when a list of granted permission codes covers ``action``."""
    granted = {str(code) for code in permissions or []}
    action = str(action)
    if action in granted or PermissionAction.ADMIN.value in granted:
        return True
    return bool(granted & IMPLIED_BY.get(action, set()))


def has_permission(user, resource: str, action: str, company=None) -> bool:
    """
    Checks whether a user may perform ``action`` on ``resource``.

    This is the central function for access-right checks across the system.

    Args:
        user: The user instance to check.
        resource: Protected resource name (e.g., 'masterData').
        action: One of the permission actions (e.g., 'create').
        company: Active company; grants bound to another company are
            ignored, company-less grants always apply. Without a company
            only company-less grants count.

    Returns:
        True if the user has the permission, False otherwise.
    """
    # Basic auth guard
    if not user or not user.is_authenticated or not user.is_active:
        return False

    # Administrators have every permission implicitly
    if getattr(user, 'is_admin', False):
        return True

    rights = AccessRight.objects.filter(user=user, resource=resource, is_active=True).filter(
        Q(company=company) | Q(company__isnull=True)
    )

    return any(grants(right.permissions, action) for right in rights)

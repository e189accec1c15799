from django.conf import settings
from django.db import models

from shared.models import CompanyAwareModel


class PermissionAction(models.TextChoices):
    READ = 'read', 'Read'
    WRITE = 'write', 'Write'
    CREATE = 'create', 'Create'
    UPDATE = 'update', 'Update'
    DELETE = 'delete', 'Delete'
    ADMIN = 'admin', 'Admin'


class ProtectedResource(models.TextChoices):
    REFERENCES = 'references', 'References'
    MASTER_DATA = 'masterData', 'Master data'
    USERS = 'users', 'Users'
    ROLES = 'roles', 'Roles'
    REPORTS = 'reports', 'Reports'


class Role(CompanyAwareModel):
    """
    Named permission set. Deleting a role only deactivates it.
    """
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    permissions = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'roles'
        ordering = ['name']

    def __str__(self):
        if self.company_id:
            return f"{self.name} ({self.company.code})"
        return self.name


class AccessRight(CompanyAwareModel):
    """
    Per-user, per-resource permission grant.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='access_rights'
    )
    resource = models.CharField(max_length=50, choices=ProtectedResource.choices)
    permissions = models.JSONField(default=list)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'access_rights'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'resource', 'is_active'], name='access_right_lookup_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.resource}: {', '.join(self.permissions)}"


from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    ADMIN = 'admin', 'Administrator'
    USER = 'user', 'User'


class User(AbstractUser):
    """
    Application user. ``username`` mirrors the email; ``role`` decides
    whether the account administers the application.
    """
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=10, choices=UserRole.choices, default=UserRole.USER)
    department = models.CharField(max_length=255, blank=True)
    position = models.CharField(max_length=255, blank=True)
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users'
    )
    email_verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['name', 'email']

    def __str__(self):
        return self.name or self.email

    @property
    def is_admin(self) -> bool:
        return self.is_active and (self.role == UserRole.ADMIN or self.is_superuser)

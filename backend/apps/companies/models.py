from django.core.validators import RegexValidator
from django.db import models


class Company(models.Model):
    """
    Tenant boundary. References, master data, documents and access grants
    belong to a company; users have a home company.
    """
    code = models.CharField(
        max_length=20,
        unique=True,
        validators=[RegexValidator(r'^[A-Za-z0-9_-]+$', 'Use letters, digits, "-" or "_" only.')],
    )
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'companies'
        ordering = ['name']
        verbose_name_plural = 'Companies'

    def __str__(self):
        return f"{self.code} - {self.name}"

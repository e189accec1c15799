
from django.db import models

from .managers import CompanyManager


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CompanyAwareModel(TimeStampedModel):
    """
    Abstract base model for tenant-scoped records.

    The company is optional so that single-tenant installs keep working;
    querysets are narrowed with ``for_company`` whenever a request carries
    an active company.
    """
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        db_index=True,
        related_name='+',
        help_text="Company this record belongs to"
    )

    objects = CompanyManager()

    class Meta:
        abstract = True

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from shared.models import CompanyAwareModel


class ReferenceStatus(models.TextChoices):
    IN_PROGRESS = 'En cours', 'En cours'
    COMPLETED = 'Completed', 'Completed'


class ReferencePriority(models.TextChoices):
    HIGH = 'High', 'High'
    MEDIUM = 'Medium', 'Medium'
    LOW = 'Low', 'Low'


def keywords_search_text(keywords) -> str:
    return '\n'.join(str(keyword).lower() for keyword in keywords or [])


class Reference(CompanyAwareModel):
    """
    A delivered or ongoing project kept as a company reference.

    ``responsible`` holds the email of the person in charge; it is compared
    with the requesting user's email when deciding visibility.
    """
    title = models.CharField(max_length=255)
    description = models.TextField()
    client = models.ForeignKey('master_data.Client', on_delete=models.PROTECT, related_name='references')
    country = models.ForeignKey('master_data.Country', on_delete=models.PROTECT, related_name='references')
    location = models.CharField(max_length=255, blank=True)
    employees_involved = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    budget = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=ReferenceStatus.choices, db_index=True)
    priority = models.CharField(max_length=10, choices=ReferencePriority.choices, db_index=True)
    responsible = models.CharField(max_length=255, db_index=True)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    technologies = models.ManyToManyField('master_data.Technology', related_name='references')
    keywords = models.JSONField(default=list, blank=True)
    screenshots = models.JSONField(default=list, blank=True)
    completion_certificate = models.CharField(max_length=500, blank=True)
    other_documents = models.JSONField(default=list, blank=True)
    # lower-cased keywords, one per line, for substring search
    keywords_text = models.TextField(blank=True, default='', editable=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_references',
    )

    class Meta:
        db_table = 'project_references'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        self.keywords_text = keywords_search_text(self.keywords)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'keywords' in update_fields:
            kwargs['update_fields'] = {*update_fields, 'keywords_text'}
        super().save(*args, **kwargs)

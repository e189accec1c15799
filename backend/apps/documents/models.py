from django.conf import settings
from django.db import models

from shared.models import CompanyAwareModel


class DocumentCategory(models.TextChoices):
    SCREENSHOTS = 'screenshots', 'Screenshots'
    COMPLETION_CERTIFICATE = 'completionCertificate', 'Completion certificate'
    OTHER_DOCUMENTS = 'otherDocuments', 'Other documents'


class Document(CompanyAwareModel):
    """Metadata of an uploaded file; the bytes live under ``MEDIA_ROOT``."""
    doc_id = models.CharField(max_length=64, unique=True)
    original_name = models.CharField(max_length=255)
    file_name = models.CharField(max_length=255)
    file = models.FileField(max_length=500)
    size = models.PositiveBigIntegerField(default=0)
    content_type = models.CharField(max_length=255, default='application/octet-stream')
    # free text: unknown categories are accepted and stored with the "other" rules
    category = models.CharField(max_length=50, default=DocumentCategory.OTHER_DOCUMENTS, db_index=True)
    reference = models.ForeignKey(
        'references.Reference',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='documents',
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_documents',
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'documents'
        ordering = ['-uploaded_at']

    def __str__(self):
        return self.original_name

    @property
    def relative_path(self) -> str:
        return self.file.name

    @property
    def url(self) -> str:
        return f"{settings.MEDIA_URL}{self.file.name}"

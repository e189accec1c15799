"""
Upload pipeline for reference documents.

Files are checked against the rules of their category, written under
``MEDIA_ROOT/documents/<dir>/`` with a generated name and, when they belong
to a reference, recorded as ``Document`` rows.
"""
from __future__ import annotations

import logging
import os
import secrets
import string
import time
from typing import Iterable, List, Optional

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from django.db import DatabaseError, transaction
from rest_framework import serializers

from ..models import Document, DocumentCategory

logger = logging.getLogger(__name__)

OTHER_EXTENSIONS = ('.pdf', '.doc', '.docx', '.xlsx', '.xls', '.jpg', '.jpeg', '.png', '.gif')

CATEGORY_RULES = {
    DocumentCategory.SCREENSHOTS.value: (('.jpg', '.jpeg', '.png', '.gif'), 'documents/screenshots'),
    DocumentCategory.COMPLETION_CERTIFICATE.value: (('.pdf', '.doc', '.docx'), 'documents/certificates'),
    DocumentCategory.OTHER_DOCUMENTS.value: (OTHER_EXTENSIONS, 'documents/other'),
}
DEFAULT_RULE = (OTHER_EXTENSIONS, 'documents/other')

_BASE36 = string.digits + string.ascii_lowercase


def document_storage() -> FileSystemStorage:
    return FileSystemStorage(location=settings.MEDIA_ROOT, base_url=settings.MEDIA_URL)


def rule_for(category: str):
    """(allowed extensions, directory) for a category; unknown ones use the "other" rules."""
    return CATEGORY_RULES.get(category, DEFAULT_RULE)


def file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits)) or '0'


def generate_doc_id() -> str:
    """``<epoch-ms>_<random base36>``"""
    return f"{int(time.time() * 1000)}_{_base36(secrets.randbits(56))}"


def validate_uploads(files: Iterable, category: str, max_size: int) -> None:
    """Reject the whole batch when any file breaks the category rules."""
    allowed, _ = rule_for(category)
    for uploaded in files:
        extension = file_extension(uploaded.name)
        if extension not in allowed:
            raise serializers.ValidationError(
                {'error': f"File type {extension or '(none)'} not allowed for {category}. "
                          f"Allowed types: {', '.join(allowed)}"}
            )
        if uploaded.size > max_size:
            raise serializers.ValidationError(
                {'error': f"File {uploaded.name} exceeds the maximum upload size of {max_size} bytes"}
            )


def store_upload(uploaded, category: str, user, reference=None, company=None) -> dict:
    """Write one file to disk and describe it for the API response."""
    _, directory = rule_for(category)
    doc_id = generate_doc_id()
    file_name = f"{doc_id}{file_extension(uploaded.name)}"
    stored_name = document_storage().save(f"{directory}/{file_name}", uploaded)
    url = f"{settings.MEDIA_URL}{stored_name}"
    content_type = getattr(uploaded, 'content_type', None) or 'application/octet-stream'

    if reference is not None:
        _record_document(
            doc_id=doc_id,
            original_name=uploaded.name,
            file_name=os.path.basename(stored_name),
            file=stored_name,
            size=uploaded.size,
            content_type=content_type,
            category=category,
            reference=reference,
            uploaded_by=user,
            company=company if company is not None else reference.company,
        )

    logger.info("Stored upload %s (%s, %d bytes) for user %s", stored_name, category, uploaded.size, user.pk)
    return {
        'id': doc_id,
        'filename': uploaded.name,
        'filepath': url,
        'size': uploaded.size,
        'type': content_type,
        'category': category,
        'url': url,
    }


def _record_document(**fields) -> Optional[Document]:
    try:
        with transaction.atomic():
            return Document.objects.create(**fields)
    except DatabaseError:
        # the file is already on disk; the upload itself still succeeds
        logger.exception("Could not record document metadata for %s", fields.get('file'))
        return None


def handle_upload(files: List, category: Optional[str], user, reference=None, company=None) -> dict:
    category = category or DocumentCategory.OTHER_DOCUMENTS.value
    files = [uploaded for uploaded in files if getattr(uploaded, 'name', None)]
    if not files:
        raise serializers.ValidationError({'error': "No file uploaded"})

    validate_uploads(files, category, settings.DOCUMENT_MAX_UPLOAD_SIZE)
    stored = [store_upload(uploaded, category, user, reference, company) for uploaded in files]

    if len(stored) == 1:
        return {'success': True, **stored[0]}
    return {'success': True, 'files': stored, 'count': len(stored)}


def delete_document(document: Document) -> None:
    """Remove the stored file, then the record; a missing or locked file does not block deletion."""
    name = document.file.name
    try:
        document_storage().delete(name)
    except OSError:
        logger.warning("Could not remove stored file %s", name, exc_info=True)
    document.delete()
    logger.info("Deleted document %s", document.doc_id)

from django.contrib import admin

from .models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ["original_name", "category", "reference", "uploaded_by", "size", "uploaded_at"]
    list_filter = ["category", "company"]
    search_fields = ["original_name", "doc_id", "reference__title"]
    raw_id_fields = ["reference", "uploaded_by"]

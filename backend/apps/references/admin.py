from django.contrib import admin

from .models import Reference


@admin.register(Reference)
class ReferenceAdmin(admin.ModelAdmin):
    list_display = ["title", "client", "country", "status", "priority", "responsible", "start_date", "company"]
    list_filter = ["status", "priority", "company", "country"]
    search_fields = ["title", "description", "responsible", "client__name"]
    filter_horizontal = ["technologies"]
    raw_id_fields = ["created_by"]
    date_hierarchy = "start_date"

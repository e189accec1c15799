from django.contrib import admin

from .models import AccessRight, Role


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ["name", "company", "is_active", "updated_at"]
    list_filter = ["company", "is_active"]
    search_fields = ["name", "description"]


@admin.register(AccessRight)
class AccessRightAdmin(admin.ModelAdmin):
    list_display = ["user", "resource", "permissions", "company", "is_active"]
    list_filter = ["resource", "company", "is_active"]
    search_fields = ["user__email", "user__name", "resource"]
    raw_id_fields = ["user"]

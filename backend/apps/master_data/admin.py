from django.contrib import admin

from .models import Client, Country, Technology


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ["name", "industry", "country", "company", "is_active"]
    list_filter = ["is_active", "company"]
    search_fields = ["name", "industry", "country"]


@admin.register(Country)
class CountryAdmin(admin.ModelAdmin):
    list_display = ["name", "code", "region", "is_active"]
    list_filter = ["region", "is_active"]
    search_fields = ["name", "code"]


@admin.register(Technology)
class TechnologyAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "version", "is_active"]
    list_filter = ["category", "is_active"]
    search_fields = ["name", "category"]

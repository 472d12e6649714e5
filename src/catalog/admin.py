from django.contrib import admin

from .models import Part


@admin.register(Part)
class PartAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "supplier", "company", "price")
    list_filter = ("company", "supplier")
    search_fields = ("sku", "name")
    list_select_related = ("supplier", "company")

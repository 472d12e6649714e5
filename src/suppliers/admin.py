from django.contrib import admin

from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "contact_person", "phone", "email", "is_active")
    list_filter = ("company", "is_active")
    search_fields = ("name", "contact_person", "email")

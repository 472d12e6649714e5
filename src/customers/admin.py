from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "email", "phone")
    list_filter = ("company",)
    search_fields = ("name", "email", "phone")

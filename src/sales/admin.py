"""Admin configuration for the sales app."""
from django.contrib import admin

from sales.models import SalesOrder, SalesOrderItem


# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------

class SalesOrderItemInline(admin.TabularInline):
    """Read-only view of the order lines; edits go through the API."""

    model = SalesOrderItem
    extra = 0
    can_delete = False
    fields = (
        "part",
        "supplier",
        "quantity",
        "unit_price",
        "line_total",
        "commission_percentage",
        "commission_amount",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ---------------------------------------------------------------------------
# SalesOrder
# ---------------------------------------------------------------------------

@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = (
        "po_number",
        "customer",
        "company",
        "order_date",
        "status",
        "total_amount",
        "total_commission",
    )
    list_filter = ("status", "company", "order_date")
    search_fields = ("po_number", "customer__name")
    date_hierarchy = "order_date"
    readonly_fields = ("id", "total_amount", "total_commission", "created_at", "updated_at")
    inlines = [SalesOrderItemInline]

    def has_add_permission(self, request):
        return False

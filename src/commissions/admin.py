from django.contrib import admin

from .models import CommissionAllocation, CommissionPayment, CommissionPaymentItem


class CommissionPaymentItemInline(admin.TabularInline):
    model = CommissionPaymentItem
    extra = 0
    fields = ("amount", "description", "notes")
    readonly_fields = ("amount",)
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(CommissionPayment)
class CommissionPaymentAdmin(admin.ModelAdmin):
    list_display = ("supplier", "payment_date", "total_amount", "reference", "status", "company")
    list_filter = ("status", "company", "supplier")
    search_fields = ("reference", "supplier__name")
    date_hierarchy = "payment_date"
    readonly_fields = ("supplier", "total_amount", "status", "created_by", "created_at", "updated_at")
    inlines = [CommissionPaymentItemInline]

    def has_add_permission(self, request):
        return False


@admin.register(CommissionAllocation)
class CommissionAllocationAdmin(admin.ModelAdmin):
    list_display = ("payment_item", "sales_order_item", "allocated_amount", "allocation_date", "company")
    list_filter = ("company",)
    date_hierarchy = "allocation_date"
    list_select_related = ("payment_item", "sales_order_item")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

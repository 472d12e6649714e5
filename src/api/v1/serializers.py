"""Serializers for the commission ledger API v1.

Input serializers check shape and types only; business rules (tenant
ownership, bounds, duplicates) are enforced by the service layer.
"""
from decimal import Decimal

from rest_framework import serializers

from commissions.accrual import MAX_QUANTITY
from commissions.models import CommissionAllocation, CommissionPayment, CommissionPaymentItem
from sales.models import SalesOrder, SalesOrderItem
from suppliers.models import Supplier

MIN_AMOUNT = Decimal("0.01")


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------

class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            "id", "company", "name", "contact_person", "phone", "email", "address", "is_active",
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Sales orders
# ---------------------------------------------------------------------------

class SalesOrderItemSerializer(serializers.ModelSerializer):
    part_name = serializers.CharField(source="part.name", read_only=True)
    sku = serializers.CharField(source="part.sku", read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)

    class Meta:
        model = SalesOrderItem
        fields = [
            "id", "part", "part_name", "sku", "supplier", "supplier_name",
            "quantity", "unit_price", "line_total",
            "commission_percentage", "commission_amount",
        ]
        read_only_fields = fields


class SalesOrderSerializer(serializers.ModelSerializer):
    items = SalesOrderItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True)

    class Meta:
        model = SalesOrder
        fields = [
            "id", "customer", "customer_name", "po_number", "order_date", "status",
            "notes", "total_amount", "total_commission", "created_at", "updated_at", "items",
        ]
        read_only_fields = fields


class _SalesOrderItemInputSerializer(serializers.Serializer):
    part_id = serializers.UUIDField()
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    commission_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0.00"),
        max_value=Decimal("100.00"),
        required=False,
        allow_null=True,
    )


class SalesOrderWriteSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    po_number = serializers.CharField(max_length=100)
    order_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=SalesOrder.Status.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = _SalesOrderItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value


# ---------------------------------------------------------------------------
# Commission payments
# ---------------------------------------------------------------------------

class CommissionPaymentItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommissionPaymentItem
        fields = ["id", "payment", "amount", "description", "notes", "created_at"]
        read_only_fields = fields


class CommissionPaymentSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    total_line_items = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    remaining_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = CommissionPayment
        fields = [
            "id", "supplier", "supplier_name", "payment_date", "total_amount",
            "reference", "notes", "status", "total_line_items", "remaining_amount",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = fields


class CommissionPaymentCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    payment_date = serializers.DateField(required=False, allow_null=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=MIN_AMOUNT)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CommissionPaymentItemInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=MIN_AMOUNT)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CommissionPaymentItemsReplaceSerializer(serializers.Serializer):
    items = CommissionPaymentItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one payment item is required.")
        return value


class CommissionPaymentItemUpdateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=MIN_AMOUNT, required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("No changes supplied.")
        return attrs


# ---------------------------------------------------------------------------
# Allocations
# ---------------------------------------------------------------------------

class CommissionAllocationSerializer(serializers.ModelSerializer):
    payment = serializers.UUIDField(source="payment_item.payment_id", read_only=True)

    class Meta:
        model = CommissionAllocation
        fields = [
            "id", "payment", "payment_item", "sales_order_item", "allocated_amount",
            "allocation_date", "notes", "created_by", "created_at",
        ]
        read_only_fields = fields


class CommissionAllocationCreateSerializer(serializers.Serializer):
    payment_item_id = serializers.UUIDField()
    sales_order_item_id = serializers.UUIDField()
    allocated_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=MIN_AMOUNT)
    allocation_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


# ---------------------------------------------------------------------------
# Reports (plain dict rows from commissions.balances / commissions.reports)
# ---------------------------------------------------------------------------

def _money(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True, **kwargs)


def _commission(**kwargs):
    return serializers.DecimalField(max_digits=18, decimal_places=6, read_only=True, **kwargs)


class _OrderLineContextSerializer(serializers.Serializer):
    sales_order_item_id = serializers.UUIDField(read_only=True)
    po_number = serializers.CharField(read_only=True)
    customer_name = serializers.CharField(read_only=True)
    part_name = serializers.CharField(read_only=True)
    sku = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unit_price = _money()
    commission_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)
    commission_amount = _commission()


class OutstandingItemSerializer(_OrderLineContextSerializer):
    sales_order_id = serializers.UUIDField(read_only=True)
    order_date = serializers.DateField(read_only=True)
    paid_amount = _money()
    outstanding_amount = _commission()


class SupplierOutstandingSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField(read_only=True)
    supplier_name = serializers.CharField(read_only=True)
    total_commission = _commission()
    total_paid = _money()
    outstanding_amount = _commission()
    order_count = serializers.IntegerField(read_only=True)


class SupplierCommissionSummarySerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField(read_only=True)
    supplier_name = serializers.CharField(read_only=True)
    total_generated = _commission()
    total_paid = _money()
    total_allocated = _money()
    outstanding = _commission()
    unallocated_payments = _money()


class PaymentAllocationSummarySerializer(serializers.Serializer):
    payment_id = serializers.UUIDField(read_only=True)
    payment_date = serializers.DateField(read_only=True)
    total_amount = _money()
    reference = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    allocated_amount = _money()
    unallocated_amount = _money()


class AllocationReportRowSerializer(_OrderLineContextSerializer):
    id = serializers.UUIDField(read_only=True)
    payment_id = serializers.UUIDField(read_only=True)
    payment_item_id = serializers.UUIDField(read_only=True)
    allocated_amount = _money()
    allocation_date = serializers.DateField(read_only=True)
    notes = serializers.CharField(read_only=True)

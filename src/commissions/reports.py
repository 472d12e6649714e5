"""Read-only allocation reports."""
from __future__ import annotations

from django.db.models import Sum

from core.money import ZERO, quantize_money
from core.queries import get_scoped_object
from suppliers.models import Supplier

from .models import CommissionAllocation, CommissionPayment, CommissionPaymentItem


def _allocation_rows(queryset) -> list[dict]:
    queryset = (
        queryset
        .select_related(
            "payment_item",
            "sales_order_item",
            "sales_order_item__part",
            "sales_order_item__sales_order",
            "sales_order_item__sales_order__customer",
        )
        .order_by(
            "sales_order_item__sales_order__po_number",
            "sales_order_item__part__sku",
            "created_at",
        )
    )
    rows = []
    for allocation in queryset:
        line = allocation.sales_order_item
        order = line.sales_order
        rows.append({
            "id": allocation.pk,
            "payment_id": allocation.payment_item.payment_id,
            "payment_item_id": allocation.payment_item_id,
            "sales_order_item_id": line.pk,
            "allocated_amount": allocation.allocated_amount,
            "allocation_date": allocation.allocation_date,
            "notes": allocation.notes,
            "po_number": order.po_number,
            "customer_name": order.customer.name,
            "part_name": line.part.name,
            "sku": line.part.sku,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "commission_percentage": line.commission_percentage,
            "commission_amount": line.commission_amount,
        })
    return rows


def get_allocations_for_payment(*, company, payment_id) -> list[dict]:
    """All allocations drawn from any item of one payment, with order context."""
    payment = get_scoped_object(
        CommissionPayment.objects.filter(company=company),
        payment_id,
        message="Commission payment not found.",
    )
    return _allocation_rows(
        CommissionAllocation.objects.filter(company=company, payment_item__payment=payment)
    )


def get_allocations_for_payment_item(*, company, payment_item_id) -> list[dict]:
    """All allocations drawn from one payment item."""
    item = get_scoped_object(
        CommissionPaymentItem.objects.filter(company=company),
        payment_item_id,
        message="Commission payment item not found.",
    )
    return _allocation_rows(
        CommissionAllocation.objects.filter(company=company, payment_item=item)
    )


def get_payment_allocation_summary(*, company, supplier_id) -> list[dict]:
    """Allocated versus unallocated amount for each payment of a supplier, newest first."""
    supplier = get_scoped_object(
        Supplier.objects.filter(company=company),
        supplier_id,
        message="Supplier not found.",
    )
    payments = list(
        CommissionPayment.objects
        .filter(company=company, supplier=supplier)
        .order_by("-payment_date", "-created_at")
    )
    allocated = {
        row["payment_item__payment_id"]: quantize_money(row["total"])
        for row in (
            CommissionAllocation.objects
            .filter(company=company, payment_item__payment__in=payments)
            .order_by()
            .values("payment_item__payment_id")
            .annotate(total=Sum("allocated_amount"))
        )
    }

    rows = []
    for payment in payments:
        allocated_amount = allocated.get(payment.pk, ZERO)
        rows.append({
            "payment_id": payment.pk,
            "payment_date": payment.payment_date,
            "total_amount": payment.total_amount,
            "reference": payment.reference,
            "status": payment.status,
            "allocated_amount": allocated_amount,
            "unallocated_amount": quantize_money(payment.total_amount - allocated_amount),
        })
    return rows

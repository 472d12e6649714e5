"""Outstanding commission balances.

Earned commission and allocations are aggregated by separate grouped
queries and merged here, so joining allocations onto order lines never
counts a commission twice. Results are plain dicts of ``Decimal`` values:
commission-side amounts at six decimals, payment-side amounts at cents.
"""
from __future__ import annotations

from django.db.models import Count, F, Sum

from core.money import ZERO, quantize_commission, quantize_money
from core.queries import get_scoped_object
from sales.models import SalesOrderItem
from suppliers.models import Supplier

from .models import CommissionAllocation, CommissionPayment


def _get_supplier(company, supplier_id) -> Supplier:
    return get_scoped_object(
        Supplier.objects.filter(company=company),
        supplier_id,
        message="Supplier not found.",
    )


def _allocated_by_sales_item(company, supplier) -> dict:
    rows = (
        CommissionAllocation.objects
        .filter(company=company, sales_order_item__supplier=supplier)
        .order_by()
        .values("sales_order_item_id")
        .annotate(total=Sum("allocated_amount"))
    )
    return {row["sales_order_item_id"]: quantize_money(row["total"]) for row in rows}


# ---------------------------------------------------------------------------
# Per supplier, per order line
# ---------------------------------------------------------------------------

def get_outstanding_for_supplier(*, company, supplier_id) -> list[dict]:
    """Order lines of a supplier that still have commission outstanding.

    Newest orders first, then by PO number.
    """
    supplier = _get_supplier(company, supplier_id)
    paid = _allocated_by_sales_item(company, supplier)

    items = (
        SalesOrderItem.objects
        .filter(company=company, supplier=supplier, commission_amount__gt=0)
        .select_related("sales_order", "sales_order__customer", "part")
        .order_by("-sales_order__order_date", "sales_order__po_number", "created_at")
    )

    rows = []
    for item in items:
        commission = quantize_commission(item.commission_amount)
        paid_amount = paid.get(item.pk, ZERO)
        outstanding = quantize_commission(commission - paid_amount)
        if outstanding <= 0:
            continue
        order = item.sales_order
        rows.append({
            "sales_order_item_id": item.pk,
            "sales_order_id": order.pk,
            "po_number": order.po_number,
            "customer_name": order.customer.name,
            "order_date": order.order_date,
            "part_name": item.part.name,
            "sku": item.part.sku,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "commission_percentage": item.commission_percentage,
            "commission_amount": commission,
            "paid_amount": paid_amount,
            "outstanding_amount": outstanding,
        })
    return rows


# ---------------------------------------------------------------------------
# Company-wide, per supplier
# ---------------------------------------------------------------------------

def get_commission_outstanding_by_supplier(*, company) -> list[dict]:
    """Earned, allocated and outstanding commission for each supplier.

    Suppliers that never earned commission are left out. Largest
    outstanding first, ties broken by supplier name.
    """
    earned = (
        SalesOrderItem.objects
        .filter(company=company, commission_amount__gt=0)
        .order_by()
        .values("supplier_id")
        .annotate(
            total_commission=Sum("commission_amount"),
            order_count=Count("sales_order", distinct=True),
        )
    )
    allocated = {
        row["supplier_id"]: quantize_money(row["total"])
        for row in (
            CommissionAllocation.objects
            .filter(company=company, sales_order_item__commission_amount__gt=0)
            .order_by()
            .values(supplier_id=F("sales_order_item__supplier_id"))
            .annotate(total=Sum("allocated_amount"))
        )
    }

    names = dict(
        Supplier.objects
        .filter(company=company, pk__in=[row["supplier_id"] for row in earned])
        .values_list("pk", "name")
    )

    rows = []
    for row in earned:
        total_commission = quantize_commission(row["total_commission"])
        if total_commission <= 0:
            continue
        total_paid = allocated.get(row["supplier_id"], ZERO)
        rows.append({
            "supplier_id": row["supplier_id"],
            "supplier_name": names.get(row["supplier_id"], ""),
            "total_commission": total_commission,
            "total_paid": total_paid,
            "outstanding_amount": quantize_commission(total_commission - total_paid),
            "order_count": row["order_count"],
        })

    rows.sort(key=lambda r: r["supplier_name"])
    rows.sort(key=lambda r: r["outstanding_amount"], reverse=True)
    return rows


# ---------------------------------------------------------------------------
# Supplier summary
# ---------------------------------------------------------------------------

def get_supplier_commission_summary(*, company, supplier_id) -> dict:
    """Headline commission figures for one supplier.

    ``outstanding`` is earned minus allocated; ``unallocated_payments`` is
    money received from the supplier but not yet allocated.
    """
    supplier = _get_supplier(company, supplier_id)

    total_generated = quantize_commission(
        SalesOrderItem.objects
        .filter(company=company, supplier=supplier, commission_amount__gt=0)
        .aggregate(total=Sum("commission_amount"))["total"]
    )
    total_paid = quantize_money(
        CommissionPayment.objects
        .filter(company=company, supplier=supplier)
        .aggregate(total=Sum("total_amount"))["total"]
    )
    total_allocated = quantize_money(
        CommissionAllocation.objects
        .filter(company=company, sales_order_item__supplier=supplier)
        .aggregate(total=Sum("allocated_amount"))["total"]
    )

    return {
        "supplier_id": supplier.pk,
        "supplier_name": supplier.name,
        "total_generated": total_generated,
        "total_paid": total_paid,
        "total_allocated": total_allocated,
        "outstanding": quantize_commission(total_generated - total_allocated),
        "unallocated_payments": quantize_money(total_paid - total_allocated),
    }

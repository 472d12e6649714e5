"""Services for sales orders.

Order creation and replacement are the only writers of an order line's
``commission_amount``; the amount is accrued once per line through
:func:`commissions.accrual.calculate_commission`.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from catalog.models import Part
from commissions.accrual import calculate_commission
from commissions.models import CommissionAllocation
from commissions.services import refresh_payment_statuses
from core.dates import parse_optional_date
from core.exceptions import ConflictDuringTransaction, InvalidInput
from core.money import MAX_COMMISSION, ZERO, ensure_within, parse_decimal, parse_quantity
from core.queries import get_scoped_object
from customers.models import Customer
from suppliers.models import Supplier

from .models import SalesOrder, SalesOrderItem

logger = logging.getLogger("ledger")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _resolve_customer(company, customer_id) -> Customer:
    try:
        return get_scoped_object(
            Customer.objects.filter(company=company),
            customer_id,
            message="Customer not found for this company.",
        )
    except LookupError:
        raise InvalidInput("Customer not found for this company.", field="customer_id")


def _validate_header(po_number, status) -> tuple[str, str]:
    po_number = str(po_number or "").strip()
    if not po_number:
        raise InvalidInput("PO number is required.", field="po_number")

    status = status or SalesOrder.Status.PENDING
    if status not in SalesOrder.Status.values:
        raise InvalidInput(f"Unknown order status {status!r}.", field="status")
    return po_number, status


def _validate_order_items(company, items) -> list[dict]:
    """Validate order lines, resolve parts/suppliers and accrue commission."""
    if not isinstance(items, (list, tuple)) or not items:
        raise InvalidInput("The order must contain at least one item.", field="items")

    normalized: list[dict] = []
    for idx, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise InvalidInput(f"Item {idx}: expected an object.", field="items")

        try:
            part = get_scoped_object(
                Part.objects.filter(company=company).select_related("supplier"),
                item.get("part_id"),
                message="part not found",
            )
        except LookupError:
            raise InvalidInput(f"Item {idx}: part not found for this company.", field="items")

        supplier = part.supplier
        supplier_id = item.get("supplier_id")
        if supplier_id and str(supplier_id) != str(part.supplier_id):
            try:
                supplier = get_scoped_object(
                    Supplier.objects.filter(company=company),
                    supplier_id,
                    message="supplier not found",
                )
            except LookupError:
                raise InvalidInput(f"Item {idx}: supplier not found for this company.", field="items")

        unit_price = item.get("unit_price")
        if unit_price is None or unit_price == "":
            unit_price = part.price if part.price is not None else ZERO
        commission_percentage = item.get("commission_percentage")
        if commission_percentage is None or commission_percentage == "":
            commission_percentage = ZERO

        try:
            quantity = parse_quantity(item.get("quantity"))
            unit_price = parse_decimal(unit_price, field="unit_price")
            commission_percentage = parse_decimal(commission_percentage, field="commission_percentage")
            accrual = calculate_commission(quantity, unit_price, commission_percentage)
        except InvalidInput as exc:
            raise InvalidInput(f"Item {idx}: {exc.message}", field=exc.field or "items")

        normalized.append({
            "part": part,
            "supplier": supplier,
            "quantity": quantity,
            "unit_price": unit_price,
            "commission_percentage": commission_percentage,
            "line_total": accrual.line_total,
            "commission_amount": accrual.commission_amount,
        })

    ensure_within(sum((line["line_total"] for line in normalized), ZERO), field="total_amount")
    ensure_within(
        sum((line["commission_amount"] for line in normalized), ZERO),
        field="total_commission",
        limit=MAX_COMMISSION,
    )
    return normalized


def _check_po_number(customer, po_number, *, exclude_pk=None) -> None:
    duplicates = SalesOrder.objects.filter(customer=customer, po_number=po_number)
    if exclude_pk is not None:
        duplicates = duplicates.exclude(pk=exclude_pk)
    if duplicates.exists():
        raise ConflictDuringTransaction(
            f"PO number {po_number!r} already exists for this customer.",
            field="po_number",
        )


def _write_items(company, order, lines) -> None:
    total_amount = ZERO
    total_commission = ZERO
    for line in lines:
        SalesOrderItem.objects.create(company=company, sales_order=order, **line)
        total_amount += line["line_total"]
        total_commission += line["commission_amount"]

    order.total_amount = total_amount
    order.total_commission = total_commission
    order.save(update_fields=["total_amount", "total_commission", "updated_at"])


def _payments_allocated_to(order) -> set:
    return set(
        CommissionAllocation.objects
        .filter(sales_order_item__sales_order=order)
        .values_list("payment_item__payment_id", flat=True)
    )


# ---------------------------------------------------------------------------
# create / replace / delete
# ---------------------------------------------------------------------------

def create_sales_order(
    *,
    company,
    customer_id,
    po_number,
    items,
    order_date=None,
    status=None,
    notes="",
    actor=None,
) -> SalesOrder:
    """Create an order with its lines and accrued commission in one transaction.

    Each item is a dict with ``part_id``, ``quantity`` and optionally
    ``supplier_id`` (defaults to the part's supplier), ``unit_price``
    (defaults to the part's price, else 0) and ``commission_percentage``
    (defaults to 0).

    Raises
    ------
    InvalidInput
        Missing or malformed fields, or customer/part/supplier outside
        ``company``.
    ConflictDuringTransaction
        The PO number already exists for the customer.
    """
    customer = _resolve_customer(company, customer_id)
    po_number, status = _validate_header(po_number, status)
    ordered_on = parse_optional_date(order_date, field="order_date")
    lines = _validate_order_items(company, items)
    _check_po_number(customer, po_number)

    try:
        with transaction.atomic():
            order = SalesOrder.objects.create(
                company=company,
                customer=customer,
                po_number=po_number,
                order_date=ordered_on,
                status=status,
                notes=str(notes or "").strip(),
            )
            _write_items(company, order, lines)
    except IntegrityError as exc:
        raise ConflictDuringTransaction(
            f"PO number {po_number!r} already exists for this customer.",
            field="po_number",
        ) from exc

    logger.info(
        "Sales order %s created: po=%s items=%d total=%s commission=%s by=%s",
        order.pk, po_number, len(lines), order.total_amount, order.total_commission,
        getattr(actor, "pk", None),
    )
    return order


def replace_sales_order(
    *,
    company,
    order_id,
    customer_id,
    po_number,
    items,
    order_date=None,
    status=None,
    notes="",
    actor=None,
) -> SalesOrder:
    """Replace an order's header and every line.

    Old lines are deleted together with any allocations against them, and
    the status of each payment those allocations drew from is recomputed
    before the transaction commits.
    """
    customer = _resolve_customer(company, customer_id)
    po_number, status = _validate_header(po_number, status)
    ordered_on = parse_optional_date(order_date, field="order_date")
    lines = _validate_order_items(company, items)

    try:
        order, affected = _replace_sales_order(
            company=company,
            order_id=order_id,
            customer=customer,
            po_number=po_number,
            order_date=ordered_on,
            status=status,
            notes=str(notes or "").strip(),
            lines=lines,
        )
    except IntegrityError as exc:
        raise ConflictDuringTransaction(
            f"PO number {po_number!r} already exists for this customer.",
            field="po_number",
        ) from exc

    logger.info(
        "Sales order %s replaced: po=%s items=%d total=%s commission=%s payments_refreshed=%d by=%s",
        order.pk, po_number, len(lines), order.total_amount, order.total_commission,
        len(affected), getattr(actor, "pk", None),
    )
    return order


@transaction.atomic
def _replace_sales_order(*, company, order_id, customer, po_number, order_date, status, notes, lines):
    order = get_scoped_object(
        SalesOrder.objects.select_for_update().filter(company=company),
        order_id,
        message="Sales order not found.",
    )
    _check_po_number(customer, po_number, exclude_pk=order.pk)

    affected = _payments_allocated_to(order)
    order.items.all().delete()

    order.customer = customer
    order.po_number = po_number
    order.order_date = order_date
    order.status = status
    order.notes = notes
    order.save(update_fields=["customer", "po_number", "order_date", "status", "notes", "updated_at"])

    _write_items(company, order, lines)
    refresh_payment_statuses(affected)
    return order, affected


@transaction.atomic
def delete_sales_order(*, company, order_id) -> None:
    """Delete an order, its lines and their allocations; affected payments are re-derived."""
    order = get_scoped_object(
        SalesOrder.objects.select_for_update().filter(company=company),
        order_id,
        message="Sales order not found.",
    )
    affected = _payments_allocated_to(order)
    order_pk = order.pk
    order.delete()
    refresh_payment_statuses(affected)
    logger.info("Sales order %s deleted; %d payment(s) refreshed", order_pk, len(affected))

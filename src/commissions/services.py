"""Payment ledger and allocation engine.

Every function takes the tenant as a mandatory ``company`` keyword and
filters every read and write on it. Writes run inside
``transaction.atomic``; store-level constraint violations surface as
:class:`~core.exceptions.ConflictDuringTransaction`.

``refresh_payment_status`` is the only code that writes
``CommissionPayment.status``.
"""
from __future__ import annotations

import logging
from decimal import ROUND_UP, Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce

from core.dates import parse_optional_date
from core.exceptions import ConflictDuringTransaction, InvalidInput
from core.money import CENT, ZERO, ensure_within, parse_decimal, parse_positive_amount, quantize_money
from core.queries import get_scoped_object
from sales.models import SalesOrderItem
from suppliers.models import Supplier

from .models import CommissionAllocation, CommissionPayment, CommissionPaymentItem

logger = logging.getLogger("ledger")

Status = CommissionPayment.Status

MONEY_FIELD = DecimalField(max_digits=14, decimal_places=2)


def _status_tolerance() -> Decimal:
    return parse_decimal(
        getattr(settings, "COMMISSION_STATUS_TOLERANCE", "0.01"),
        field="COMMISSION_STATUS_TOLERANCE",
    )


def _strict_allocations() -> bool:
    return bool(getattr(settings, "COMMISSION_STRICT_ALLOCATIONS", True))


def _default_item_description() -> str:
    return getattr(settings, "COMMISSION_DEFAULT_ITEM_DESCRIPTION", "Payment item")


# ---------------------------------------------------------------------------
# Lookups (company scoped)
# ---------------------------------------------------------------------------

def _get_payment(company, payment_id, *, lock: bool = False) -> CommissionPayment:
    queryset = CommissionPayment.objects.filter(company=company)
    if lock:
        queryset = queryset.select_for_update()
    return get_scoped_object(queryset, payment_id, message="Commission payment not found.")


def _get_payment_item(company, payment_item_id, *, lock=False) -> CommissionPaymentItem:
    queryset = CommissionPaymentItem.objects.filter(company=company, payment__company=company)
    if lock:
        queryset = queryset.select_for_update()
    return get_scoped_object(
        queryset,
        payment_item_id,
        message="Commission payment item not found.",
    )


def _lock_payment(payment_id) -> CommissionPayment:
    return CommissionPayment.objects.select_for_update().get(pk=payment_id)


def _allocated_sum(queryset) -> Decimal:
    return quantize_money(queryset.aggregate(total=Sum("allocated_amount"))["total"])


def _normalize_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Status derivation
# ---------------------------------------------------------------------------

def derive_payment_status(allocated_total, payment_total, tolerance=None) -> str:
    """Map (allocated sum, payment total) to a payment status.

    A positive sum within ``tolerance`` of the total is fully allocated,
    any other positive sum is partially allocated, and zero is
    unallocated. The default tolerance is ``COMMISSION_STATUS_TOLERANCE``.
    """
    allocated = parse_decimal(allocated_total, field="allocated_total", default=ZERO)
    total = parse_decimal(payment_total, field="payment_total", default=ZERO)
    if tolerance is None:
        tolerance = _status_tolerance()

    if allocated > 0 and abs(allocated - total) < tolerance:
        return Status.FULLY_ALLOCATED
    if allocated > 0:
        return Status.PARTIALLY_ALLOCATED
    return Status.UNALLOCATED


def refresh_payment_status(payment: CommissionPayment) -> str:
    """Recompute the payment's status from all of its allocations and persist it."""
    allocated = _allocated_sum(
        CommissionAllocation.objects.filter(payment_item__payment_id=payment.pk)
    )
    status = derive_payment_status(allocated, payment.total_amount)
    if status != payment.status:
        payment.status = status
        payment.save(update_fields=["status", "updated_at"])
        logger.info(
            "Commission payment %s status -> %s (allocated %s of %s)",
            payment.pk, status, allocated, payment.total_amount,
        )
    return status


def refresh_payment_statuses(payment_ids) -> None:
    """Recompute the status of several payments, locking each header."""
    ids = {pk for pk in payment_ids if pk is not None}
    if not ids:
        return
    for payment in CommissionPayment.objects.select_for_update().filter(pk__in=ids).order_by("pk"):
        refresh_payment_status(payment)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

def list_payments(*, company, supplier_id=None):
    """Return the company's payments, newest first.

    Each row is annotated with ``total_line_items`` (sum of item amounts)
    and ``remaining_amount`` (total minus that sum).
    """
    queryset = CommissionPayment.objects.filter(company=company)
    if supplier_id:
        queryset = queryset.filter(supplier_id=supplier_id)
    line_items = Coalesce(Sum("items__amount"), Value(ZERO), output_field=MONEY_FIELD)
    return (
        queryset
        .select_related("supplier")
        .annotate(total_line_items=line_items)
        .annotate(
            remaining_amount=ExpressionWrapper(
                F("total_amount") - F("total_line_items"),
                output_field=MONEY_FIELD,
            )
        )
        .order_by("-payment_date", "-created_at")
    )


def get_payment(*, company, payment_id) -> CommissionPayment:
    return _get_payment(company, payment_id)


def record_payment(
    *,
    company,
    supplier_id,
    total_amount,
    payment_date=None,
    reference="",
    notes="",
    actor=None,
) -> CommissionPayment:
    """Record a payment received from a supplier.

    The payment starts ``unallocated`` with one item covering the full
    amount, so it is allocable immediately.

    Raises
    ------
    InvalidInput
        Unknown or foreign supplier, non-positive or malformed amount.
    ConflictDuringTransaction
        The reference is already used by another payment of this supplier.
    """
    amount = parse_positive_amount(total_amount, field="total_amount")
    paid_on = parse_optional_date(payment_date, field="payment_date")
    reference = _normalize_text(reference)

    try:
        supplier = get_scoped_object(
            Supplier.objects.filter(company=company),
            supplier_id,
            message="Supplier not found for this company.",
        )
    except LookupError:
        raise InvalidInput("Supplier not found for this company.", field="supplier_id")

    if reference and CommissionPayment.objects.filter(supplier=supplier, reference=reference).exists():
        raise ConflictDuringTransaction(
            f"A payment with reference {reference!r} already exists for this supplier.",
            field="reference",
        )

    try:
        payment = _create_payment(
            company=company,
            supplier=supplier,
            amount=amount,
            payment_date=paid_on,
            reference=reference,
            notes=_normalize_text(notes),
            actor=actor,
        )
    except IntegrityError as exc:
        raise ConflictDuringTransaction(
            "The payment could not be recorded because it conflicts with an existing one."
        ) from exc

    logger.info(
        "Commission payment %s recorded: supplier=%s amount=%s reference=%r",
        payment.pk, supplier.pk, amount, reference,
    )
    return payment


@transaction.atomic
def _create_payment(*, company, supplier, amount, payment_date, reference, notes, actor):
    payment = CommissionPayment.objects.create(
        company=company,
        supplier=supplier,
        payment_date=payment_date,
        total_amount=amount,
        reference=reference,
        notes=notes,
        status=Status.UNALLOCATED,
        created_by=actor,
    )
    CommissionPaymentItem.objects.create(
        company=company,
        payment=payment,
        amount=amount,
        description=_default_item_description(),
    )
    return payment


def _validate_payment_items(items) -> list[dict]:
    if not isinstance(items, (list, tuple)) or not items:
        raise InvalidInput("At least one payment item is required.", field="items")

    normalized = []
    for idx, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise InvalidInput(f"Item {idx}: expected an object.", field="items")
        amount = parse_positive_amount(item.get("amount"), field=f"items[{idx}].amount")
        normalized.append({
            "amount": amount,
            "description": _normalize_text(item.get("description")),
            "notes": _normalize_text(item.get("notes")),
        })
    ensure_within(sum((data["amount"] for data in normalized), ZERO), field="items")
    return normalized


@transaction.atomic
def replace_payment_items(*, company, payment_id, items):
    """Replace every item of a payment with ``items``.

    The payment's ``total_amount`` becomes the sum of the new items. The
    replacement is refused once any allocation references the payment,
    since it would delete ledger entries. Status is left untouched.

    Returns
    -------
    tuple[CommissionPayment, list[CommissionPaymentItem]]
    """
    normalized = _validate_payment_items(items)
    payment = _get_payment(company, payment_id, lock=True)

    if CommissionAllocation.objects.filter(payment_item__payment=payment).exists():
        raise ConflictDuringTransaction(
            "Payment items cannot be replaced once allocations have been recorded against them."
        )

    payment.items.all().delete()
    created = [
        CommissionPaymentItem.objects.create(company=company, payment=payment, **data)
        for data in normalized
    ]

    payment.total_amount = sum((item.amount for item in created), ZERO)
    payment.save(update_fields=["total_amount", "updated_at"])

    logger.info(
        "Commission payment %s items replaced: %d item(s), total=%s",
        payment.pk, len(created), payment.total_amount,
    )
    return payment, created


@transaction.atomic
def add_payment_item(*, company, payment_id, amount, description="", notes="") -> CommissionPaymentItem:
    """Append one item to a payment; the header total and status do not change."""
    value = parse_positive_amount(amount, field="amount")
    payment = _get_payment(company, payment_id, lock=True)
    item = CommissionPaymentItem.objects.create(
        company=company,
        payment=payment,
        amount=value,
        description=_normalize_text(description),
        notes=_normalize_text(notes),
    )
    logger.info("Commission payment %s item %s added: amount=%s", payment.pk, item.pk, value)
    return item


@transaction.atomic
def update_payment_item(
    *,
    company,
    payment_item_id,
    amount=None,
    description=None,
    notes=None,
) -> CommissionPaymentItem:
    """Edit one payment item in place.

    The amount cannot drop below what is already allocated from the item.
    """
    _lock_payment(_get_payment_item(company, payment_item_id).payment_id)
    item = _get_payment_item(company, payment_item_id, lock=True)

    update_fields = ["updated_at"]
    if amount is not None:
        value = parse_positive_amount(amount, field="amount")
        allocated = _allocated_sum(item.allocations.all())
        if value < allocated:
            raise ConflictDuringTransaction(
                f"Amount {value} is below the {allocated} already allocated from this item.",
                field="amount",
            )
        item.amount = value
        update_fields.append("amount")
    if description is not None:
        item.description = _normalize_text(description)
        update_fields.append("description")
    if notes is not None:
        item.notes = _normalize_text(notes)
        update_fields.append("notes")

    item.save(update_fields=update_fields)
    logger.info("Commission payment item %s updated: amount=%s", item.pk, item.amount)
    return item


@transaction.atomic
def delete_payment_item(*, company, payment_item_id) -> None:
    """Delete an item that has no allocations."""
    item = _get_payment_item(company, payment_item_id)
    _lock_payment(item.payment_id)

    if item.allocations.exists():
        raise ConflictDuringTransaction("Payment items with allocations cannot be deleted.")

    item_pk, payment_pk = item.pk, item.payment_id
    item.delete()
    logger.info("Commission payment item %s deleted from payment %s", item_pk, payment_pk)


@transaction.atomic
def delete_payment(*, company, payment_id) -> None:
    """Delete a payment together with its items and their allocations."""
    payment = _get_payment(company, payment_id, lock=True)
    payment_pk = payment.pk
    payment.delete()
    logger.info("Commission payment %s deleted", payment_pk)


# ---------------------------------------------------------------------------
# Allocation engine
# ---------------------------------------------------------------------------

def allocate(
    *,
    company,
    payment_item_id,
    sales_order_item_id,
    allocated_amount,
    notes="",
    allocation_date=None,
    actor=None,
) -> CommissionAllocation:
    """Apply part of a payment item against one sales-order item's commission.

    Runs in one transaction: lock the payment header, insert the
    allocation, recompute and persist the payment status. Any failure
    leaves no allocation behind and the status as it was.

    With ``COMMISSION_STRICT_ALLOCATIONS`` enabled (the default) the
    amount may not exceed the item's unallocated balance or the order
    line's outstanding commission, and the order line must belong to the
    payment's supplier.

    Calling twice with the same arguments records two allocations.

    Raises
    ------
    InvalidInput
        Malformed amount or date, or a bound check failed.
    NotFound
        Payment item or sales-order item missing or outside ``company``.
    ConflictDuringTransaction
        The store rejected the insert.
    """
    amount = parse_positive_amount(allocated_amount, field="allocated_amount")
    allocated_on = parse_optional_date(allocation_date, field="allocation_date")

    try:
        allocation = _allocate(
            company=company,
            payment_item_id=payment_item_id,
            sales_order_item_id=sales_order_item_id,
            amount=amount,
            notes=_normalize_text(notes),
            allocation_date=allocated_on,
            actor=actor,
        )
    except IntegrityError as exc:
        raise ConflictDuringTransaction("The allocation could not be recorded.") from exc

    logger.info(
        "Commission allocation %s: %s from payment item %s to sales order item %s",
        allocation.pk, amount, allocation.payment_item_id, allocation.sales_order_item_id,
    )
    return allocation


@transaction.atomic
def _allocate(*, company, payment_item_id, sales_order_item_id, amount, notes, allocation_date, actor):
    payment = _lock_payment(_get_payment_item(company, payment_item_id).payment_id)
    # Reload under the header lock; the bound check needs the committed amount.
    payment_item = _get_payment_item(company, payment_item_id, lock=True)

    sales_order_item = get_scoped_object(
        SalesOrderItem.objects.select_for_update().filter(
            company=company, sales_order__company=company,
        ),
        sales_order_item_id,
        message="Sales order item not found.",
    )

    if _strict_allocations():
        _check_allocation_bounds(payment, payment_item, sales_order_item, amount)

    allocation = CommissionAllocation.objects.create(
        company=company,
        payment_item=payment_item,
        sales_order_item=sales_order_item,
        allocated_amount=amount,
        allocation_date=allocation_date,
        notes=notes,
        created_by=actor,
    )
    refresh_payment_status(payment)
    return allocation


def _check_allocation_bounds(payment, payment_item, sales_order_item, amount) -> None:
    if sales_order_item.supplier_id != payment.supplier_id:
        _reject_allocation(
            "The sales order item belongs to a different supplier than the payment.",
            payment_item, sales_order_item, amount,
        )

    item_remaining = payment_item.amount - _allocated_sum(payment_item.allocations.all())
    if amount > item_remaining:
        _reject_allocation(
            f"Amount {amount} exceeds the {item_remaining} left on the payment item.",
            payment_item, sales_order_item, amount,
        )

    outstanding = sales_order_item.commission_amount - _allocated_sum(
        CommissionAllocation.objects.filter(sales_order_item=sales_order_item)
    )
    # Commission is accrued below the cent; the last allocation may round it up.
    if amount > outstanding.quantize(CENT, rounding=ROUND_UP):
        _reject_allocation(
            f"Amount {amount} exceeds the {quantize_money(outstanding)} outstanding on the sales order item.",
            payment_item, sales_order_item, amount,
        )


def _reject_allocation(message, payment_item, sales_order_item, amount):
    logger.warning(
        "Allocation rejected: %s (payment item %s, sales order item %s, amount %s)",
        message, payment_item.pk, sales_order_item.pk, amount,
    )
    raise InvalidInput(message, field="allocated_amount")

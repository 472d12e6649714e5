"""Models for the commissions app: supplier payments and their allocations."""
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# CommissionPayment
# ---------------------------------------------------------------------------

class CommissionPayment(TimeStampedModel):
    """Commission money received from one supplier."""

    class Status(models.TextChoices):
        UNALLOCATED = "unallocated", "Unallocated"
        PARTIALLY_ALLOCATED = "partially_allocated", "Partially allocated"
        FULLY_ALLOCATED = "fully_allocated", "Fully allocated"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="commission_payments",
        verbose_name="company",
    )
    supplier = models.ForeignKey(
        "suppliers.Supplier",
        on_delete=models.CASCADE,
        related_name="commission_payments",
        verbose_name="supplier",
    )
    payment_date = models.DateField("payment date", default=timezone.localdate)
    total_amount = models.DecimalField(
        "total amount",
        max_digits=14,
        decimal_places=2,
    )
    reference = models.CharField(
        "reference",
        max_length=100,
        blank=True,
        default="",
        help_text='Cheque or transfer number, e.g. "CHK-1042".',
    )
    notes = models.TextField("notes", blank=True, default="")
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.UNALLOCATED,
        db_index=True,
        editable=False,
        help_text="Derived from allocations; never set directly.",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="commission_payments_recorded",
        verbose_name="recorded by",
    )

    class Meta:
        verbose_name = "commission payment"
        verbose_name_plural = "commission payments"
        ordering = ["-payment_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gt=0),
                name="commission_payment_total_positive",
            ),
            models.UniqueConstraint(
                fields=["supplier", "reference"],
                condition=~Q(reference=""),
                name="uniq_commission_payment_reference_per_supplier",
            ),
        ]

    def __str__(self):
        return f"{self.supplier} - {self.total_amount} ({self.payment_date})"


# ---------------------------------------------------------------------------
# CommissionPaymentItem
# ---------------------------------------------------------------------------

class CommissionPaymentItem(TimeStampedModel):
    """An individually allocable bucket of a payment."""

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="commission_payment_items",
        verbose_name="company",
    )
    payment = models.ForeignKey(
        CommissionPayment,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="payment",
    )
    amount = models.DecimalField(
        "amount",
        max_digits=14,
        decimal_places=2,
    )
    description = models.CharField("description", max_length=255, blank=True, default="")
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "commission payment item"
        verbose_name_plural = "commission payment items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="commission_payment_item_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.description or 'Item'} - {self.amount}"


# ---------------------------------------------------------------------------
# CommissionAllocation
# ---------------------------------------------------------------------------

class CommissionAllocation(TimeStampedModel):
    """Ledger entry applying part of a payment item to one sales-order item.

    Append-only: rows disappear only when their payment item or sales-order
    item is deleted.
    """

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="commission_allocations",
        verbose_name="company",
    )
    payment_item = models.ForeignKey(
        CommissionPaymentItem,
        on_delete=models.CASCADE,
        related_name="allocations",
        verbose_name="payment item",
    )
    sales_order_item = models.ForeignKey(
        "sales.SalesOrderItem",
        on_delete=models.CASCADE,
        related_name="commission_allocations",
        verbose_name="sales order item",
    )
    allocated_amount = models.DecimalField(
        "allocated amount",
        max_digits=14,
        decimal_places=2,
    )
    allocation_date = models.DateField("allocation date", default=timezone.localdate)
    notes = models.TextField("notes", blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="commission_allocations_created",
        verbose_name="created by",
    )

    class Meta:
        verbose_name = "commission allocation"
        verbose_name_plural = "commission allocations"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(allocated_amount__gt=Decimal("0")),
                name="commission_allocation_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.allocated_amount} -> {self.sales_order_item_id}"

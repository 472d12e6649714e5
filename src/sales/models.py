"""Models for the sales app."""
from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# SalesOrder
# ---------------------------------------------------------------------------

class SalesOrder(TimeStampedModel):
    """A customer purchase order; its items accrue supplier commission."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SHIPPED = "shipped", "Shipped"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="sales_orders",
        verbose_name="company",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="sales_orders",
        verbose_name="customer",
    )
    po_number = models.CharField("PO number", max_length=100)
    order_date = models.DateField("order date", default=timezone.localdate, db_index=True)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    notes = models.TextField("notes", blank=True, default="")

    # ------------------------------------------------------------------
    # Amounts (recomputed whenever the item set is replaced)
    # ------------------------------------------------------------------
    total_amount = models.DecimalField(
        "total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    total_commission = models.DecimalField(
        "total commission",
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
    )

    class Meta:
        verbose_name = "sales order"
        verbose_name_plural = "sales orders"
        ordering = ["-order_date", "-created_at"]
        unique_together = [["customer", "po_number"]]

    def __str__(self):
        return self.po_number


# ---------------------------------------------------------------------------
# SalesOrderItem
# ---------------------------------------------------------------------------

class SalesOrderItem(TimeStampedModel):
    """One part line on a sales order, carrying its accrued commission."""

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="sales_order_items",
        verbose_name="company",
    )
    sales_order = models.ForeignKey(
        SalesOrder,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="sales order",
    )
    part = models.ForeignKey(
        "catalog.Part",
        on_delete=models.PROTECT,
        related_name="sales_order_items",
        verbose_name="part",
    )
    supplier = models.ForeignKey(
        "suppliers.Supplier",
        on_delete=models.PROTECT,
        related_name="sales_order_items",
        verbose_name="supplier",
    )
    quantity = models.PositiveIntegerField("quantity")
    unit_price = models.DecimalField(
        "unit price",
        max_digits=12,
        decimal_places=2,
    )
    line_total = models.DecimalField(
        "line total",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    commission_percentage = models.DecimalField(
        "commission (%)",
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    commission_amount = models.DecimalField(
        "commission amount",
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Accrued once from quantity, unit price and percentage.",
    )

    class Meta:
        verbose_name = "sales order item"
        verbose_name_plural = "sales order items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(commission_percentage__gte=0) & Q(commission_percentage__lte=100),
                name="sales_item_commission_percentage_range",
            ),
        ]

    def __str__(self):
        return f"{self.part_id} x{self.quantity}"

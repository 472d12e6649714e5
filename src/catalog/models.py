"""Models for the catalog app (parts sold on behalf of suppliers)."""
from django.db import models

from core.models import TimeStampedModel


class Part(TimeStampedModel):
    """A catalog part supplied by one supplier."""

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="parts",
        verbose_name="company",
    )
    supplier = models.ForeignKey(
        "suppliers.Supplier",
        on_delete=models.PROTECT,
        related_name="parts",
        verbose_name="supplier",
    )
    sku = models.CharField(
        "SKU",
        max_length=50,
        help_text="Internal part reference, unique per company.",
    )
    name = models.CharField("name", max_length=255)
    description = models.TextField("description", blank=True, default="")
    price = models.DecimalField(
        "list price",
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Default unit price when an order line does not give one.",
    )

    class Meta:
        verbose_name = "part"
        verbose_name_plural = "parts"
        ordering = ["sku"]
        unique_together = [["company", "sku"]]

    def __str__(self):
        return f"{self.name} ({self.sku})"

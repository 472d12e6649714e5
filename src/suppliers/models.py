"""Models for the suppliers app."""
from django.db import models

from core.models import TimeStampedModel


class Supplier(TimeStampedModel):
    """A supplier whose parts are resold and who owes commission on them."""

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.PROTECT,
        related_name="suppliers",
    )
    name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        unique_together = [["company", "name"]]

    def __str__(self):
        return self.name

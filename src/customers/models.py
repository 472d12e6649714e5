"""Models for the customers app."""
from django.db import models

from core.models import TimeStampedModel


class Customer(TimeStampedModel):
    """A customer placing sales orders with a company."""

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="customers",
        verbose_name="company",
    )
    name = models.CharField("name", max_length=255)
    email = models.EmailField("email", blank=True, default="")
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    address = models.TextField("address", blank=True, default="")

    class Meta:
        verbose_name = "customer"
        verbose_name_plural = "customers"
        ordering = ["name"]

    def __str__(self):
        return self.name

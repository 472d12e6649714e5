"""Models for the companies app (tenant boundary)."""
import uuid

from django.conf import settings
from django.db import models
from django.utils.text import slugify

from core.models import TimeStampedModel


class Company(TimeStampedModel):
    """Tenant. Every customer, supplier, order and ledger row belongs to one."""

    name = models.CharField("name", max_length=255)
    slug = models.SlugField("slug", max_length=255, unique=True)
    description = models.TextField("description", blank=True, default="")
    is_active = models.BooleanField("active", default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "company"
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or "company"
        super().save(*args, **kwargs)


class CompanyUser(models.Model):
    """Links a user to one or more companies."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="company_users",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="company_users",
    )
    is_default = models.BooleanField(
        default=False,
        help_text="If True, this company is the user's working company.",
    )

    class Meta:
        unique_together = [("company", "user")]
        verbose_name = "company user"
        verbose_name_plural = "company users"

    def __str__(self):
        return f"{self.user} - {self.company}"

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
        ("sales", "0001_initial"),
        ("suppliers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CommissionPayment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="payment date")),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="total amount")),
                ("reference", models.CharField(blank=True, default="", help_text='Cheque or transfer number, e.g. "CHK-1042".', max_length=100, verbose_name="reference")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("status", models.CharField(choices=[("unallocated", "Unallocated"), ("partially_allocated", "Partially allocated"), ("fully_allocated", "Fully allocated")], db_index=True, default="unallocated", editable=False, help_text="Derived from allocations; never set directly.", max_length=20, verbose_name="status")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="commission_payments", to="companies.company", verbose_name="company")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="commission_payments_recorded", to=settings.AUTH_USER_MODEL, verbose_name="recorded by")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="commission_payments", to="suppliers.supplier", verbose_name="supplier")),
            ],
            options={
                "verbose_name": "commission payment",
                "verbose_name_plural": "commission payments",
                "ordering": ["-payment_date", "-created_at"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("total_amount__gt", 0)), name="commission_payment_total_positive"),
                    models.UniqueConstraint(condition=models.Q(("reference", ""), _negated=True), fields=("supplier", "reference"), name="uniq_commission_payment_reference_per_supplier"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommissionPaymentItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="amount")),
                ("description", models.CharField(blank=True, default="", max_length=255, verbose_name="description")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="commission_payment_items", to="companies.company", verbose_name="company")),
                ("payment", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="commissions.commissionpayment", verbose_name="payment")),
            ],
            options={
                "verbose_name": "commission payment item",
                "verbose_name_plural": "commission payment items",
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="commission_payment_item_amount_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommissionAllocation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("allocated_amount", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="allocated amount")),
                ("allocation_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="allocation date")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="commission_allocations", to="companies.company", verbose_name="company")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="commission_allocations_created", to=settings.AUTH_USER_MODEL, verbose_name="created by")),
                ("payment_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="allocations", to="commissions.commissionpaymentitem", verbose_name="payment item")),
                ("sales_order_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="commission_allocations", to="sales.salesorderitem", verbose_name="sales order item")),
            ],
            options={
                "verbose_name": "commission allocation",
                "verbose_name_plural": "commission allocations",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("allocated_amount__gt", Decimal("0"))), name="commission_allocation_amount_positive"),
                ],
            },
        ),
    ]

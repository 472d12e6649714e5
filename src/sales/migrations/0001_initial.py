import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("companies", "0001_initial"),
        ("customers", "0001_initial"),
        ("suppliers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SalesOrder",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("po_number", models.CharField(max_length=100, verbose_name="PO number")),
                ("order_date", models.DateField(db_index=True, default=django.utils.timezone.localdate, verbose_name="order date")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("shipped", "Shipped"), ("completed", "Completed"), ("cancelled", "Cancelled")], db_index=True, default="pending", max_length=20, verbose_name="status")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="total")),
                ("total_commission", models.DecimalField(decimal_places=6, default=Decimal("0"), max_digits=18, verbose_name="total commission")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sales_orders", to="companies.company", verbose_name="company")),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_orders", to="customers.customer", verbose_name="customer")),
            ],
            options={
                "verbose_name": "sales order",
                "verbose_name_plural": "sales orders",
                "ordering": ["-order_date", "-created_at"],
                "unique_together": {("customer", "po_number")},
            },
        ),
        migrations.CreateModel(
            name="SalesOrderItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("quantity", models.PositiveIntegerField(verbose_name="quantity")),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="unit price")),
                ("line_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, verbose_name="line total")),
                ("commission_percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5, verbose_name="commission (%)")),
                ("commission_amount", models.DecimalField(decimal_places=6, default=Decimal("0"), help_text="Accrued once from quantity, unit price and percentage.", max_digits=18, verbose_name="commission amount")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sales_order_items", to="companies.company", verbose_name="company")),
                ("part", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_order_items", to="catalog.part", verbose_name="part")),
                ("sales_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.salesorder", verbose_name="sales order")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_order_items", to="suppliers.supplier", verbose_name="supplier")),
            ],
            options={
                "verbose_name": "sales order item",
                "verbose_name_plural": "sales order items",
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("commission_percentage__gte", 0), ("commission_percentage__lte", 100)),
                        name="sales_item_commission_percentage_range",
                    ),
                ],
            },
        ),
    ]

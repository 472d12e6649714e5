import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
        ("suppliers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Part",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("sku", models.CharField(help_text="Internal part reference, unique per company.", max_length=50, verbose_name="SKU")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("price", models.DecimalField(blank=True, decimal_places=2, help_text="Default unit price when an order line does not give one.", max_digits=12, null=True, verbose_name="list price")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="parts", to="companies.company", verbose_name="company")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="parts", to="suppliers.supplier", verbose_name="supplier")),
            ],
            options={
                "verbose_name": "part",
                "verbose_name_plural": "parts",
                "ordering": ["sku"],
                "unique_together": {("company", "sku")},
            },
        ),
    ]

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("address", models.TextField(blank=True, default="", verbose_name="address")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="customers", to="companies.company", verbose_name="company")),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["name"],
            },
        ),
    ]

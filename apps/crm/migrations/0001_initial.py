from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import apps.core.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=apps.core.models.generate_id,
                        editable=False,
                        help_text="Unique identifier",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, help_text="When the record was created"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the record was last updated",
                    ),
                ),
                ("name", models.CharField(help_text="Customer's full name", max_length=255)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=30, null=True)),
                ("gender", models.CharField(blank=True, max_length=20, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                (
                    "signature",
                    models.TextField(
                        blank=True, help_text="Captured signature image data", null=True
                    ),
                ),
                ("status", models.CharField(default="Active", max_length=30)),
                ("avatar", models.CharField(blank=True, max_length=500, null=True)),
                (
                    "total_debt",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Outstanding balance across all credit records",
                        max_digits=12,
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "db_table": "customers",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Credit",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=apps.core.models.generate_id,
                        editable=False,
                        help_text="Unique identifier",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, help_text="When the record was created"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the record was last updated",
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "amount_paid",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                ("due_date", models.CharField(blank=True, max_length=32, null=True)),
                ("status", models.CharField(default="Pending", max_length=30)),
                ("notes", models.TextField(blank=True, null=True)),
                ("payment_terms", models.CharField(blank=True, max_length=100, null=True)),
                (
                    "interest_rate",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True),
                ),
                ("reference", models.CharField(blank=True, max_length=100, null=True)),
                ("contact_phone", models.CharField(blank=True, max_length=30, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer who owes the amount",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credits",
                        to="crm.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Credit",
                "verbose_name_plural": "Credits",
                "db_table": "credits",
                "ordering": ["-created_at"],
            },
        ),
    ]

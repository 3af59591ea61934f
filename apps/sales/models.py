"""
Sales models: completed sales and recorded profit entries.
"""

from decimal import Decimal

from django.db import models

from apps.core.models import TimeStampedModel
from apps.crm.models import Customer
from apps.inventory.models import Product


class Sale(TimeStampedModel):
    """
    A single product sale.

    cost_price_snapshot keeps the product's cost at the time of sale so that
    profit reports do not shift when the product cost changes later.
    """

    COMPLETED = "Completed"
    PENDING = "Pending"
    CREDIT = "Credit"

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales",
    )

    # Stored as entered (YYYY-MM-DD)
    date = models.CharField(max_length=32)

    amount = models.DecimalField(max_digits=12, decimal_places=2)

    cost_price_snapshot = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(max_length=30, default=COMPLETED)

    class Meta:
        db_table = "sales"
        ordering = ["-created_at"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"
        indexes = [
            models.Index(fields=["date"], name="sale_date_idx"),
        ]

    def __str__(self):
        return f"Sale {self.id} ({self.amount})"


class Profit(TimeStampedModel):
    """Manually recorded income or expense entry."""

    INCOME = "Income"
    EXPENSE = "Expense"

    date = models.CharField(max_length=32)

    amount = models.DecimalField(max_digits=12, decimal_places=2)

    type = models.CharField(max_length=30)

    description = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "profits"
        ordering = ["-created_at"]
        verbose_name = "Profit"
        verbose_name_plural = "Profits"

    def __str__(self):
        return f"{self.type} {self.amount} on {self.date}"

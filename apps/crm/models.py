"""
CRM models: customers and their credit ledger.
"""

from decimal import Decimal

from django.db import models

from apps.core.models import TimeStampedModel


class Customer(TimeStampedModel):
    """Shop customer."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"

    name = models.CharField(max_length=255, help_text="Customer's full name")

    email = models.EmailField(null=True, blank=True)

    phone = models.CharField(max_length=30, null=True, blank=True)

    gender = models.CharField(max_length=20, null=True, blank=True)

    address = models.TextField(null=True, blank=True)

    signature = models.TextField(null=True, blank=True, help_text="Captured signature image data")

    status = models.CharField(max_length=30, default=ACTIVE)

    avatar = models.CharField(max_length=500, null=True, blank=True)

    total_debt = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Outstanding balance across all credit records",
    )

    class Meta:
        db_table = "customers"
        ordering = ["name"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"

    def __str__(self):
        return self.name


class Credit(TimeStampedModel):
    """
    Credit ledger entry: an amount a customer owes, with partial payments.
    """

    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"
    OVERDUE = "Overdue"

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="credits",
        help_text="Customer who owes the amount",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)

    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    # Stored as entered (YYYY-MM-DD)
    due_date = models.CharField(max_length=32, null=True, blank=True)

    status = models.CharField(max_length=30, default=PENDING)

    notes = models.TextField(null=True, blank=True)

    payment_terms = models.CharField(max_length=100, null=True, blank=True)

    interest_rate = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    reference = models.CharField(max_length=100, null=True, blank=True)

    contact_phone = models.CharField(max_length=30, null=True, blank=True)

    class Meta:
        db_table = "credits"
        ordering = ["-created_at"]
        verbose_name = "Credit"
        verbose_name_plural = "Credits"

    def __str__(self):
        return f"{self.customer_id} owes {self.amount}"

    @property
    def balance(self):
        return self.amount - self.amount_paid

"""
Inventory models: product categories and stocked products.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel


class Category(TimeStampedModel):
    """Product category shown in inventory filters."""

    name = models.CharField(max_length=100, help_text="Category name")

    description = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name = "Category"
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name


class Product(TimeStampedModel):
    """
    Stocked product.

    The category is stored by name rather than as a foreign key; renaming or
    deleting a category never touches products.
    """

    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"

    name = models.CharField(max_length=255, help_text="Product name")

    category = models.CharField(max_length=100, blank=True, help_text="Category name")

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Selling price",
    )

    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Purchase cost",
    )

    stock = models.IntegerField(default=0, help_text="Units in stock")

    status = models.CharField(max_length=30, default=IN_STOCK)

    image = models.CharField(max_length=500, null=True, blank=True, help_text="Image path or URL")

    class Meta:
        db_table = "products"
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["status"], name="product_status_idx"),
        ]

    def __str__(self):
        return self.name

from django.contrib import admin

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "category", "price", "cost_price", "stock", "status"]

    list_filter = ["status", "category"]

    search_fields = ["name", "category"]

    readonly_fields = ["id", "created_at", "updated_at"]

from django.contrib import admin

from .models import Profit, Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Admin interface for Sale model."""

    list_display = ["id", "date", "customer", "product", "amount", "status"]

    list_filter = ["status"]

    search_fields = ["customer__name", "product__name"]

    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(Profit)
class ProfitAdmin(admin.ModelAdmin):
    list_display = ["date", "type", "amount", "description"]
    list_filter = ["type"]

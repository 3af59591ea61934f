from django.contrib import admin

from .models import Credit, Customer


class CreditInline(admin.TabularInline):
    model = Credit
    extra = 0
    fields = ["amount", "amount_paid", "due_date", "status"]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer model."""

    list_display = ["name", "email", "phone", "status", "total_debt"]

    list_filter = ["status"]

    search_fields = ["name", "email", "phone"]

    readonly_fields = ["id", "created_at", "updated_at"]

    inlines = [CreditInline]


@admin.register(Credit)
class CreditAdmin(admin.ModelAdmin):
    list_display = ["customer", "amount", "amount_paid", "due_date", "status"]
    list_filter = ["status"]
    search_fields = ["customer__name", "reference"]

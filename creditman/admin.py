"""Creditman admin (CORE only).

The ledger is read-only here: transactions are written by LedgerService and
never edited by hand.

Contrib models have their own admin in their respective modules:
- creditman.contrib.vouchers.admin: VoucherAdmin
"""

from django.contrib import admin
from django.utils.html import format_html

from creditman.models import (
    CreditPointsAccount,
    CreditPointsTransaction,
    Customer,
    Restaurant,
)


# ===========================================
# Restaurant Admin
# ===========================================


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "credit_points_buying_rate",
        "credit_points_selling_rate",
        "credit_points_lifetime",
        "voucher_lifetime",
        "is_active",
    ]
    list_filter = ["is_active"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["name", "is_active"]}),
        (
            "Credit points",
            {
                "fields": [
                    "credit_points_buying_rate",
                    "credit_points_selling_rate",
                    "credit_points_lifetime",
                ]
            },
        ),
        ("Vouchers", {"fields": ["voucher_lifetime", "voucher_min_value"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]


# ===========================================
# Customer Admin
# ===========================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "restaurant_id", "email", "phone", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["first_name", "last_name", "email", "phone"]
    list_editable = ["is_active"]
    readonly_fields = ["created_at", "updated_at"]


# ===========================================
# Ledger Admin
# ===========================================


@admin.register(CreditPointsAccount)
class CreditPointsAccountAdmin(admin.ModelAdmin):
    list_display = ["customer_id", "restaurant_id", "opened_at"]
    list_filter = ["restaurant_id"]
    search_fields = ["customer_id"]
    readonly_fields = ["customer_id", "restaurant_id", "opened_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CreditPointsTransaction)
class CreditPointsTransactionAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "kind",
        "points_badge",
        "monetary_value",
        "customer_id",
        "restaurant_id",
        "occurred_at",
        "is_expired",
    ]
    list_filter = ["kind", "is_expired", "restaurant_id"]
    search_fields = ["receipt_id", "customer_id"]
    date_hierarchy = "occurred_at"
    raw_id_fields = ["source_earn"]
    readonly_fields = [
        "customer_id",
        "restaurant_id",
        "kind",
        "points",
        "monetary_value",
        "occurred_at",
        "is_expired",
        "source_earn",
        "receipt_id",
        "created_at",
    ]

    def points_badge(self, obj):
        color = "green" if obj.points > 0 else "#dc3545"
        return format_html('<span style="color: {};">{}</span>', color, f"{obj.points:+d}")

    points_badge.short_description = "Points"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

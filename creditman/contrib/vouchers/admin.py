"""Vouchers admin."""

from django.contrib import admin
from django.utils.html import format_html

from creditman.contrib.vouchers.models import Voucher


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    list_display = [
        "short_code",
        "customer_id",
        "restaurant_id",
        "points",
        "value",
        "status_badge",
        "created_at",
    ]
    list_filter = ["is_used", "created_at"]
    search_fields = ["short_code"]
    readonly_fields = [
        "customer_id",
        "restaurant_id",
        "short_code",
        "points",
        "value",
        "created_at",
        "is_used",
        "used_at",
    ]

    def status_badge(self, obj):
        color, label = ("#6c757d", "Used") if obj.is_used else ("#28a745", "Open")
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            label,
        )

    status_badge.short_description = "Status"

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

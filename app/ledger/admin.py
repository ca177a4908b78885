"""
Ledger admin configuration.

Balances and paid flags are read-only here; they only change through the
settlement and deposit services.
"""

from django.contrib import admin

from ledger.models import Contract, Job, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["id", "first_name", "last_name", "profession", "type", "balance"]
    list_filter = ["type"]
    search_fields = ["first_name", "last_name", "profession"]
    readonly_fields = ["balance", "created_at", "updated_at"]
    ordering = ["id"]


class JobInline(admin.TabularInline):
    model = Job
    extra = 0
    fields = ["description", "price", "paid", "payment_date"]
    readonly_fields = ["paid", "payment_date"]


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ["id", "client", "contractor", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["terms", "client__last_name", "contractor__last_name"]
    raw_id_fields = ["client", "contractor"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [JobInline]
    ordering = ["id"]


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    """
    Admin configuration for Job.

    ``paid`` and ``payment_date`` are set by SettlementService only.
    """

    list_display = ["id", "contract", "price", "paid", "payment_date"]
    list_filter = ["paid"]
    search_fields = ["description"]
    raw_id_fields = ["contract"]
    readonly_fields = ["paid", "payment_date", "created_at", "updated_at"]
    date_hierarchy = "payment_date"
    ordering = ["id"]

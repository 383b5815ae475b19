from django.contrib import admin

from matchday.models import (
    BadgeRecord,
    EventRecord,
    GamificationRuleRecord,
    InventoryItemRecord,
    PlayerRecord,
    RankRecord,
    TransactionRecord,
    VoucherRecord,
)


@admin.register(EventRecord)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "date", "status", "game_fee"]
    list_filter = ["status", "event_type"]
    search_fields = ["title", "location"]
    readonly_fields = ["version", "attendees", "live_stats", "teams"]


@admin.register(PlayerRecord)
class PlayerAdmin(admin.ModelAdmin):
    list_display = ["name", "callsign", "xp", "games_played"]
    search_fields = ["name", "callsign"]
    readonly_fields = ["version", "match_history", "xp_adjustments"]


@admin.register(VoucherRecord)
class VoucherAdmin(admin.ModelAdmin):
    list_display = ["code", "discount_type", "discount_value", "status", "usage_limit"]
    list_filter = ["status"]
    readonly_fields = ["version", "redemptions"]


@admin.register(InventoryItemRecord)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "sale_price", "stock", "is_rental"]
    list_filter = ["is_rental", "category"]


@admin.register(TransactionRecord)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ["id", "date", "type", "amount", "payment_status"]
    list_filter = ["type", "payment_status"]

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(GamificationRuleRecord)
admin.site.register(RankRecord)
admin.site.register(BadgeRecord)

from django.contrib import admin
from .models import Itinerary


@admin.register(Itinerary)
class ItineraryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "user", "spots_count", "created_at")
    list_filter = ("created_at",)
    search_fields = ("name", "user__username", "user__email")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    list_select_related = ("user",)
    raw_id_fields = ("user",)
    readonly_fields = ("created_at", "spots")

    def spots_count(self, obj):
        return obj.spot_count
    spots_count.short_description = "Spots"

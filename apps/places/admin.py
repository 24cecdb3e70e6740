from django.contrib import admin
from .models import Accommodation, Event, Restaurant, SpotTag, TouristSpot


class SpotTagInline(admin.TabularInline):
    model = SpotTag
    extra = 1
    ordering = ("position",)


@admin.register(TouristSpot)
class TouristSpotAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'municipality', 'location', 'rating')
    search_fields = ('name', 'municipality', 'location')
    list_filter = ('municipality',)
    inlines = [SpotTagInline]


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'food_type', 'municipality')
    search_fields = ('name', 'municipality', 'food_type')


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'event_type', 'event_date', 'municipality')
    search_fields = ('name', 'municipality', 'event_type')
    list_filter = ('event_type',)
    date_hierarchy = 'event_date'


@admin.register(Accommodation)
class AccommodationAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'municipality', 'price_range', 'rating')
    search_fields = ('name', 'municipality', 'location')

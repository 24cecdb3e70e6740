from dataclasses import dataclass
from typing import Tuple, Type

from django import forms
from django.db import models
from django.http import Http404

from apps.places.models import Accommodation, Event, Restaurant, TouristSpot
from apps.places.services import with_categories
from .forms import AccommodationForm, EventForm, RestaurantForm, TouristSpotForm


@dataclass(frozen=True)
class Panel:
    slug: str
    label: str
    model: Type[models.Model]
    form_class: Type[forms.ModelForm]
    ordering: Tuple[str, ...]
    list_columns: Tuple[str, ...]

    @property
    def verbose_name(self):
        return self.model._meta.verbose_name

    def queryset(self):
        qs = self.model.objects.order_by(*self.ordering)
        if self.model is TouristSpot:
            qs = with_categories(qs)
        return qs


PANELS = {
    panel.slug: panel
    for panel in (
        Panel("spots", "Tourist Spots", TouristSpot, TouristSpotForm,
              ("name",), ("name", "municipality", "location")),
        Panel("restaurants", "Restaurants", Restaurant, RestaurantForm,
              ("name",), ("name", "food_type", "municipality")),
        Panel("events", "Events", Event, EventForm,
              ("event_date", "name"), ("name", "event_type", "event_date", "municipality")),
        Panel("accommodations", "Accommodations", Accommodation, AccommodationForm,
              ("name",), ("name", "municipality", "price_range")),
    )
}


def get_panel(slug) -> Panel:
    try:
        return PANELS[slug]
    except KeyError:
        raise Http404(f"Unknown panel: {slug}")

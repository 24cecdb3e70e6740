# apps/adminpanel/forms.py
from decimal import Decimal

from django import forms
from django.db import transaction

from apps.places.models import Accommodation, Event, Restaurant, TouristSpot
from apps.tags.models import Tag


class CommaSeparatedField(forms.CharField):
    """
    "Beach, Sunset Views, Island Hopping" <-> ["Beach", "Sunset Views", "Island Hopping"]
    Items are trimmed, empty items dropped and duplicates removed (first one wins).
    ``max_item_length`` caps each item.
    """

    def __init__(self, *args, max_item_length=None, **kwargs):
        self.max_item_length = max_item_length
        super().__init__(*args, **kwargs)

    def prepare_value(self, value):
        if isinstance(value, (list, tuple)):
            return ", ".join(value)
        return value

    def to_python(self, value):
        if isinstance(value, (list, tuple)):
            items = value
        else:
            value = super().to_python(value)
            items = value.split(",")
        return list(dict.fromkeys(item.strip() for item in items if item and item.strip()))

    def validate(self, value):
        super().validate(value)
        if self.max_item_length is None:
            return
        too_long = [item for item in value if len(item) > self.max_item_length]
        if too_long:
            raise forms.ValidationError(
                "Each item must be at most %(limit)d characters: %(items)s",
                code="item_too_long",
                params={"limit": self.max_item_length, "items": ", ".join(too_long)},
            )


class RatingDefaultMixin:
    """Blank rating on the form means "not rated yet" (0.0)."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if "rating" in self.fields:
            self.fields["rating"].required = False

    def clean_rating(self):
        rating = self.cleaned_data.get("rating")
        return Decimal("0.0") if rating is None else rating


class TouristSpotForm(RatingDefaultMixin, forms.ModelForm):
    categories = CommaSeparatedField(
        max_item_length=Tag._meta.get_field("name").max_length,
        help_text="Comma separated, e.g. Beach, Sunset Views, Island Hopping",
    )

    class Meta:
        model = TouristSpot
        fields = [
            "name", "location", "municipality", "description", "contact_number",
            "image_url", "latitude", "longitude", "rating",
        ]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk and "categories" not in self.initial:
            self.initial["categories"] = self.instance.category_names

    def clean(self):
        cleaned = super().clean()
        lat, lng = cleaned.get("latitude"), cleaned.get("longitude")
        if (lat is None) != (lng is None):
            raise forms.ValidationError("Latitude and longitude must be given together.")
        return cleaned

    def save(self, commit=True):
        if not commit:
            return super().save(commit=False)
        # spot row and its categories land together or not at all
        with transaction.atomic():
            spot = super().save()
            spot.set_category_names(self.cleaned_data["categories"])
        return spot


class RestaurantForm(forms.ModelForm):
    class Meta:
        model = Restaurant
        fields = ["name", "food_type", "location", "municipality", "description", "image_url"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }


class EventForm(forms.ModelForm):
    class Meta:
        model = Event
        fields = ["name", "event_type", "location", "municipality", "description", "event_date", "image_url"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
            "event_date": forms.DateInput(attrs={"type": "date"}),
        }


class AccommodationForm(RatingDefaultMixin, forms.ModelForm):
    categories = CommaSeparatedField(required=False, help_text="Comma separated")
    amenities = CommaSeparatedField(required=False, help_text="Comma separated, e.g. WiFi, Pool, Parking")

    class Meta:
        model = Accommodation
        fields = [
            "name", "location", "municipality", "description", "categories", "amenities",
            "price_range", "contact_number", "email", "image_url", "rating",
        ]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
        }

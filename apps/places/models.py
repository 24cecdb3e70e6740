from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction

from apps.tags.models import Tag

RATING_VALIDATORS = [MinValueValidator(Decimal("0.0")), MaxValueValidator(Decimal("5.0"))]


class TouristSpot(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=300)
    municipality = models.CharField(max_length=100, blank=True)  # filter key (e.g. Legazpi, Daraga)
    categories = models.ManyToManyField(Tag, through="SpotTag", blank=True, related_name="spots")
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    image_url = models.URLField(blank=True)
    contact_number = models.CharField(max_length=50, blank=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal("0.0"), validators=RATING_VALIDATORS)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None

    @property
    def category_names(self):
        # spot_tags.all() so a Prefetch("spot_tags") is reused
        return [st.tag.name for st in self.spot_tags.all()]

    def set_category_names(self, names):
        """Replace the spot's categories, keeping the given order."""
        names = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
        with transaction.atomic():
            self.spot_tags.all().delete()
            for position, name in enumerate(names):
                tag, _ = Tag.objects.get_or_create(name=name)
                SpotTag.objects.create(spot=self, tag=tag, position=position)
        if hasattr(self, "_prefetched_objects_cache"):
            self._prefetched_objects_cache.pop("spot_tags", None)


class SpotTag(models.Model):
    spot = models.ForeignKey(TouristSpot, related_name="spot_tags", on_delete=models.CASCADE)
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["spot", "tag"], name="unique_spot_tag")
        ]


class Restaurant(models.Model):
    name = models.CharField(max_length=200)
    food_type = models.CharField(max_length=100, blank=True)
    location = models.CharField(max_length=300)
    municipality = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Event(models.Model):
    name = models.CharField(max_length=200)
    event_type = models.CharField(max_length=100, blank=True)
    location = models.CharField(max_length=300)
    municipality = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    event_date = models.DateField(null=True, blank=True)
    image_url = models.URLField(blank=True)

    class Meta:
        ordering = ["event_date"]

    def __str__(self):
        return self.name


class Accommodation(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=300)
    municipality = models.CharField(max_length=100, blank=True)
    categories = models.JSONField(default=list, blank=True)
    image_url = models.URLField(blank=True)
    contact_number = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    price_range = models.CharField(max_length=50, blank=True)
    amenities = models.JSONField(default=list, blank=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal("0.0"), validators=RATING_VALIDATORS)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

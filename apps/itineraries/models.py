from django.conf import settings
from django.db import models

from .snapshots import SpotSnapshot


class Itinerary(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="itineraries", on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    selected_categories = models.JSONField(default=list, blank=True)
    spots = models.JSONField(default=list, blank=True)  # list of SpotSnapshot.to_dict()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "itineraries"

    def __str__(self):
        return self.name

    @property
    def spot_snapshots(self):
        return [SpotSnapshot.from_dict(s) for s in self.spots or []]

    @property
    def spot_count(self):
        return len(self.spots or [])

from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.db.models import Prefetch, Q, QuerySet
from django.urls import reverse

from .models import SpotTag, TouristSpot

EXPLORE_CATEGORIES = [
    "Nature", "Culture", "Adventure", "Food", "Beach", "Heritage",
    "Religious Sites", "Waterfalls", "Mountains", "Museums", "Parks",
    "Festivals", "Shopping", "Eco-tourism",
]

MATCH_ALL = "all"
MATCH_ANY = "any"


def with_categories(qs: QuerySet) -> QuerySet:
    """Prefetch ordered category tags so ``spot.category_names`` costs no extra queries."""
    return qs.prefetch_related(
        Prefetch("spot_tags", queryset=SpotTag.objects.select_related("tag").order_by("position"))
    )


def parse_selected_categories(request) -> Tuple[List[str], str]:
    """
    ?categories=Nature&categories=Food or ?categories=Nature,Food (&match=any|all)
    """
    selected = []
    for raw in request.GET.getlist("categories"):
        selected += [c.strip() for c in raw.split(",")]

    selected = list(dict.fromkeys(c for c in selected if c))

    match = (request.GET.get("match") or MATCH_ALL).lower()
    if match not in (MATCH_ALL, MATCH_ANY):
        match = MATCH_ALL
    return selected, match


def search_text(qs: QuerySet, query: Optional[str]) -> QuerySet:
    """Case-insensitive substring match on name or municipality."""
    query = (query or "").strip()
    if not query:
        return qs
    return qs.filter(Q(name__icontains=query) | Q(municipality__icontains=query))


def filter_by_categories(qs: QuerySet, categories: Iterable[str], match: str = MATCH_ALL) -> QuerySet:
    categories = list(categories)
    if not categories:
        return qs

    if match == MATCH_ANY:
        return qs.filter(categories__name__in=categories).distinct()

    # every active category must be present
    for name in categories:
        qs = qs.filter(categories__name=name)
    return qs.distinct()


def filter_spots(query: Optional[str] = "", categories: Iterable[str] = (), match: str = MATCH_ALL) -> QuerySet:
    qs = TouristSpot.objects.all().order_by("name")
    qs = search_text(qs, query)
    qs = filter_by_categories(qs, categories, match)
    return with_categories(qs)


def overlapping_spots(categories: Iterable[str]) -> QuerySet:
    """Spots sharing at least one category with ``categories``."""
    qs = TouristSpot.objects.filter(categories__name__in=list(categories)).distinct().order_by("name")
    return with_categories(qs)


def directions_url(spot) -> str:
    if not spot.has_coordinates:
        return ""
    return f"https://www.google.com/maps/dir/?api=1&destination={spot.latitude},{spot.longitude}"


def map_markers() -> dict:
    spots = with_categories(
        TouristSpot.objects.exclude(latitude=None).exclude(longitude=None).order_by("name")
    )
    return {
        "center": settings.MAP_CENTER,
        "zoom": settings.MAP_ZOOM,
        "markers": [
            {
                "id": spot.id,
                "name": spot.name,
                "municipality": spot.municipality,
                "lat": float(spot.latitude),
                "lng": float(spot.longitude),
                "categories": spot.category_names,
                "image_url": spot.image_url,
                "url": reverse("places:spot_detail", args=[spot.id]),
                "directions_url": directions_url(spot),
            }
            for spot in spots
        ],
    }

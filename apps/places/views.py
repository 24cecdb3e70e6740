import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_GET, require_POST

from apps.itineraries.services import ItineraryBackendError, create_quick_trip
from apps.reviews.forms import ReviewForm
from apps.reviews.services import review_summary
from services.weather import WeatherUnavailable, fetch_current_weather
from .models import Accommodation, Event, Restaurant, TouristSpot
from .services import (
    EXPLORE_CATEGORIES,
    directions_url,
    filter_spots,
    map_markers,
    parse_selected_categories,
    search_text,
    with_categories,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 21


def _is_ajax(request):
    return request.headers.get("X-Requested-With") == "XMLHttpRequest"


def home(request):
    featured = with_categories(TouristSpot.objects.order_by("-rating", "name"))[:6]
    return render(request, "places/home.html", {"featured": featured})


@require_GET
def explore(request):
    tab = request.GET.get("tab", "destinations")
    query = (request.GET.get("q") or "").strip()
    selected, match = parse_selected_categories(request)

    if tab == "accommodations":
        qs = search_text(Accommodation.objects.order_by("name"), query)
    else:
        tab = "destinations"
        qs = filter_spots(query, selected, match)

    paginator = Paginator(qs, PAGE_SIZE)
    page_obj = paginator.get_page(request.GET.get("page"))

    # querystring without page
    q = request.GET.copy()
    q.pop("page", None)
    base_qs = q.urlencode()

    return render(request, "places/explore.html", {
        "tab": tab,
        "items": page_obj,
        "query": query,
        "categories": EXPLORE_CATEGORIES,
        "selected_categories": selected,
        "match": match,
        "base_prefix": f"?{base_qs}&" if base_qs else "?",
    })


@require_GET
def restaurant_list(request):
    query = (request.GET.get("q") or "").strip()
    qs = search_text(Restaurant.objects.order_by("name"), query)
    page_obj = Paginator(qs, PAGE_SIZE).get_page(request.GET.get("page"))
    return render(request, "places/restaurant_list.html", {"items": page_obj, "query": query})


@require_GET
def event_list(request):
    query = (request.GET.get("q") or "").strip()
    qs = search_text(Event.objects.order_by("event_date", "name"), query)
    page_obj = Paginator(qs, PAGE_SIZE).get_page(request.GET.get("page"))
    return render(request, "places/event_list.html", {"items": page_obj, "query": query})


def spot_detail(request, pk):
    spot = with_categories(TouristSpot.objects.filter(pk=pk)).first()
    if spot is None:
        return render(request, "places/spot_not_found.html", {"spot_id": pk}, status=404)

    summary = review_summary(spot, viewer=request.user)
    return render(request, "places/spot_detail.html", {
        "spot": spot,
        "directions_url": directions_url(spot),
        "review_form": ReviewForm(),
        **summary,
    })


@login_required
@require_POST
def quick_add(request, pk):
    spot = get_object_or_404(with_categories(TouristSpot.objects.all()), pk=pk)

    try:
        itinerary = create_quick_trip(request.user, spot)
    except ItineraryBackendError as e:
        if _is_ajax(request):
            return JsonResponse({"ok": False, "error": str(e)}, status=500)
        messages.error(request, str(e))
    else:
        if _is_ajax(request):
            return JsonResponse({"ok": True, "itinerary": {"id": itinerary.id, "name": itinerary.name}})
        messages.success(request, "Added to your itinerary!")

    next_url = request.POST.get("next")
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect("places:explore")


def map_page(request):
    return render(request, "places/map.html")


@require_GET
def map_markers_json(request):
    try:
        data = map_markers()
    except DatabaseError:
        logger.exception("Loading map markers failed")
        return JsonResponse({"ok": False, "error": "Failed to load tourist spots"}, status=500)
    return JsonResponse({"ok": True, **data})


@require_GET
def weather(request):
    city = (request.GET.get("city") or settings.WEATHER_DEFAULT_CITY).strip()
    try:
        report = fetch_current_weather(city)
    except WeatherUnavailable:
        return JsonResponse({"ok": False, "error": "weather_unavailable"})
    return JsonResponse({"ok": True, "weather": report.to_dict()})

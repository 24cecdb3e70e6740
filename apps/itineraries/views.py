# apps/itineraries/views.py
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from apps.users.onboarding import stored_preferences
from .models import Itinerary
from .services import (
    INTEREST_CATEGORIES,
    ItineraryBackendError,
    ItineraryBuilder,
    ItineraryValidationError,
)

logger = logging.getLogger(__name__)


@login_required
@require_GET
def builder(request):
    state = ItineraryBuilder.from_session(request.session)
    if not state.categories and not state.candidates:
        # first visit: start from the interests picked during onboarding
        preferences = stored_preferences(getattr(request.user, "profile", None))
        if preferences:
            state.set_categories(preferences.interests)
    return render(request, "itineraries/builder.html", {
        "interests": INTEREST_CATEGORIES,
        "builder": state,
        "selected_count": len(state.selected),
    })


@login_required
@require_POST
def generate(request):
    state = ItineraryBuilder.from_session(request.session)
    state.set_categories(request.POST.getlist("categories"))

    try:
        candidates = state.generate()
    except (ItineraryValidationError, ItineraryBackendError) as e:
        messages.error(request, str(e))
    else:
        messages.success(request, f"Found {len(candidates)} amazing spots for you!")

    state.save_to(request.session)
    return redirect("itineraries:builder")


@login_required
@require_POST
def toggle_spot(request, spot_id: int):
    state = ItineraryBuilder.from_session(request.session)
    state.toggle_spot(spot_id)
    state.save_to(request.session)

    if request.headers.get("X-Requested-With") == "XMLHttpRequest":
        return JsonResponse({
            "ok": True,
            "selected": spot_id in state.selected_ids,
            "selected_count": len(state.selected),
            "total": len(state.candidates),
        })
    return redirect("itineraries:builder")


@login_required
@require_POST
def save(request):
    state = ItineraryBuilder.from_session(request.session)
    try:
        state.save(request.user)
    except (ItineraryValidationError, ItineraryBackendError) as e:
        messages.error(request, str(e))
        return redirect("itineraries:builder")

    ItineraryBuilder.clear(request.session)
    messages.success(request, "Itinerary saved successfully!")
    return redirect("users:dashboard")


@login_required
@require_POST
def reset(request):
    ItineraryBuilder.clear(request.session)
    return redirect("itineraries:builder")


@login_required
@require_GET
def my_itineraries_json(request):
    """Own itineraries as (id, name) pairs, newest first."""
    qs = Itinerary.objects.filter(user=request.user).order_by("-created_at")
    data = [{"id": i.id, "name": i.name, "spots": i.spot_count} for i in qs]
    return JsonResponse({"itineraries": data})


@login_required
def itinerary_detail(request, itinerary_id: int):
    itinerary = get_object_or_404(Itinerary, pk=itinerary_id, user=request.user)
    return render(request, "itineraries/detail.html", {
        "itinerary": itinerary,
        "spots": itinerary.spot_snapshots,
    })


@login_required
@require_http_methods(["POST"])
def delete_itinerary(request, itinerary_id: int):
    itinerary = get_object_or_404(Itinerary, pk=itinerary_id, user=request.user)
    is_ajax = request.headers.get("X-Requested-With") == "XMLHttpRequest"

    try:
        itinerary.delete()
    except DatabaseError:
        logger.exception("Deleting itinerary %s failed", itinerary_id)
        if is_ajax:
            return JsonResponse({"ok": False, "error": "delete_failed"}, status=500)
        messages.error(request, "Failed to delete itinerary")
        return redirect("users:dashboard")

    if is_ajax:
        return JsonResponse({"ok": True})
    messages.success(request, "Itinerary deleted")
    return redirect("users:dashboard")

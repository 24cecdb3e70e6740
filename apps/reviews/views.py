import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.contrib.auth.mixins import LoginRequiredMixin
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST
from django.views.generic import CreateView

from apps.places.models import TouristSpot
from .forms import ReviewForm
from .models import Review
from .services import review_summary

logger = logging.getLogger(__name__)


class SpotReviewCreateView(LoginRequiredMixin, CreateView):
    model = Review
    form_class = ReviewForm
    http_method_names = ["post"]

    def dispatch(self, request, *args, **kwargs):
        self.spot = get_object_or_404(TouristSpot, pk=self.kwargs.get("spot_id"))
        return super().dispatch(request, *args, **kwargs)

    def form_valid(self, form):
        form.instance.user = self.request.user
        form.instance.spot = self.spot
        try:
            self.object = form.save()
        except DatabaseError:
            logger.exception("Saving review failed for spot %s", self.spot.pk)
            messages.error(self.request, "Failed to submit review")
            return redirect(self.get_success_url())

        messages.success(self.request, "Review submitted successfully")
        return redirect(self.get_success_url())

    def form_invalid(self, form):
        messages.error(self.request, "Please select a rating between 1 and 5")
        return redirect(self.get_success_url())

    def get_success_url(self):
        return reverse("places:spot_detail", kwargs={"pk": self.spot.pk})


def spot_review_list_fragment(request, spot_id):
    """Review list + average for partial refresh of the spot page."""
    spot = get_object_or_404(TouristSpot, pk=spot_id)
    return render(request, "reviews/review_list_fragment.html", {
        "spot": spot,
        **review_summary(spot, viewer=request.user),
    })


@login_required
@require_POST
def delete_review(request, spot_id, review_id):
    """Only the author can delete; other users get a 404."""
    review = get_object_or_404(Review, pk=review_id, spot_id=spot_id, user=request.user)
    is_ajax = request.headers.get("X-Requested-With") == "XMLHttpRequest"

    try:
        review.delete()
    except DatabaseError:
        logger.exception("Deleting review %s failed", review_id)
        if is_ajax:
            return JsonResponse({"success": False, "message": "Failed to delete review"}, status=500)
        messages.error(request, "Failed to delete review")
        return redirect("places:spot_detail", pk=spot_id)

    if is_ajax:
        return JsonResponse({"success": True, "message": "Review deleted successfully"})
    messages.success(request, "Review deleted successfully")
    return redirect("places:spot_detail", pk=spot_id)

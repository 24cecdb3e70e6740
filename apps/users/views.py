import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from apps.itineraries.models import Itinerary
from apps.reviews.models import Review
from .forms import ProfileForm
from .models import Profile
from .onboarding import IncompleteStepError, OnboardingSubmitError, OnboardingWizard, stored_preferences

logger = logging.getLogger(__name__)


def _profile_for(user):
    profile, _ = Profile.objects.get_or_create(user=user)
    return profile


@login_required
def dashboard(request):
    profile = _profile_for(request.user)

    itineraries_qs = Itinerary.objects.filter(user=request.user).order_by("-created_at")
    paginator = Paginator(itineraries_qs, 9)
    itineraries_page = paginator.get_page(request.GET.get("page"))

    recent_reviews = (
        Review.objects
        .filter(user=request.user)
        .select_related("spot")
        .order_by("-created_at")[:5]
    )

    return render(request, "users/dashboard.html", {
        "profile": profile,
        "itineraries_page": itineraries_page,
        "itineraries_total": itineraries_qs.count(),
        "recent_reviews": recent_reviews,
        "preferences": stored_preferences(profile),
    })


@login_required
@require_http_methods(["GET", "POST"])
def edit_profile(request):
    profile = _profile_for(request.user)

    if request.method == "POST":
        form = ProfileForm(request.POST, instance=profile)
        if form.is_valid():
            try:
                form.save()
            except DatabaseError:
                logger.exception("Profile update failed for user %s", request.user.pk)
                messages.error(request, "Failed to update profile")
            else:
                messages.success(request, "Profile updated successfully")
                return redirect("users:dashboard")
        else:
            messages.error(request, "Please check the highlighted fields")
    else:
        form = ProfileForm(instance=profile)

    return render(request, "users/profile_form.html", {"form": form, "profile": profile})


@login_required
@require_http_methods(["GET", "POST"])
def onboarding(request):
    profile = _profile_for(request.user)
    if profile.onboarding_completed:
        return redirect("users:dashboard")

    wizard = OnboardingWizard.from_session(request.session)

    if request.method == "POST":
        action = request.POST.get("action", "next")
        wizard.load_step(request.POST)

        if action == "previous":
            wizard.previous()
        elif not wizard.is_step_complete():
            messages.error(request, "Please answer every question before continuing.")
        elif wizard.advance():
            try:
                wizard.submit(profile)
            except OnboardingSubmitError as e:
                messages.error(request, str(e))
            except IncompleteStepError as e:
                wizard.step = e.step
                messages.error(request, "Please answer every question before continuing.")
            else:
                OnboardingWizard.clear(request.session)
                messages.success(request, "Welcome to Wanderer! Your preferences have been saved.")
                return redirect("users:dashboard")

        wizard.save_to(request.session)
        return redirect("users:onboarding")

    wizard.save_to(request.session)
    return render(request, "users/onboarding.html", {
        "wizard": wizard,
        "step": wizard.current,
        "questions": [(q, wizard.answers.get(q.id)) for q in wizard.current.questions],
        "step_range": range(1, wizard.total_steps + 1),
    })

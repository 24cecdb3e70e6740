# apps/users/middleware.py

from django.shortcuts import redirect
from django.urls import reverse

EXEMPT_PREFIXES = ("/accounts/", "/django-admin/", "/static/", "/users/onboarding/")


class RequireOnboardingMiddleware:
    """Keep signed-in users on the onboarding wizard until they complete it."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if (
            request.user.is_authenticated and
            not request.path.startswith(EXEMPT_PREFIXES) and
            not self._onboarding_completed(request.user)
        ):
            return redirect(reverse("users:onboarding"))
        return self.get_response(request)

    @staticmethod
    def _onboarding_completed(user):
        profile = getattr(user, "profile", None)
        # users created before profiles existed are not forced through the wizard
        return profile is None or profile.onboarding_completed

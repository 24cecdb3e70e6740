# apps/users/adapter.py
from allauth.account.adapter import DefaultAccountAdapter
from django.urls import reverse

from .models import Profile


class WandererAccountAdapter(DefaultAccountAdapter):
    def save_user(self, request, user, form, commit=True):
        """
        Copy the signup full name onto the profile created for the new user.
        """
        user = super().save_user(request, user, form, commit=commit)
        full_name = (getattr(form, "cleaned_data", {}) or {}).get("full_name", "")
        if commit and full_name:
            profile, _ = Profile.objects.get_or_create(user=user)
            profile.full_name = full_name
            profile.save(update_fields=["full_name", "updated_at"])
        return user

    def get_login_redirect_url(self, request):
        """
        New users land on the onboarding wizard, everyone else on the dashboard.
        """
        profile = getattr(request.user, "profile", None)
        if profile is not None and not profile.onboarding_completed:
            return reverse("users:onboarding")
        return super().get_login_redirect_url(request)

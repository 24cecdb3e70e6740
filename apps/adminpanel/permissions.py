from django.contrib import messages
from django.contrib.auth.mixins import UserPassesTestMixin
from django.shortcuts import redirect

from apps.users.models import is_admin


class AdminRoleRequiredMixin(UserPassesTestMixin):
    """
    Anonymous users go to sign-in; signed-in users without the admin role
    are sent back to their dashboard.
    """

    def test_func(self):
        return is_admin(self.request.user)

    def handle_no_permission(self):
        if not self.request.user.is_authenticated:
            return super().handle_no_permission()
        messages.error(self.request, "You don't have access to the admin panel.")
        return redirect("users:dashboard")

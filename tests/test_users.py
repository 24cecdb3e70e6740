import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.management import CommandError, call_command
from django.test import RequestFactory
from django.urls import reverse

from apps.places.models import TouristSpot
from apps.users.adapter import WandererAccountAdapter
from apps.users.context_processors import session_context
from apps.users.forms import EmailSignupForm
from apps.users.models import Profile, UserRole, is_admin

User = get_user_model()


@pytest.mark.django_db
class TestProfile:
    def test_profile_created_with_user(self):
        user = User.objects.create_user(username="bikolano", email="b@example.com", password="x")
        profile = Profile.objects.get(pk=user.pk)
        assert profile.onboarding_completed is False
        assert profile.onboarding_answers in (None, {})

    def test_display_name_falls_back_to_anonymous(self, user):
        Profile.objects.filter(pk=user.pk).update(full_name="")
        assert Profile.objects.get(pk=user.pk).display_name == "Anonymous"

    def test_edit_profile(self, auth_client, user):
        response = auth_client.post(reverse("users:edit_profile"), {
            "full_name": "  Juan D. Cruz ",
            "bio": "Volcano chaser",
            "avatar_url": "",
        })

        assert response["Location"] == reverse("users:dashboard")
        profile = Profile.objects.get(pk=user.pk)
        assert (profile.full_name, profile.bio) == ("Juan D. Cruz", "Volcano chaser")

    def test_blank_name_is_rejected(self, auth_client, user):
        response = auth_client.post(reverse("users:edit_profile"), {"full_name": "   ", "bio": ""})
        assert response.status_code == 200
        assert Profile.objects.get(pk=user.pk).full_name == "Juan Dela Cruz"


@pytest.mark.django_db
class TestSessionContext:
    def test_anonymous(self, rf):
        request = rf.get("/")
        request.user = AnonymousUser()
        assert session_context(request) == {"current_profile": None, "is_admin": False}

    def test_admin_flag(self, rf, user, admin_user):
        request = rf.get("/")
        request.user = admin_user
        assert session_context(request)["is_admin"] is True
        request.user = user
        assert session_context(request)["is_admin"] is False

    def test_navbar_shows_admin_link_only_for_admins(self, client, user, admin_user):
        client.force_login(user)
        assert reverse("adminpanel:dashboard") not in client.get(reverse("places:home")).content.decode()
        client.force_login(admin_user)
        assert reverse("adminpanel:dashboard") in client.get(reverse("places:home")).content.decode()


@pytest.mark.django_db
class TestLoginRedirect:
    def _request(self, user):
        request = RequestFactory().get("/accounts/login/")
        request.user = user
        return request

    def test_new_user_goes_to_onboarding(self, new_user):
        url = WandererAccountAdapter().get_login_redirect_url(self._request(new_user))
        assert url == reverse("users:onboarding")

    def test_onboarded_user_goes_to_dashboard(self, user):
        url = WandererAccountAdapter().get_login_redirect_url(self._request(user))
        assert url == reverse("users:dashboard")


@pytest.mark.django_db
class TestGrantAdmin:
    def test_grant_by_email_then_revoke(self, user):
        call_command("grant_admin", "JUAN@example.com")
        assert is_admin(user)

        call_command("grant_admin", "juan", "--revoke")
        assert not UserRole.objects.filter(user=user).exists()

    def test_unknown_user(self, db):
        with pytest.raises(CommandError):
            call_command("grant_admin", "nobody")


@pytest.mark.django_db
class TestLoadSpots:
    CSV = (
        "name,location,municipality,description,categories,latitude,longitude,rating\n"
        "Sumlang Lake,Sumlang,Camalig,Bamboo rafts,\"Nature, Parks\",13.1566,123.6541,4.6\n"
        "Hoyop-Hoyopan Cave,Cotmon,Camalig,,Adventure,,,\n"
        ",missing name,,,,,,\n"
    )

    def test_upserts_rows(self, tmp_path):
        path = tmp_path / "spots.csv"
        path.write_text(self.CSV, encoding="utf-8")

        call_command("load_spots", "--csv", str(path))
        call_command("load_spots", "--csv", str(path))

        assert TouristSpot.objects.count() == 2
        lake = TouristSpot.objects.get(name="Sumlang Lake")
        assert lake.category_names == ["Nature", "Parks"]
        assert str(lake.rating) == "4.6"
        assert TouristSpot.objects.get(name="Hoyop-Hoyopan Cave").latitude is None

    def test_dry_run_writes_nothing(self, tmp_path, db):
        path = tmp_path / "spots.csv"
        path.write_text(self.CSV, encoding="utf-8")

        call_command("load_spots", "--csv", str(path), "--dry-run")

        assert not TouristSpot.objects.exists()

    def test_missing_file(self, tmp_path, db):
        with pytest.raises(CommandError):
            call_command("load_spots", "--csv", str(tmp_path / "nope.csv"))


@pytest.mark.django_db
class TestSignupUsername:
    def _form(self, username):
        return EmailSignupForm(data={
            "email": f"{username.lower()}@example.org",
            "username": username,
            "password1": "Tr1p-Albay-2024!x",
            "password2": "Tr1p-Albay-2024!x",
            "full_name": "John Doe",
        })

    def test_username_is_slugified_before_uniqueness_check(self, db):
        User.objects.create_user(username="johndoe", email="taken@example.com", password="x")

        form = self._form("John.Doe")

        assert not form.is_valid()
        assert "username" in form.errors

    def test_free_username_is_slugified(self, db):
        form = self._form("Maria.Clara")
        form.is_valid()
        assert form.cleaned_data.get("username") == "mariaclara"


@pytest.mark.django_db
def test_grant_admin_rejects_ambiguous_identifier(user):
    User.objects.create_user(username="juan@example.com", email="other@example.com", password="x")

    with pytest.raises(CommandError):
        call_command("grant_admin", "juan@example.com")

    assert not UserRole.objects.exists()

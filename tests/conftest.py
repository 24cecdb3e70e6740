from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from apps.places.models import TouristSpot
from apps.users.models import Profile, UserRole

User = get_user_model()


def _make_user(username, full_name="", onboarded=True):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="Tr1p-Albay-2024!x",
    )
    Profile.objects.filter(pk=user.pk).update(full_name=full_name, onboarding_completed=onboarded)
    return User.objects.get(pk=user.pk)


@pytest.fixture
def user(db):
    return _make_user("juan", full_name="Juan Dela Cruz")


@pytest.fixture
def other_user(db):
    return _make_user("maria", full_name="Maria Santos")


@pytest.fixture
def new_user(db):
    """Signed up but has not finished onboarding."""
    return _make_user("newbie", full_name="New Traveler", onboarded=False)


@pytest.fixture
def admin_user(db):
    admin = _make_user("curator", full_name="Content Curator")
    UserRole.objects.create(user=admin, role=UserRole.ADMIN)
    return admin


@pytest.fixture
def auth_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def admin_client(client, admin_user):
    client.force_login(admin_user)
    return client


@pytest.fixture
def make_spot(db):
    def _make(name, categories=(), municipality="", lat=None, lng=None, **extra):
        spot = TouristSpot.objects.create(
            name=name,
            location=extra.pop("location", f"{name} Road"),
            municipality=municipality,
            latitude=Decimal(str(lat)) if lat is not None else None,
            longitude=Decimal(str(lng)) if lng is not None else None,
            **extra,
        )
        spot.set_category_names(categories)
        return spot
    return _make


@pytest.fixture
def sample_spots(make_spot):
    """A(Nature), B(Food, Beach), C(Adventure)."""
    return {
        "A": make_spot("Mayon Skyline", ["Nature"], municipality="Tabaco"),
        "B": make_spot("Embarcadero de Legazpi", ["Food", "Beach"], municipality="Legazpi"),
        "C": make_spot("Quitinday Green Hills", ["Adventure"], municipality="Camalig"),
    }

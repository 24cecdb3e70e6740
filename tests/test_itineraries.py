from datetime import timedelta
from unittest import mock

import pytest
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone

from apps.itineraries.models import Itinerary
from apps.itineraries.services import (
    SESSION_KEY,
    ItineraryBackendError,
    ItineraryBuilder,
    ItineraryValidationError,
    create_quick_trip,
)
from apps.itineraries.snapshots import SpotSnapshot


@pytest.mark.django_db
class TestItineraryBuilder:
    def test_generate_returns_spots_sharing_any_category(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature", "Food"])

        candidates = builder.generate()

        names = {c.name for c in candidates}
        assert names == {sample_spots["A"].name, sample_spots["B"].name}
        assert sample_spots["C"].name not in names

    def test_spot_matching_several_categories_is_listed_once(self, make_spot):
        make_spot("Cagsawa Ruins", ["Culture", "Nature"])
        builder = ItineraryBuilder(categories=["Culture", "Nature"])

        assert [c.name for c in builder.generate()] == ["Cagsawa Ruins"]

    def test_every_candidate_starts_selected(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature", "Food"])
        builder.generate()

        assert sorted(builder.selected_ids) == sorted([sample_spots["A"].id, sample_spots["B"].id])

    def test_generate_without_categories_is_rejected(self, sample_spots, django_assert_num_queries):
        builder = ItineraryBuilder()
        with django_assert_num_queries(0):
            with pytest.raises(ItineraryValidationError):
                builder.generate()

    def test_unknown_categories_are_ignored(self):
        builder = ItineraryBuilder()
        builder.set_categories(["Nature", "Karaoke", "Nature"])
        assert builder.categories == ["Nature"]

    def test_generate_failure_keeps_previous_pool(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature"])
        builder.generate()
        before = list(builder.candidates)

        builder.set_categories(["Food"])
        with mock.patch("apps.itineraries.services.overlapping_spots", side_effect=DatabaseError("down")):
            with pytest.raises(ItineraryBackendError):
                builder.generate()

        assert builder.candidates == before

    def test_toggle_spot_flips_membership(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature", "Food"])
        builder.generate()
        b_id = sample_spots["B"].id

        builder.toggle_spot(b_id)
        assert b_id not in builder.selected_ids
        builder.toggle_spot(b_id)
        assert b_id in builder.selected_ids

    def test_toggle_ignores_spots_outside_the_pool(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature"])
        builder.generate()

        builder.toggle_spot(sample_spots["C"].id)

        assert sample_spots["C"].id not in builder.selected_ids

    def test_save_with_nothing_selected_makes_no_query(self, user, sample_spots, django_assert_num_queries):
        builder = ItineraryBuilder(categories=["Nature"])
        builder.generate()
        builder.toggle_spot(sample_spots["A"].id)

        with django_assert_num_queries(0):
            with pytest.raises(ItineraryValidationError):
                builder.save(user)
        assert not Itinerary.objects.exists()

    def test_save_requires_a_signed_in_user(self, sample_spots):
        builder = ItineraryBuilder(categories=["Nature"])
        builder.generate()

        with pytest.raises(ItineraryValidationError):
            builder.save(AnonymousUser())
        assert not Itinerary.objects.exists()

    def test_deselected_spot_is_left_out_of_the_snapshot(self, user, sample_spots):
        builder = ItineraryBuilder(categories=["Nature", "Food"])
        builder.generate()
        builder.toggle_spot(sample_spots["B"].id)

        itinerary = builder.save(user)

        assert itinerary.name == "Nature & Food Adventure"
        assert itinerary.selected_categories == ["Nature", "Food"]
        assert [s.name for s in itinerary.spot_snapshots] == [sample_spots["A"].name]
        assert itinerary.spots[0]["categories"] == ["Nature"]

    def test_snapshot_is_not_updated_when_spot_changes(self, user, sample_spots):
        builder = ItineraryBuilder(categories=["Nature"])
        builder.generate()
        itinerary = builder.save(user)

        spot = sample_spots["A"]
        spot.name = "Renamed"
        spot.save()
        spot.delete()

        itinerary.refresh_from_db()
        assert itinerary.spot_snapshots[0].name == "Mayon Skyline"

    def test_save_failure_leaves_builder_untouched(self, user, sample_spots):
        builder = ItineraryBuilder(categories=["Nature", "Food"])
        builder.generate()
        state = (list(builder.categories), list(builder.candidates), list(builder.selected_ids))

        with mock.patch.object(Itinerary.objects, "create", side_effect=DatabaseError("down")):
            with pytest.raises(ItineraryBackendError):
                builder.save(user)

        assert (builder.categories, builder.candidates, builder.selected_ids) == state

    def test_session_round_trip(self, client, sample_spots):
        builder = ItineraryBuilder(categories=["Food"])
        builder.generate()
        session = client.session
        builder.save_to(session)

        restored = ItineraryBuilder.from_session(session)

        assert restored.categories == ["Food"]
        assert restored.candidates == builder.candidates
        assert restored.selected_ids == builder.selected_ids


def test_snapshot_from_dict_tolerates_missing_fields():
    snap = SpotSnapshot.from_dict({"id": 3, "name": "Sumlang Lake"})
    assert snap.categories == ()
    assert snap.latitude is None


@pytest.mark.django_db
class TestBuilderViews:
    def test_builder_requires_login(self, client):
        response = client.get(reverse("itineraries:builder"))
        assert response.status_code == 302
        assert reverse("account_login") in response["Location"]

    def test_generate_toggle_save_flow(self, auth_client, user, sample_spots):
        response = auth_client.post(reverse("itineraries:generate"), {"categories": ["Nature", "Food"]})
        assert response.status_code == 302

        page = auth_client.get(reverse("itineraries:builder"))
        assert "2 of 2 destinations selected" in page.content.decode()

        auth_client.post(reverse("itineraries:toggle_spot", args=[sample_spots["B"].id]))
        response = auth_client.post(reverse("itineraries:save"))

        assert response.status_code == 302
        assert response["Location"] == reverse("users:dashboard")
        itinerary = Itinerary.objects.get(user=user)
        assert [s["name"] for s in itinerary.spots] == ["Mayon Skyline"]
        assert SESSION_KEY not in auth_client.session

    def test_save_with_empty_selection_stays_on_builder(self, auth_client, sample_spots):
        auth_client.post(reverse("itineraries:generate"), {"categories": ["Nature"]})
        auth_client.post(reverse("itineraries:toggle_spot", args=[sample_spots["A"].id]))

        response = auth_client.post(reverse("itineraries:save"), follow=True)

        assert response.redirect_chain[-1][0] == reverse("itineraries:builder")
        assert "Please select at least one destination" in response.content.decode()
        assert not Itinerary.objects.exists()

    def test_generate_with_no_interest_shows_error(self, auth_client, sample_spots):
        response = auth_client.post(reverse("itineraries:generate"), {}, follow=True)
        assert "Please select at least one interest" in response.content.decode()

    def test_toggle_ajax_reports_counts(self, auth_client, sample_spots):
        auth_client.post(reverse("itineraries:generate"), {"categories": ["Nature", "Food"]})

        response = auth_client.post(
            reverse("itineraries:toggle_spot", args=[sample_spots["A"].id]),
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )

        assert response.json() == {"ok": True, "selected": False, "selected_count": 1, "total": 2}


@pytest.mark.django_db
class TestSavedItineraries:
    def _itinerary(self, owner, name="Trip"):
        return Itinerary.objects.create(user=owner, name=name, selected_categories=["Nature"], spots=[])

    def test_delete_removes_own_itinerary(self, auth_client, user):
        itinerary = self._itinerary(user)

        response = auth_client.post(reverse("itineraries:delete", args=[itinerary.id]))

        assert response.status_code == 302
        assert not Itinerary.objects.filter(pk=itinerary.pk).exists()

    def test_cannot_delete_someone_elses_itinerary(self, auth_client, user, other_user):
        mine = self._itinerary(user, "Mine")
        theirs = self._itinerary(other_user, "Theirs")

        response = auth_client.post(reverse("itineraries:delete", args=[theirs.id]))

        assert response.status_code == 404
        assert Itinerary.objects.filter(pk=theirs.pk).exists()
        assert Itinerary.objects.filter(pk=mine.pk).exists()

    def test_delete_requires_post(self, auth_client, user):
        itinerary = self._itinerary(user)
        response = auth_client.get(reverse("itineraries:delete", args=[itinerary.id]))
        assert response.status_code == 405

    def test_detail_is_owner_only(self, auth_client, other_user):
        theirs = self._itinerary(other_user)
        assert auth_client.get(reverse("itineraries:detail", args=[theirs.id])).status_code == 404

    def test_my_itineraries_json_lists_only_own(self, auth_client, user, other_user):
        self._itinerary(user, "Mine")
        self._itinerary(other_user, "Theirs")

        data = auth_client.get(reverse("itineraries:my_itineraries_json")).json()

        assert [i["name"] for i in data["itineraries"]] == ["Mine"]

    def test_dashboard_lists_newest_first(self, auth_client, user):
        first = self._itinerary(user, "First trip")
        self._itinerary(user, "Second trip")
        Itinerary.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(days=1))

        content = auth_client.get(reverse("users:dashboard")).content.decode()

        assert content.index("Second trip") < content.index("First trip")


@pytest.mark.django_db
class TestQuickTrip:
    def test_anonymous_user_is_sent_to_sign_in(self, client, sample_spots):
        response = client.post(reverse("places:quick_add", args=[sample_spots["A"].id]))

        assert response.status_code == 302
        assert reverse("account_login") in response["Location"]
        assert not Itinerary.objects.exists()

    def test_creates_single_spot_itinerary(self, auth_client, user, sample_spots):
        spot = sample_spots["B"]

        response = auth_client.post(
            reverse("places:quick_add", args=[spot.id]),
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )

        assert response.json()["ok"] is True
        itinerary = Itinerary.objects.get(user=user)
        assert itinerary.name == "Quick Trip - Embarcadero de Legazpi"
        assert itinerary.selected_categories == ["Food", "Beach"]
        assert [s.id for s in itinerary.spot_snapshots] == [spot.id]

    def test_service_rejects_anonymous(self, sample_spots):
        with pytest.raises(ItineraryValidationError):
            create_quick_trip(AnonymousUser(), sample_spots["A"])

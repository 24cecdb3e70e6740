from decimal import Decimal

import pytest
from django.contrib.auth.models import AnonymousUser
from django.urls import reverse

from apps.reviews.models import Review
from apps.reviews.services import attach_author_names, average_rating, reviews_for_spot
from apps.users.models import Profile


@pytest.mark.parametrize("ratings, expected", [
    ([5, 4, 4], Decimal("4.3")),
    ([1, 2, 2, 2], Decimal("1.8")),
    ([4, 5], Decimal("4.5")),
    ([3], Decimal("3.0")),
])
def test_average_rating_rounds_half_up(ratings, expected):
    assert average_rating(ratings) == expected


def test_average_rating_without_reviews_is_none():
    assert average_rating([]) is None


@pytest.fixture
def spot(make_spot):
    return make_spot("Cagsawa Ruins", ["Culture", "Heritage"], municipality="Daraga")


@pytest.mark.django_db
class TestReviewServices:
    def test_author_names_use_a_single_query(self, spot, user, other_user, new_user, django_assert_num_queries):
        Review.objects.create(spot=spot, user=user, rating=5)
        Review.objects.create(spot=spot, user=other_user, rating=4)
        Review.objects.create(spot=spot, user=user, rating=3)
        Review.objects.create(spot=spot, user=new_user, rating=4)
        reviews = list(Review.objects.all())

        with django_assert_num_queries(1):
            attach_author_names(reviews)

        assert {r.author_name for r in reviews} == {"Juan Dela Cruz", "Maria Santos", "New Traveler"}

    def test_missing_name_falls_back_to_anonymous(self, spot, user):
        Profile.objects.filter(pk=user.pk).update(full_name="")
        Review.objects.create(spot=spot, user=user, rating=4)

        [review] = reviews_for_spot(spot)

        assert review.author_name == "Anonymous"

    def test_only_author_may_delete(self, spot, user, other_user):
        Review.objects.create(spot=spot, user=user, rating=5)
        Review.objects.create(spot=spot, user=other_user, rating=2)

        flags = {r.user_id: r.can_delete for r in reviews_for_spot(spot, viewer=user)}

        assert flags == {user.pk: True, other_user.pk: False}

    def test_anonymous_viewer_cannot_delete(self, spot, user):
        Review.objects.create(spot=spot, user=user, rating=5)
        assert not any(r.can_delete for r in reviews_for_spot(spot, viewer=AnonymousUser()))


@pytest.mark.django_db
class TestReviewViews:
    def test_empty_spot_shows_prompt(self, client, spot):
        content = client.get(reverse("places:spot_detail", args=[spot.id])).content.decode()
        assert "No reviews yet. Be the first to review!" in content

    def test_detail_shows_average(self, client, spot, user, other_user, new_user):
        for author, rating in ((user, 5), (other_user, 4), (new_user, 4)):
            Review.objects.create(spot=spot, user=author, rating=rating)

        response = client.get(reverse("places:spot_detail", args=[spot.id]))

        assert response.context["average_rating"] == Decimal("4.3")
        assert response.context["review_count"] == 3
        assert "★ 4.3" in response.content.decode()

    def test_create_review(self, auth_client, user, spot):
        response = auth_client.post(
            reverse("reviews:create", args=[spot.id]),
            {"rating": "4", "comment": "  Great view of Mayon  "},
        )

        assert response["Location"] == reverse("places:spot_detail", args=[spot.id])
        review = Review.objects.get(spot=spot)
        assert (review.user, review.rating, review.comment) == (user, 4, "Great view of Mayon")

    def test_out_of_range_rating_is_rejected(self, auth_client, spot):
        auth_client.post(reverse("reviews:create", args=[spot.id]), {"rating": "7"})
        assert not Review.objects.exists()

    def test_anonymous_cannot_review(self, client, spot):
        response = client.post(reverse("reviews:create", args=[spot.id]), {"rating": "5"})
        assert reverse("account_login") in response["Location"]
        assert not Review.objects.exists()

    def test_author_deletes_own_review(self, auth_client, user, spot):
        review = Review.objects.create(spot=spot, user=user, rating=3)

        response = auth_client.post(
            reverse("reviews:delete", args=[spot.id, review.id]),
            HTTP_X_REQUESTED_WITH="XMLHttpRequest",
        )

        assert response.json()["success"] is True
        assert not Review.objects.filter(pk=review.pk).exists()

    def test_other_user_cannot_delete(self, auth_client, other_user, spot):
        review = Review.objects.create(spot=spot, user=other_user, rating=1)

        response = auth_client.post(reverse("reviews:delete", args=[spot.id, review.id]))

        assert response.status_code == 404
        assert Review.objects.filter(pk=review.pk).exists()

    def test_fragment_marks_own_review_deletable(self, auth_client, user, other_user, spot):
        Review.objects.create(spot=spot, user=other_user, rating=2)
        own = Review.objects.create(spot=spot, user=user, rating=5)

        content = auth_client.get(reverse("reviews:list_fragment", args=[spot.id])).content.decode()

        assert content.count('class="delete-review"') == 1
        assert reverse("reviews:delete", args=[spot.id, own.id]) in content

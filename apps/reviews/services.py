from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from apps.users.models import Profile
from .models import Review

ANONYMOUS = "Anonymous"


def average_rating(ratings: Iterable[int]) -> Optional[Decimal]:
    """Mean rating rounded half-up to one decimal; None when there are no ratings."""
    ratings = list(ratings)
    if not ratings:
        return None
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def attach_author_names(reviews: List[Review]) -> List[Review]:
    """Set ``author_name`` on every review with one profile query for all authors."""
    author_ids = {r.user_id for r in reviews}
    names = dict(
        Profile.objects
        .filter(user_id__in=author_ids)
        .values_list("user_id", "full_name")
    ) if author_ids else {}

    for review in reviews:
        review.author_name = names.get(review.user_id) or ANONYMOUS
    return reviews


def reviews_for_spot(spot, viewer=None) -> List[Review]:
    reviews = list(Review.objects.filter(spot=spot).order_by("-created_at", "-id"))
    attach_author_names(reviews)

    viewer_id = viewer.pk if viewer is not None and viewer.is_authenticated else None
    for review in reviews:
        # UI affordance only; the delete view re-checks ownership
        review.can_delete = viewer_id is not None and review.user_id == viewer_id
    return reviews


def review_summary(spot, viewer=None) -> dict:
    reviews = reviews_for_spot(spot, viewer)
    return {
        "reviews": reviews,
        "review_count": len(reviews),
        "average_rating": average_rating(r.rating for r in reviews),
    }

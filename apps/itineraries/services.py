import logging
from typing import Iterable, List

from django.db import DatabaseError

from apps.places.services import overlapping_spots
from .models import Itinerary
from .snapshots import SpotSnapshot

logger = logging.getLogger(__name__)

SESSION_KEY = "itinerary_builder"

INTEREST_CATEGORIES = [
    {"name": "Nature", "icon": "🌳", "description": "Mountains, lakes, and natural wonders"},
    {"name": "Culture", "icon": "🏯", "description": "Churches, museums, and heritage sites"},
    {"name": "Adventure", "icon": "🧗", "description": "Thrilling outdoor activities"},
    {"name": "Food", "icon": "🍜", "description": "Local cuisine and restaurants"},
]
INTEREST_NAMES = [c["name"] for c in INTEREST_CATEGORIES]


class ItineraryError(Exception):
    pass


class ItineraryValidationError(ItineraryError):
    pass


class ItineraryBackendError(ItineraryError):
    pass


def itinerary_name(categories: Iterable[str]) -> str:
    return f"{' & '.join(categories)} Adventure"


class ItineraryBuilder:
    """
    Interest categories -> overlapping spots -> pruned selection -> saved itinerary.

    State is kept in the session between requests (see ``from_session`` / ``save_to``).
    """

    def __init__(self, categories=None, candidates=None, selected_ids=None):
        self.categories: List[str] = list(categories or [])
        self.candidates: List[SpotSnapshot] = list(candidates or [])
        self.selected_ids: List[int] = list(selected_ids or [])

    # --- session ---
    @classmethod
    def from_session(cls, session) -> "ItineraryBuilder":
        state = session.get(SESSION_KEY) or {}
        return cls(
            categories=state.get("categories"),
            candidates=[SpotSnapshot.from_dict(c) for c in state.get("candidates") or []],
            selected_ids=state.get("selected_ids"),
        )

    def save_to(self, session):
        session[SESSION_KEY] = {
            "categories": self.categories,
            "candidates": [c.to_dict() for c in self.candidates],
            "selected_ids": self.selected_ids,
        }

    @staticmethod
    def clear(session):
        session.pop(SESSION_KEY, None)

    # --- categories ---
    def set_categories(self, names: Iterable[str]):
        names = [n for n in dict.fromkeys(names) if n in INTEREST_NAMES]
        self.categories = names

    def toggle_category(self, name: str):
        if name not in INTEREST_NAMES:
            return
        if name in self.categories:
            self.categories.remove(name)
        else:
            self.categories.append(name)

    # --- candidates ---
    @property
    def selected(self) -> List[SpotSnapshot]:
        return [c for c in self.candidates if c.id in self.selected_ids]

    def generate(self) -> List[SpotSnapshot]:
        if not self.categories:
            raise ItineraryValidationError("Please select at least one interest")

        try:
            candidates = [SpotSnapshot.from_spot(s) for s in overlapping_spots(self.categories)]
        except DatabaseError as e:
            logger.exception("Generating recommendations failed for %s", self.categories)
            raise ItineraryBackendError("Failed to generate recommendations") from e

        # replace the pool only once the query succeeded
        self.candidates = candidates
        self.selected_ids = [c.id for c in candidates]
        return candidates

    def toggle_spot(self, spot_id: int):
        if not any(c.id == spot_id for c in self.candidates):
            return
        if spot_id in self.selected_ids:
            self.selected_ids.remove(spot_id)
        else:
            self.selected_ids.append(spot_id)

    # --- save ---
    def save(self, user) -> Itinerary:
        if user is None or not user.is_authenticated:
            raise ItineraryValidationError("Please sign in to save your itinerary")

        selected = self.selected
        if not selected:
            raise ItineraryValidationError("Please select at least one destination")

        try:
            itinerary = Itinerary.objects.create(
                user=user,
                name=itinerary_name(self.categories),
                selected_categories=list(self.categories),
                spots=[s.to_dict() for s in selected],
            )
        except DatabaseError as e:
            logger.exception("Saving itinerary failed for user %s", user.pk)
            raise ItineraryBackendError("Failed to save itinerary") from e

        logger.info("Itinerary %s saved for user %s with %d spots", itinerary.pk, user.pk, len(selected))
        return itinerary


def create_quick_trip(user, spot) -> Itinerary:
    """Single-spot itinerary created straight from the browse grid."""
    if user is None or not user.is_authenticated:
        raise ItineraryValidationError("Please sign in to add to itinerary")

    snapshot = SpotSnapshot.from_spot(spot)
    try:
        return Itinerary.objects.create(
            user=user,
            name=f"Quick Trip - {spot.name}",
            selected_categories=list(snapshot.categories),
            spots=[snapshot.to_dict()],
        )
    except DatabaseError as e:
        logger.exception("Quick trip failed for user %s spot %s", user.pk, spot.pk)
        raise ItineraryBackendError("Failed to add to itinerary") from e


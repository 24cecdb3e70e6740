from dataclasses import asdict, dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class SpotSnapshot:
    """Copy of a tourist spot taken when an itinerary is saved.

    Snapshots are never refreshed from the live spot row: editing or
    deleting the spot later leaves saved itineraries unchanged.
    """

    id: int
    name: str
    description: str = ""
    location: str = ""
    municipality: str = ""
    categories: Tuple[str, ...] = ()
    image_url: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: float = 0.0

    @classmethod
    def from_spot(cls, spot) -> "SpotSnapshot":
        return cls(
            id=spot.id,
            name=spot.name,
            description=spot.description or "",
            location=spot.location or "",
            municipality=spot.municipality or "",
            categories=tuple(spot.category_names),
            image_url=spot.image_url or "",
            latitude=float(spot.latitude) if spot.latitude is not None else None,
            longitude=float(spot.longitude) if spot.longitude is not None else None,
            rating=float(spot.rating or 0),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "SpotSnapshot":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description") or "",
            location=data.get("location") or "",
            municipality=data.get("municipality") or "",
            categories=tuple(data.get("categories") or ()),
            image_url=data.get("image_url") or "",
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            rating=data.get("rating") or 0.0,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["categories"] = list(self.categories)
        return data

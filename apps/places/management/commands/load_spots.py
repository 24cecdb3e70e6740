import csv
import os
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.places.models import TouristSpot


def to_decimal(value):
    value = (value or "").strip()
    if not value:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        return None


class Command(BaseCommand):
    help = "Upsert tourist spots from a CSV file (name, location, municipality, description, categories, ...)."

    def add_arguments(self, parser):
        parser.add_argument("--csv", required=False, help="CSV path (default: BASE_DIR/tourist_spots.csv)")
        parser.add_argument("--dry-run", action="store_true", help="Parse only, write nothing")

    def handle(self, *args, **opts):
        csv_path = opts["csv"] or os.path.join(settings.BASE_DIR, "tourist_spots.csv")
        dry_run = opts["dry_run"]

        if not os.path.exists(csv_path):
            raise CommandError(f"CSV not found: {csv_path}")

        self.stdout.write(self.style.MIGRATE_HEADING("Load CSV & upsert"))
        created = updated = skipped = 0

        with open(csv_path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                name = (row.get("name") or "").strip()
                location = (row.get("location") or "").strip()
                if not (name and location):
                    skipped += 1
                    continue

                lat = to_decimal(row.get("latitude"))
                lng = to_decimal(row.get("longitude"))
                if lat is None or lng is None:
                    lat = lng = None

                categories = [c.strip() for c in (row.get("categories") or "").split(",") if c.strip()]

                if dry_run:
                    created += 1
                    continue

                with transaction.atomic():
                    spot, was_created = TouristSpot.objects.update_or_create(
                        name=name,
                        location=location,
                        defaults={
                            "municipality": (row.get("municipality") or "").strip(),
                            "description": (row.get("description") or "").strip(),
                            "latitude": lat,
                            "longitude": lng,
                            "image_url": (row.get("image_url") or "").strip(),
                            "contact_number": (row.get("contact_number") or "").strip(),
                            "rating": to_decimal(row.get("rating")) or Decimal("0.0"),
                        },
                    )
                    spot.set_category_names(categories)

                if was_created:
                    created += 1
                else:
                    updated += 1

        verb = "would be saved" if dry_run else "saved"
        self.stdout.write(self.style.SUCCESS(
            f"{created + updated} spots {verb} (created={created}, updated={updated}, skipped={skipped})"
        ))

"""
Seed script for the Makola Issue Hub mock DB or Firestore.

Usage:
  - Dry run (default): python -m scripts.seed_db
  - Apply to configured DB: python -m scripts.seed_db --apply
  - Force mock DB even if FIREBASE configured: python -m scripts.seed_db --apply --force-mock

Behavior:
  - Loads `db_seed.json` (or --seed PATH) with {collection: {doc_id: data}}.
  - Issues with coordinates outside the service area are skipped and reported.
  - Writes each document through `app.config.firebase.get_db()`.
"""

import argparse
import json
import logging
import os
from datetime import datetime
from typing import Any

from app.core.settings import settings
from app.models.location import GeoPoint
from app.services.geofence import get_geofence_validator

logger = logging.getLogger("seed_db")


def load_seed(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def is_seedable(collection: str, data: dict) -> bool:
    """Issues must lie inside the service area, like live submissions."""
    if collection != "issues":
        return True
    latitude, longitude = data.get("latitude"), data.get("longitude")
    if latitude is None or longitude is None:
        return True
    point = GeoPoint(latitude=latitude, longitude=longitude)
    return get_geofence_validator().is_within_service_area(point)


def write_to_db(db: Any, seed: dict, apply: bool = False) -> int:
    """Write (or, without apply, only list) the seed documents. Returns the number written."""
    written = 0
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            if not is_seedable(collection, data):
                logger.warning(f"Skipping {collection}/{doc_id}: outside service area")
                continue
            logger.info(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            if isinstance(data.get("created_date"), str):
                data = {**data, "created_date": datetime.fromisoformat(data["created_date"])}
            db.collection(collection).document(doc_id).set(data)
            written += 1
            logger.info(f"Wrote: {collection}/{doc_id}")
    return written


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)

    if args.force_mock:
        logger.info("Forcing mock DB usage for this run.")
        # Settings are read once at import, so patching the instance is enough
        settings.USE_MOCK_DB = True

    from app.config.firebase import get_db
    written = write_to_db(get_db(), seed, apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed ({written} documents).")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()

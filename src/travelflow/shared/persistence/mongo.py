from __future__ import annotations

import logging
from typing import Optional

from pymongo import MongoClient, ASCENDING
from pymongo.errors import OperationFailure
from travelflow.shared.config.settings import settings

log = logging.getLogger("mongo")

_client: Optional[MongoClient] = None
_db = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
    return _client


def get_db():
    global _db
    if _db is None:
        _db = get_client()[settings.MONGODB_DB]
    return _db


def ensure_indexes() -> None:
    """Create indexes for collections if they do not exist."""
    db = get_db()
    preferences = db.get_collection("travel_preferences")
    itineraries = db.get_collection("itineraries")
    try:
        if "user_id" not in preferences.index_information():
            preferences.create_index([("user_id", ASCENDING)], name="user_id")
        existing = itineraries.index_information()
        if "user_id" not in existing:
            itineraries.create_index([("user_id", ASCENDING)], name="user_id")
        if "preference_id" not in existing:
            itineraries.create_index([("preference_id", ASCENDING)], name="preference_id")
        if "created_at" not in existing:
            itineraries.create_index([("created_at", ASCENDING)], name="created_at")
    except OperationFailure as e:
        log.warning(f"index creation skipped: {e}")

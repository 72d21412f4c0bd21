from datetime import datetime, timezone

from pymongo import ReturnDocument

from database import USERS_COLLECTION, get_collection


def _users():
    return get_collection(USERS_COLLECTION)


def _to_profile_dict(doc: dict | None) -> dict | None:
    if not doc:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    for key in ("created_at", "updated_at"):
        if key in doc and isinstance(doc[key], datetime):
            doc[key] = doc[key].isoformat()
    return doc


def save_profile(owner_id: str, profile_data: dict) -> str:
    """Replace the owner's whole profile document, keeping its creation time."""
    existing = _users().find_one({"_id": owner_id}, {"created_at": 1})
    now = datetime.now(timezone.utc)

    payload = dict(profile_data)
    payload.pop("id", None)
    payload["username"] = str(payload.get("username") or "").lower()
    payload["created_at"] = existing.get("created_at", now) if existing else now
    payload["updated_at"] = now

    _users().replace_one({"_id": owner_id}, payload, upsert=True)
    return owner_id


def get_profile(owner_id: str) -> dict | None:
    return _to_profile_dict(_users().find_one({"_id": owner_id}))


def get_profile_by_username(username: str) -> dict | None:
    return _to_profile_dict(_users().find_one({"username": username.lower()}))


def find_username_owner(username: str) -> str | None:
    doc = _users().find_one({"username": username.lower()}, {"_id": 1})
    return str(doc["_id"]) if doc else None


def set_visibility(owner_id: str, is_public: bool) -> dict | None:
    doc = _users().find_one_and_update(
        {"_id": owner_id},
        {"$set": {"is_public": is_public, "updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    return _to_profile_dict(doc)


def delete_profile(owner_id: str) -> bool:
    result = _users().delete_one({"_id": owner_id})
    return result.deleted_count > 0

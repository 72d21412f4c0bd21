from datetime import datetime, timezone

from pymongo import ReturnDocument

from database import TESTIMONIALS_COLLECTION, get_collection, serialize_document, to_object_id


def _testimonials():
    return get_collection(TESTIMONIALS_COLLECTION)


def create_testimonial(testimonial_data: dict) -> dict:
    payload = dict(testimonial_data)
    payload["approved"] = False
    payload["created_at"] = datetime.now(timezone.utc).isoformat()
    result = _testimonials().insert_one(payload)
    payload["_id"] = result.inserted_id
    return serialize_document(payload)


def list_testimonials(profile_user_id: str, approved: bool | None = None) -> list[dict]:
    query: dict = {"profile_user_id": profile_user_id}
    if approved is not None:
        query["approved"] = approved
    return [serialize_document(doc) for doc in _testimonials().find(query)]


def approve_testimonial(testimonial_id: str, profile_user_id: str) -> dict | None:
    """Mark a testimonial approved; returns the stored document or None if not the owner's."""
    object_id = to_object_id(testimonial_id)
    if object_id is None:
        return None
    doc = _testimonials().find_one_and_update(
        {"_id": object_id, "profile_user_id": profile_user_id},
        {"$set": {"approved": True}},
        return_document=ReturnDocument.AFTER,
    )
    return serialize_document(doc) if doc else None


def delete_testimonial(testimonial_id: str, profile_user_id: str) -> bool:
    object_id = to_object_id(testimonial_id)
    if object_id is None:
        return False
    result = _testimonials().delete_one({"_id": object_id, "profile_user_id": profile_user_id})
    return result.deleted_count > 0

from database import ANALYTICS_COLLECTION, get_collection, serialize_document


def _events():
    return get_collection(ANALYTICS_COLLECTION)


def insert_event(event: dict) -> str:
    result = _events().insert_one(dict(event))
    return str(result.inserted_id)


def list_events(profile_id: str) -> list[dict]:
    # No sort in the query; the aggregator orders events in memory.
    return [serialize_document(doc) for doc in _events().find({"profile_id": profile_id})]

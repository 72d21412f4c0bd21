import os

from bson import ObjectId
from bson.errors import InvalidId
from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.collection import Collection


_client: MongoClient | None = None

USERS_COLLECTION = "users"
TESTIMONIALS_COLLECTION = "testimonials"
ANALYTICS_COLLECTION = "analytics"
COUPONS_COLLECTION = "coupons"


def _get_client() -> MongoClient:
    global _client
    if _client is None:
        load_dotenv()
        mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        _client = MongoClient(mongo_uri)
    return _client


def get_collection(name: str) -> Collection:
    load_dotenv()
    db_name = os.getenv("MONGODB_DB", "resumin")
    return _get_client()[db_name][name]


def to_object_id(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_document(doc: dict) -> dict:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc

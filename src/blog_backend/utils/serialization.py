"""Conversion of MongoDB documents into JSON-ready dictionaries."""

from datetime import datetime
from typing import Any, Dict, Iterable, List

from bson import ObjectId

# Fields that must never leave the server
PRIVATE_FIELDS = frozenset({"password"})


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Render a document for a JSON response.

    `_id` becomes `id`, ObjectIds become strings (also inside lists and nested
    documents), datetimes become ISO-8601 strings and private fields are dropped.
    """
    if not doc:
        return doc
    result: Dict[str, Any] = {}
    for key, value in doc.items():
        if key in PRIVATE_FIELDS:
            continue
        if key == "_id":
            result["id"] = str(value)
            continue
        result[key] = serialize_value(value)
    return result


def serialize_documents(docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in docs]

from datetime import datetime, timezone

from bson import ObjectId

from blog_backend.utils.serialization import serialize_document, serialize_documents


def test_serialize_document_renames_id_and_converts_types():
    post_id = ObjectId()
    comment_id = ObjectId()
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    result = serialize_document(
        {"_id": post_id, "postId": "AAAAAAA", "date": created, "comments": [comment_id]}
    )

    assert result == {
        "id": str(post_id),
        "postId": "AAAAAAA",
        "date": "2024-05-01T12:00:00+00:00",
        "comments": [str(comment_id)],
    }


def test_serialize_document_recurses_into_resolved_comments():
    comment = {"_id": ObjectId(), "text": "Nice", "date": datetime(2024, 5, 1)}

    result = serialize_document({"_id": ObjectId(), "comments": [comment]})

    assert result["comments"] == [{"id": str(comment["_id"]), "text": "Nice", "date": "2024-05-01T00:00:00"}]


def test_serialize_document_drops_password():
    result = serialize_document({"_id": ObjectId(), "email": "a@x.com", "password": "$2b$10$hash"})

    assert "password" not in result
    assert result["email"] == "a@x.com"


def test_serialize_documents_maps_each():
    assert serialize_documents([{"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]

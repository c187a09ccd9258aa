from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError

from blog_backend.errors import NotFound
from blog_backend.services.content_store import (
    POST_ID_ALPHABET,
    POST_ID_LENGTH,
    ContentStore,
    generate_post_id,
)
from blog_backend.services.favorites_ledger import FavoritesLedger


@pytest.fixture
def store(indexed_db_manager, settings):
    return ContentStore(indexed_db_manager, settings)


@pytest.fixture
def posts(database, settings):
    return database[settings.POSTS_COLLECTION]


@pytest.fixture
def reviews(database, settings):
    return database[settings.REVIEWS_COLLECTION]


def test_post_id_alphabet_has_62_distinct_characters():
    assert len(POST_ID_ALPHABET) == 62
    assert len(set(POST_ID_ALPHABET)) == 62
    assert POST_ID_ALPHABET.isalnum()


def test_generate_post_id_shape():
    for _ in range(100):
        post_id = generate_post_id()
        assert len(post_id) == POST_ID_LENGTH
        assert set(post_id) <= set(POST_ID_ALPHABET)


@pytest.mark.asyncio
async def test_create_assigns_id_and_defaults(store, posts):
    post = await store.create("Hi", "Body", "a@x.com")

    assert len(post["postId"]) == POST_ID_LENGTH
    assert post["title"] == "Hi"
    assert post["content"] == "Body"
    assert post["email"] == "a@x.com"
    assert post["saved"] is False
    assert post["comments"] == []
    assert posts.docs[0]["_id"] == post["_id"]


@pytest.mark.asyncio
async def test_create_retries_on_post_id_collision(store, posts):
    with patch(
        "blog_backend.services.content_store.generate_post_id", side_effect=["AAAAAAA", "AAAAAAA", "BBBBBBB"]
    ):
        first = await store.create("One", "Body", "a@x.com")
        second = await store.create("Two", "Body", "a@x.com")

    assert first["postId"] == "AAAAAAA"
    assert second["postId"] == "BBBBBBB"
    assert len(posts.docs) == 2


@pytest.mark.asyncio
async def test_create_gives_up_after_repeated_collisions(store):
    with patch("blog_backend.services.content_store.generate_post_id", return_value="AAAAAAA"):
        await store.create("One", "Body", "a@x.com")
        with pytest.raises(DuplicateKeyError):
            await store.create("Two", "Body", "a@x.com")


@pytest.mark.asyncio
async def test_add_comment_appears_in_get(store):
    post = await store.create("Hi", "Body", "a@x.com")

    comment = await store.add_comment(post["postId"], "b@x.com", "Nice")

    fetched, comments = await store.get(post["postId"])
    assert fetched["comments"] == [comment["_id"]]
    assert [c["text"] for c in comments] == ["Nice"]
    assert comments[0]["email"] == "b@x.com"


@pytest.mark.asyncio
async def test_add_comment_requires_existing_post(store, reviews):
    with pytest.raises(NotFound):
        await store.add_comment("missing", "b@x.com", "Nice")

    assert reviews.docs == []


@pytest.mark.asyncio
async def test_add_comment_rolls_back_when_parent_update_fails(store, posts, reviews):
    post = await store.create("Hi", "Body", "a@x.com")
    posts.update_one = AsyncMock(side_effect=PyMongoError("write failed"))

    with pytest.raises(PyMongoError):
        await store.add_comment(post["postId"], "b@x.com", "Nice")

    assert reviews.docs == []


@pytest.mark.asyncio
async def test_list_all_resolves_comments_in_order(store):
    first = await store.create("First", "Body", "a@x.com")
    second = await store.create("Second", "Body", "a@x.com")
    await store.add_comment(first["postId"], "b@x.com", "one")
    await store.add_comment(first["postId"], "c@x.com", "two")

    listed = {post["title"]: post for post in await store.list_all()}

    assert [c["text"] for c in listed["First"]["comments"]] == ["one", "two"]
    assert listed["Second"]["comments"] == []
    assert listed["Second"]["postId"] == second["postId"]


@pytest.mark.asyncio
async def test_list_all_skips_dangling_comment_references(store, reviews):
    post = await store.create("Hi", "Body", "a@x.com")
    comment = await store.add_comment(post["postId"], "b@x.com", "gone")
    await reviews.delete_one({"_id": comment["_id"]})

    [listed] = await store.list_all()

    assert listed["comments"] == []


@pytest.mark.asyncio
async def test_get_missing_post_raises_not_found(store):
    with pytest.raises(NotFound) as exc_info:
        await store.get("missing")
    assert exc_info.value.message == "Blog not found"


@pytest.mark.asyncio
async def test_delete_cascades_to_comments(store, reviews):
    post = await store.create("Hi", "Body", "a@x.com")
    other = await store.create("Other", "Body", "a@x.com")
    await store.add_comment(post["postId"], "b@x.com", "one")
    await store.add_comment(post["postId"], "b@x.com", "two")
    await store.add_comment(other["postId"], "b@x.com", "kept")

    await store.delete(post["postId"])

    with pytest.raises(NotFound):
        await store.get(post["postId"])
    assert [c["text"] for c in reviews.docs] == ["kept"]


@pytest.mark.asyncio
async def test_delete_cascades_to_favorites(store, indexed_db_manager, settings, database):
    post = await store.create("Hi", "Body", "a@x.com")
    other = await store.create("Other", "Body", "a@x.com")
    ledger = FavoritesLedger(indexed_db_manager, settings)
    await ledger.save("b@x.com", "a@x.com", post["postId"])
    await ledger.save("c@x.com", "a@x.com", post["postId"])
    await ledger.save("b@x.com", "a@x.com", other["postId"])

    await store.delete(post["postId"])

    assert [f["postId"] for f in database[settings.FAVORITES_COLLECTION].docs] == [other["postId"]]


@pytest.mark.asyncio
async def test_delete_missing_post_is_ok(store):
    await store.delete("missing")


@pytest.mark.asyncio
async def test_delete_uses_transaction_session_when_supported(settings):
    session = MagicMock()
    collection = MagicMock()
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))

    db_manager = MagicMock()
    db_manager.get_collection.return_value = collection
    db_manager.transaction.return_value.__aenter__ = AsyncMock(return_value=session)
    db_manager.transaction.return_value.__aexit__ = AsyncMock(return_value=False)

    await ContentStore(db_manager, settings).delete("AAAAAAA")

    collection.delete_one.assert_awaited_once_with({"postId": "AAAAAAA"}, session=session)
    assert collection.delete_many.await_args_list == [
        call({"postId": "AAAAAAA"}, session=session),
        call({"postId": "AAAAAAA"}, session=session),
    ]
    assert [c.args[0] for c in db_manager.get_collection.call_args_list] == [
        settings.POSTS_COLLECTION,
        settings.REVIEWS_COLLECTION,
        settings.FAVORITES_COLLECTION,
    ]

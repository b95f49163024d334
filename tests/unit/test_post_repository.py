import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DatabaseError, ValidationError
from db.models.post import Post
from db.repositories import decorators, post_repository


@pytest.fixture(autouse=True)
def _no_retry_delay(monkeypatch):
    monkeypatch.setattr(decorators, "RETRY_BASE_DELAY", 0)


@pytest.mark.unit
async def test_create_post_assigns_id_and_forces_unpublished(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    assert post.id is not None and post.id > 0
    assert post.title == "Hello"
    assert post.content == "World"
    assert post.published is False
    assert post.created_at is not None


@pytest.mark.unit
async def test_create_post_ids_are_unique(db_session: AsyncSession):
    first = await post_repository.create_post(db_session, "One", "first")
    second = await post_repository.create_post(db_session, "Two", "second")

    assert first.id != second.id


@pytest.mark.unit
async def test_get_all_posts_returns_creation_order(db_session: AsyncSession):
    titles = ["c", "a", "b"]
    for title in titles:
        await post_repository.create_post(db_session, title, "body")

    posts = await post_repository.get_all_posts(db_session)

    assert [p.title for p in posts] == titles
    assert await post_repository.count_posts(db_session) == 3


@pytest.mark.unit
async def test_get_post_by_id_missing_returns_none(db_session: AsyncSession):
    assert await post_repository.get_post_by_id(db_session, 999) is None


@pytest.mark.unit
@pytest.mark.parametrize("post_id", [0, -1])
async def test_get_post_by_id_non_positive_returns_none(db_session: AsyncSession, post_id: int):
    assert await post_repository.get_post_by_id(db_session, post_id) is None


@pytest.mark.unit
async def test_replace_post_overwrites_all_fields(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    updated = await post_repository.replace_post(db_session, post.id, "New", "Text", True)

    assert updated is not None
    assert updated.id == post.id
    assert (updated.title, updated.content, updated.published) == ("New", "Text", True)


@pytest.mark.unit
async def test_replace_post_missing_returns_none(db_session: AsyncSession):
    assert await post_repository.replace_post(db_session, 42, "t", "c", False) is None


@pytest.mark.unit
async def test_patch_post_writes_only_given_fields(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    updated = await post_repository.patch_post(db_session, post.id, {"published": True})

    assert updated is not None
    assert updated.published is True
    assert updated.title == "Hello"
    assert updated.content == "World"


@pytest.mark.unit
async def test_patch_post_rejects_unknown_field(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    with pytest.raises(ValidationError):
        await post_repository.patch_post(db_session, post.id, {"id": 7})


@pytest.mark.unit
async def test_patch_post_rejects_wrong_type(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    with pytest.raises(ValidationError):
        await post_repository.patch_post(db_session, post.id, {"published": "yes"})


@pytest.mark.unit
async def test_delete_post_by_id(db_session: AsyncSession):
    post = await post_repository.create_post(db_session, "Hello", "World")

    assert await post_repository.delete_post_by_id(db_session, post.id) is True
    assert await post_repository.get_post_by_id(db_session, post.id) is None
    assert await post_repository.delete_post_by_id(db_session, post.id) is False


@pytest.mark.unit
async def test_create_post_database_error(db_session: AsyncSession, monkeypatch):
    async def mock_flush(*args, **kwargs):
        raise SQLAlchemyError("Database connection failed")

    monkeypatch.setattr(db_session, "flush", mock_flush)

    with pytest.raises(DatabaseError):
        await post_repository.create_post(db_session, "Test Title", "Test Content")


@pytest.mark.unit
async def test_get_all_posts_database_error(db_session: AsyncSession, monkeypatch):
    async def mock_execute(*args, **kwargs):
        raise SQLAlchemyError("Database connection failed")

    monkeypatch.setattr(db_session, "execute", mock_execute)

    with pytest.raises(DatabaseError):
        await post_repository.get_all_posts(db_session)


@pytest.mark.unit
async def test_count_posts_database_error(db_session: AsyncSession, monkeypatch):
    async def mock_execute(*args, **kwargs):
        raise SQLAlchemyError("Database connection failed")

    monkeypatch.setattr(db_session, "execute", mock_execute)

    with pytest.raises(DatabaseError):
        await post_repository.count_posts(db_session)


@pytest.mark.unit
async def test_get_post_by_id_retries_operational_error(db_session: AsyncSession, monkeypatch):
    post = await post_repository.create_post(db_session, "Hello", "World")
    original_execute = db_session.execute
    calls = {"n": 0}

    async def flaky_execute(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("SELECT", {}, Exception("database is locked"))
        return await original_execute(*args, **kwargs)

    monkeypatch.setattr(db_session, "execute", flaky_execute)

    found = await post_repository.get_post_by_id(db_session, post.id)

    assert found is not None and found.id == post.id
    assert calls["n"] == 2


@pytest.mark.unit
async def test_get_post_by_id_gives_up_after_retries(db_session: AsyncSession, monkeypatch):
    calls = {"n": 0}

    async def mock_execute(*args, **kwargs):
        calls["n"] += 1
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "execute", mock_execute)

    with pytest.raises(DatabaseError):
        await post_repository.get_post_by_id(db_session, 1)
    assert calls["n"] == 3


@pytest.mark.unit
async def test_delete_post_by_id_database_error(db_session: AsyncSession, monkeypatch):
    mock_post = Post(id=1, title="Test", content="Test")

    async def mock_get_post_by_id(*args, **kwargs):
        return mock_post

    monkeypatch.setattr(post_repository, "get_post_by_id", mock_get_post_by_id)

    async def mock_delete(*args, **kwargs):
        raise SQLAlchemyError("Database connection failed")

    monkeypatch.setattr(db_session, "delete", mock_delete)

    with pytest.raises(DatabaseError):
        await post_repository.delete_post_by_id(db_session, 1)


@pytest.mark.unit
async def test_patch_post_database_error(db_session: AsyncSession, monkeypatch):
    mock_post = Post(id=1, title="Test", content="Test")

    async def mock_get_post_by_id(*args, **kwargs):
        return mock_post

    monkeypatch.setattr(post_repository, "get_post_by_id", mock_get_post_by_id)

    async def mock_flush(*args, **kwargs):
        raise SQLAlchemyError("Database connection failed")

    monkeypatch.setattr(db_session, "flush", mock_flush)

    with pytest.raises(DatabaseError):
        await post_repository.patch_post(db_session, 1, {"title": "New Title"})

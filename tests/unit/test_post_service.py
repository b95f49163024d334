import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, ValidationError
import db.repositories.post_repository as post_repository
from schemas.posts import PostCreate, PostPatch, PostReplace
from services import post_service


async def _create(db: AsyncSession, title: str = "Hello", content: str = "World") -> int:
    created = await post_service.create_post(db, PostCreate(title=title, content=content))
    return created.data.id


@pytest.mark.unit
async def test_create_post_returns_unpublished_record(db_session: AsyncSession):
    response = await post_service.create_post(db_session, PostCreate(title="Hello", content="World"))

    assert response.success is True
    assert response.data.id > 0
    assert response.data.title == "Hello"
    assert response.data.content == "World"
    assert response.data.published is False


@pytest.mark.unit
async def test_get_all_posts_lists_every_created_post(db_session: AsyncSession):
    ids = [await _create(db_session, title=f"Post {i}") for i in range(3)]

    response = await post_service.get_all_posts(db_session)

    assert [p.id for p in response.data] == ids


@pytest.mark.unit
async def test_get_all_posts_empty(db_session: AsyncSession):
    response = await post_service.get_all_posts(db_session)

    assert response.data == []


@pytest.mark.unit
async def test_get_post_by_id(db_session: AsyncSession):
    post_id = await _create(db_session)

    response = await post_service.get_post_by_id(db_session, post_id)

    assert response.data.id == post_id


@pytest.mark.unit
async def test_get_post_by_id_not_found(db_session: AsyncSession, monkeypatch):
    async def mock_get_post_by_id(*args, **kwargs):
        return None

    monkeypatch.setattr(post_repository, "get_post_by_id", mock_get_post_by_id)

    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(db_session, 1)


@pytest.mark.unit
async def test_replace_post_overwrites_fields_and_keeps_id(db_session: AsyncSession):
    post_id = await _create(db_session)

    response = await post_service.replace_post(
        db_session, post_id, PostReplace(title="Hello", content="World", published=True)
    )

    assert response.data.id == post_id
    assert response.data.published is True
    assert response.data.title == "Hello"


@pytest.mark.unit
async def test_replace_post_not_found(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await post_service.replace_post(db_session, 404, PostReplace(title="t", content="c", published=False))


@pytest.mark.unit
async def test_patch_post_toggle_twice_restores_value(db_session: AsyncSession):
    post_id = await _create(db_session)

    first = await post_service.patch_post(db_session, post_id, PostPatch(published=True))
    second = await post_service.patch_post(db_session, post_id, PostPatch(published=not first.data.published))

    assert first.data.published is True
    assert second.data.published is False
    assert second.data.title == "Hello"
    assert second.data.content == "World"


@pytest.mark.unit
async def test_patch_post_empty_body_is_rejected(db_session: AsyncSession):
    post_id = await _create(db_session)

    with pytest.raises(ValidationError):
        await post_service.patch_post(db_session, post_id, PostPatch())


@pytest.mark.unit
async def test_patch_post_not_found(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await post_service.patch_post(db_session, 404, PostPatch(title="x"))


@pytest.mark.unit
async def test_delete_post_then_again_not_found(db_session: AsyncSession):
    post_id = await _create(db_session)

    response = await post_service.delete_post(db_session, post_id)
    assert response.data == "Post deleted"

    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(db_session, post_id)
    with pytest.raises(NotFoundError):
        await post_service.delete_post(db_session, post_id)


@pytest.mark.unit
async def test_create_post_integrity_error_maps_to_validation(db_session: AsyncSession, monkeypatch):
    async def mock_create_post(*args, **kwargs):
        raise IntegrityError("INSERT", {}, Exception("constraint failed"))

    monkeypatch.setattr(post_repository, "create_post", mock_create_post)

    with pytest.raises(ValidationError):
        await post_service.create_post(db_session, PostCreate(title="t", content="c"))


@pytest.mark.unit
async def test_create_post_validation_error_failed_to_create(db_session: AsyncSession, monkeypatch):
    async def mock_create_post(*args, **kwargs):
        return None

    monkeypatch.setattr(post_repository, "create_post", mock_create_post)

    with pytest.raises(ValidationError):
        await post_service.create_post(db_session, PostCreate(title="t", content="c"))

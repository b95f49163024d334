from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, ValidationError
from db.repositories import post_repository as repo
import schemas.posts
from schemas.responses import SuccessResponse

POST_DELETED_MESSAGE = "Post deleted"


def _not_found(post_id: int) -> NotFoundError:
    return NotFoundError(f"Post with id {post_id} not found", details={"post_id": post_id})


async def get_all_posts(db: AsyncSession) -> SuccessResponse[list[schemas.posts.PostOut]]:
    posts = await repo.get_all_posts(db)
    items = [schemas.posts.PostOut.model_validate(p) for p in posts]
    return SuccessResponse[list[schemas.posts.PostOut]].ok(items)


async def get_post_by_id(db: AsyncSession, post_id: int) -> SuccessResponse[schemas.posts.PostOut]:
    post = await repo.get_post_by_id(db, post_id)
    if not post:
        raise _not_found(post_id)
    return SuccessResponse[schemas.posts.PostOut].ok(schemas.posts.PostOut.model_validate(post))


async def create_post(
    db: AsyncSession, post_data: schemas.posts.PostCreate
) -> SuccessResponse[schemas.posts.PostOut]:
    try:
        post = await repo.create_post(db=db, title=post_data.title, content=post_data.content)
    except IntegrityError as e:
        raise ValidationError("Failed to create post") from e
    if not post:
        raise ValidationError("Failed to create post")

    await db.commit()
    return SuccessResponse[schemas.posts.PostOut].ok(schemas.posts.PostOut.model_validate(post))


async def replace_post(
    db: AsyncSession, post_id: int, payload: schemas.posts.PostReplace
) -> SuccessResponse[schemas.posts.PostOut]:
    try:
        post = await repo.replace_post(
            db=db,
            post_id=post_id,
            title=payload.title,
            content=payload.content,
            published=payload.published,
        )
    except IntegrityError as e:
        raise ValidationError("Failed to update post") from e
    if not post:
        raise _not_found(post_id)

    await db.commit()
    return SuccessResponse[schemas.posts.PostOut].ok(schemas.posts.PostOut.model_validate(post))


async def patch_post(
    db: AsyncSession, post_id: int, patch: schemas.posts.PostPatch
) -> SuccessResponse[schemas.posts.PostOut]:
    changes = patch.changes()
    if not changes:
        raise ValidationError("No fields to update")

    try:
        post = await repo.patch_post(db=db, post_id=post_id, fields=changes)
    except IntegrityError as e:
        raise ValidationError("Failed to update post") from e
    if not post:
        raise _not_found(post_id)

    await db.commit()
    return SuccessResponse[schemas.posts.PostOut].ok(schemas.posts.PostOut.model_validate(post))


async def delete_post(db: AsyncSession, post_id: int) -> SuccessResponse[str]:
    deleted = await repo.delete_post_by_id(db=db, post_id=post_id)
    if not deleted:
        raise _not_found(post_id)
    await db.commit()
    return SuccessResponse[str].ok(POST_DELETED_MESSAGE)

from collections.abc import Mapping
import logging
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ValidationError
from db.models.post import Post
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)

AllowedField = Literal["title", "content", "published"]
ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset({"title", "content", "published"})

_FIELD_TYPES: dict[str, type] = {"title": str, "content": str, "published": bool}


@handle_db_errors()
async def create_post(db: AsyncSession, title: str, content: str) -> Post:
    new_post = Post(title=title, content=content, published=False)
    db.add(new_post)
    await db.flush()
    await db.refresh(new_post)
    logger.info("Created new post with id %s", new_post.id)
    return new_post


@with_retry(log_prefix="fetching all posts")
async def get_all_posts(db: AsyncSession) -> list[Post]:
    stmt = select(Post).order_by(Post.id)
    res = await db.execute(stmt)
    return list(res.scalars().all())


@with_retry(log_prefix="counting posts")
async def count_posts(db: AsyncSession) -> int:
    stmt = select(func.count(Post.id))
    res = await db.execute(stmt)
    return int(res.scalar_one())


@with_retry(log_prefix="fetching post")
async def get_post_by_id(db: AsyncSession, post_id: int) -> Post | None:
    if post_id <= 0:
        logger.warning("Invalid post_id: %s (must be > 0)", post_id)
        return None

    stmt = select(Post).where(Post.id == post_id)
    res = await db.execute(stmt)
    post = res.scalars().first()
    if not post:
        logger.info("Post with id %s not found", post_id)
    return post


def _check_fields(fields: Mapping[str, object]) -> None:
    for field, value in fields.items():
        if field not in ALLOWED_UPDATE_FIELDS:
            raise ValidationError(f"Field '{field}' cannot be updated")
        expected = _FIELD_TYPES[field]
        if not isinstance(value, expected):
            raise ValidationError(
                f"Invalid value type for '{field}': expected {expected.__name__}, got {type(value).__name__}"
            )


@handle_db_errors()
async def patch_post(db: AsyncSession, post_id: int, fields: Mapping[str, object]) -> Post | None:
    """Write only the given fields of a post; returns None when the post is absent."""
    _check_fields(fields)

    post = await get_post_by_id(db, post_id)
    if not post:
        logger.info("Skip update: post %s not found", post_id)
        return None

    for field, value in fields.items():
        setattr(post, field, value)

    await db.flush()
    await db.refresh(post)
    logger.info("Updated %s for post %s", ", ".join(sorted(fields)) or "nothing", post_id)
    return post


@handle_db_errors()
async def replace_post(
    db: AsyncSession,
    post_id: int,
    title: str,
    content: str,
    published: bool,
) -> Post | None:
    """Overwrite title, content and published of a post in one write."""
    return await patch_post(db, post_id, {"title": title, "content": content, "published": published})


@handle_db_errors()
async def delete_post_by_id(db: AsyncSession, post_id: int) -> bool:
    post = await get_post_by_id(db, post_id)
    if not post:
        logger.info("Skip delete: post %s not found", post_id)
        return False

    await db.delete(post)
    await db.flush()
    logger.info("Deleted post with id %s", post_id)
    return True

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
import schemas.posts as posts
from schemas.responses import SuccessResponse
from services import post_service

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get(
    "",
    response_model=SuccessResponse[list[posts.PostOut]],
    summary="List posts",
    description="Get every post in creation order.",
)
async def list_posts(db: Annotated[AsyncSession, Depends(get_db)]) -> SuccessResponse[list[posts.PostOut]]:
    return await post_service.get_all_posts(db=db)


@router.get(
    "/{post_id}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Get post by ID",
    description="Fetch a single post by its identifier. Missing posts answer 404.",
)
async def get_post(post_id: int, db: Annotated[AsyncSession, Depends(get_db)]) -> SuccessResponse[posts.PostOut]:
    return await post_service.get_post_by_id(db=db, post_id=post_id)


@router.post(
    "",
    response_model=SuccessResponse[posts.PostOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a new unpublished post from a title and content.",
)
async def create_post(
    db: Annotated[AsyncSession, Depends(get_db)],
    post_data: Annotated[posts.PostCreate, Body(...)],
) -> SuccessResponse[posts.PostOut]:
    return await post_service.create_post(db=db, post_data=post_data)


@router.put(
    "/{post_id}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Replace post (PUT)",
    description="Overwrite title, content and publication status. All three fields are required.",
)
async def replace_post(
    post_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    payload: Annotated[posts.PostReplace, Body(...)],
) -> SuccessResponse[posts.PostOut]:
    return await post_service.replace_post(db=db, post_id=post_id, payload=payload)


@router.patch(
    "/{post_id}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Partially update post",
    description="Update one or several of title, content and publication status.",
)
async def patch_post(
    post_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    patch: Annotated[posts.PostPatch, Body(...)],
) -> SuccessResponse[posts.PostOut]:
    return await post_service.patch_post(db=db, post_id=post_id, patch=patch)


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse[str],
    summary="Delete post",
    description="Delete a post by ID. Returns a confirmation message.",
)
async def delete_post(post_id: int, db: Annotated[AsyncSession, Depends(get_db)]) -> SuccessResponse[str]:
    return await post_service.delete_post(db=db, post_id=post_id)

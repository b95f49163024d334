from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError
from db.database import get_db
from schemas.posts import PostCreate, PostPatch, PostReplace
from services import post_service
from ui import state as s

logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).resolve().parent
STATIC_DIR = UI_DIR / "static"

templates = Jinja2Templates(directory=str(UI_DIR / "templates"))

router = APIRouter(tags=["UI"], include_in_schema=False)


async def _load_state(db: AsyncSession) -> s.ViewState:
    listing = await post_service.get_all_posts(db=db)
    return s.reduce(s.ViewState(loading=True), s.PostsLoaded(tuple(listing.data)))


def _render(request: Request, state: s.ViewState, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {"state": state},
        status_code=status_code,
    )


def _back_to_board() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


def _parse_post_id(raw: str) -> int | None:
    raw = raw.strip()
    return int(raw) if raw.isdigit() else None


def _field_errors(exc: PydanticValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "title"
        errors.setdefault(field, err["msg"])
    return errors


@router.get("/", response_class=HTMLResponse)
async def board(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    edit: int | None = None,
) -> HTMLResponse:
    state = await _load_state(db)
    if edit is not None:
        post = state.find(edit)
        if post is None:
            return _render(request, s.reduce(state, s.RequestFailed("Post not found")), status.HTTP_404_NOT_FOUND)
        state = s.reduce(state, s.EditStarted(post))
    return _render(request, state)


@router.post("/ui/posts", response_class=HTMLResponse)
async def submit_post(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    title: Annotated[str, Form()] = "",
    content: Annotated[str, Form()] = "",
    post_id: Annotated[str, Form()] = "",
) -> Response:
    state = await _load_state(db)
    editing_id = _parse_post_id(post_id)
    if editing_id is not None:
        post = state.find(editing_id)
        if post is None:
            return _render(request, s.reduce(state, s.RequestFailed("Post not found")), status.HTTP_404_NOT_FOUND)
        state = s.reduce(state, s.EditStarted(post))
    state = s.reduce(state, s.TitleChanged(title))
    state = s.reduce(state, s.ContentChanged(content))

    errors = s.validate_form(state)
    if errors:
        return _render(request, s.reduce(state, s.SubmitRejected(errors)), status.HTTP_400_BAD_REQUEST)

    try:
        if editing_id is None:
            payload = PostCreate(title=title, content=content)
        else:
            existing = state.find(editing_id)
            payload = PostReplace(title=title, content=content, published=bool(existing and existing.published))
    except PydanticValidationError as e:
        return _render(request, s.reduce(state, s.SubmitRejected(_field_errors(e))), status.HTTP_400_BAD_REQUEST)

    if editing_id is None:
        await post_service.create_post(db=db, post_data=payload)
    else:
        await post_service.replace_post(db=db, post_id=editing_id, payload=payload)
    return _back_to_board()


@router.post("/ui/posts/{post_id}/delete", response_class=HTMLResponse)
async def delete_post(request: Request, post_id: int, db: Annotated[AsyncSession, Depends(get_db)]) -> Response:
    try:
        await post_service.delete_post(db=db, post_id=post_id)
    except NotFoundError as e:
        logger.info("Board delete skipped: %s", e)
        state = await _load_state(db)
        return _render(request, s.reduce(state, s.RequestFailed("Post not found")), status.HTTP_404_NOT_FOUND)
    return _back_to_board()


@router.post("/ui/posts/{post_id}/toggle", response_class=HTMLResponse)
async def toggle_publish(request: Request, post_id: int, db: Annotated[AsyncSession, Depends(get_db)]) -> Response:
    try:
        current = await post_service.get_post_by_id(db=db, post_id=post_id)
        await post_service.patch_post(db=db, post_id=post_id, patch=PostPatch(published=not current.data.published))
    except NotFoundError as e:
        logger.info("Board toggle skipped: %s", e)
        state = await _load_state(db)
        return _render(request, s.reduce(state, s.RequestFailed("Post not found")), status.HTTP_404_NOT_FOUND)
    return _back_to_board()

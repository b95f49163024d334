"""View state of the posts board and the transitions between states.

The state is an immutable snapshot; every user or network event is an action
and ``reduce`` returns the next snapshot. Nothing here touches the network or
renders anything, so the whole UI behaviour can be exercised in plain tests.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from schemas.posts import MAX_TITLE_LENGTH, PostOut

TITLE_REQUIRED = "Title cannot be empty"
TITLE_TOO_LONG = f"Title must be at most {MAX_TITLE_LENGTH} characters"
CONTENT_REQUIRED = "Content cannot be empty"

SUBMIT_KEY = "Enter"


@dataclass(frozen=True)
class ViewState:
    posts: tuple[PostOut, ...] = ()
    title: str = ""
    content: str = ""
    editing_post_id: int | None = None
    loading: bool = False
    title_error: str | None = None
    content_error: str | None = None
    error: str | None = None

    @property
    def is_editing(self) -> bool:
        return self.editing_post_id is not None

    @property
    def submit_label(self) -> str:
        return "Update Post" if self.is_editing else "Create Post"

    def find(self, post_id: int) -> PostOut | None:
        return next((p for p in self.posts if p.id == post_id), None)


# Actions


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class PostsLoaded:
    posts: tuple[PostOut, ...]


@dataclass(frozen=True)
class TitleChanged:
    value: str


@dataclass(frozen=True)
class ContentChanged:
    value: str


@dataclass(frozen=True)
class EditStarted:
    post: PostOut


@dataclass(frozen=True)
class EditCancelled:
    pass


@dataclass(frozen=True)
class SubmitRejected:
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PostCreated:
    post: PostOut


@dataclass(frozen=True)
class PostUpdated:
    post: PostOut


@dataclass(frozen=True)
class PublishToggled:
    post: PostOut


@dataclass(frozen=True)
class PostDeleted:
    post_id: int


@dataclass(frozen=True)
class RequestFailed:
    message: str


def validate_form(state: ViewState) -> dict[str, str]:
    """Return field errors keyed by field name: blank title or content, over-long title."""
    errors: dict[str, str] = {}
    if not state.title.strip():
        errors["title"] = TITLE_REQUIRED
    elif len(state.title) > MAX_TITLE_LENGTH:
        errors["title"] = TITLE_TOO_LONG
    if not state.content.strip():
        errors["content"] = CONTENT_REQUIRED
    return errors


def is_submit_key(key: str, *, shift: bool = False, ctrl: bool = False, alt: bool = False, meta: bool = False) -> bool:
    """Enter alone submits; Enter with any modifier inserts a newline instead."""
    return key == SUBMIT_KEY and not (shift or ctrl or alt or meta)


def _cleared_form(state: ViewState) -> ViewState:
    return replace(
        state,
        title="",
        content="",
        editing_post_id=None,
        title_error=None,
        content_error=None,
    )


def _replace_post(posts: tuple[PostOut, ...], updated: PostOut) -> tuple[PostOut, ...]:
    return tuple(updated if p.id == updated.id else p for p in posts)


def _on_load_started(state: ViewState, action: LoadStarted) -> ViewState:
    return replace(state, loading=True, error=None)


def _on_posts_loaded(state: ViewState, action: PostsLoaded) -> ViewState:
    return replace(state, posts=tuple(action.posts), loading=False)


def _on_title_changed(state: ViewState, action: TitleChanged) -> ViewState:
    return replace(state, title=action.value, title_error=None)


def _on_content_changed(state: ViewState, action: ContentChanged) -> ViewState:
    return replace(state, content=action.value, content_error=None)


def _on_edit_started(state: ViewState, action: EditStarted) -> ViewState:
    return replace(
        state,
        editing_post_id=action.post.id,
        title=action.post.title,
        content=action.post.content,
        title_error=None,
        content_error=None,
    )


def _on_edit_cancelled(state: ViewState, action: EditCancelled) -> ViewState:
    return _cleared_form(state)


def _on_submit_rejected(state: ViewState, action: SubmitRejected) -> ViewState:
    return replace(
        state,
        title_error=action.errors.get("title"),
        content_error=action.errors.get("content"),
    )


def _on_post_created(state: ViewState, action: PostCreated) -> ViewState:
    return replace(_cleared_form(state), posts=state.posts + (action.post,), error=None)


def _on_post_updated(state: ViewState, action: PostUpdated) -> ViewState:
    posts = _replace_post(state.posts, action.post)
    return replace(_cleared_form(state), posts=posts, error=None)


def _on_publish_toggled(state: ViewState, action: PublishToggled) -> ViewState:
    # The form may hold an edit in progress; only the list changes
    return replace(state, posts=_replace_post(state.posts, action.post), error=None)


def _on_post_deleted(state: ViewState, action: PostDeleted) -> ViewState:
    posts = tuple(p for p in state.posts if p.id != action.post_id)
    if state.editing_post_id == action.post_id:
        return replace(_cleared_form(state), posts=posts, error=None)
    return replace(state, posts=posts, error=None)


def _on_request_failed(state: ViewState, action: RequestFailed) -> ViewState:
    return replace(state, loading=False, error=action.message)


_HANDLERS: dict[type, Callable[[ViewState, Any], ViewState]] = {
    LoadStarted: _on_load_started,
    PostsLoaded: _on_posts_loaded,
    TitleChanged: _on_title_changed,
    ContentChanged: _on_content_changed,
    EditStarted: _on_edit_started,
    EditCancelled: _on_edit_cancelled,
    SubmitRejected: _on_submit_rejected,
    PostCreated: _on_post_created,
    PostUpdated: _on_post_updated,
    PublishToggled: _on_publish_toggled,
    PostDeleted: _on_post_deleted,
    RequestFailed: _on_request_failed,
}


def reduce(state: ViewState, action: object) -> ViewState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {type(action).__name__}")
    return handler(state, action)

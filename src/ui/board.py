from __future__ import annotations

import logging

from core.exceptions import BlogException, NotFoundError, ValidationError
from ui import state as s
from ui.client import PostsApiClient

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Post not found"


class PostBoard:
    """Drives the board flows: every network answer is folded into the view state.

    A failed call leaves the post list untouched and only sets ``state.error``.
    """

    def __init__(self, client: PostsApiClient, state: s.ViewState | None = None) -> None:
        self.client = client
        self.state = state or s.ViewState()

    def dispatch(self, action: object) -> s.ViewState:
        self.state = s.reduce(self.state, action)
        return self.state

    async def load(self) -> None:
        self.dispatch(s.LoadStarted())
        try:
            posts = await self.client.list_posts()
        except BlogException as e:
            self._fail(e)
            return
        self.dispatch(s.PostsLoaded(tuple(posts)))

    def set_title(self, value: str) -> None:
        self.dispatch(s.TitleChanged(value))

    def set_content(self, value: str) -> None:
        self.dispatch(s.ContentChanged(value))

    def start_edit(self, post_id: int) -> None:
        post = self.state.find(post_id)
        if post is None:
            self.dispatch(s.RequestFailed(NOT_FOUND_MESSAGE))
            return
        self.dispatch(s.EditStarted(post))

    def cancel_edit(self) -> None:
        self.dispatch(s.EditCancelled())

    async def submit(self) -> bool:
        """Create or update depending on the edit target. Returns False when nothing was saved."""
        errors = s.validate_form(self.state)
        if errors:
            self.dispatch(s.SubmitRejected(errors))
            return False

        current = self.state
        try:
            if current.editing_post_id is None:
                post = await self.client.create_post(current.title, current.content)
                self.dispatch(s.PostCreated(post))
            else:
                existing = current.find(current.editing_post_id)
                published = existing.published if existing else False
                post = await self.client.update_post(
                    current.editing_post_id, current.title, current.content, published
                )
                self.dispatch(s.PostUpdated(post))
        except BlogException as e:
            self._fail(e)
            return False
        return True

    async def delete(self, post_id: int) -> bool:
        try:
            await self.client.delete_post(post_id)
        except BlogException as e:
            self._fail(e)
            return False
        self.dispatch(s.PostDeleted(post_id))
        return True

    async def toggle_publish(self, post_id: int) -> bool:
        post = self.state.find(post_id)
        if post is None:
            self.dispatch(s.RequestFailed(NOT_FOUND_MESSAGE))
            return False
        try:
            updated = await self.client.patch_post(post_id, published=not post.published)
        except BlogException as e:
            self._fail(e)
            return False
        self.dispatch(s.PublishToggled(updated))
        return True

    async def handle_key(
        self, key: str, *, shift: bool = False, ctrl: bool = False, alt: bool = False, meta: bool = False
    ) -> bool:
        """Submit the active flow on plain Enter. Returns True when a submission was attempted."""
        if not s.is_submit_key(key, shift=shift, ctrl=ctrl, alt=alt, meta=meta):
            return False
        await self.submit()
        return True

    def _fail(self, exc: BlogException) -> None:
        if isinstance(exc, NotFoundError):
            message = NOT_FOUND_MESSAGE
        elif isinstance(exc, ValidationError):
            message = f"Invalid post: {exc.message}"
        else:
            message = exc.message
        logger.warning("Board request failed: %s", exc)
        self.dispatch(s.RequestFailed(message))

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import BlogException, NotFoundError, ValidationError
from schemas.posts import PostOut

logger = logging.getLogger(__name__)

POSTS_PATH = "/api/v1/posts"


@dataclass(eq=False)
class TransportError(BlogException):
    """Network failure or an unexpected answer from the posts API."""

    code: str = "transport_error"


class PostsApiClient:
    """Async client for the posts API that unwraps response envelopes.

    Failures surface as ``NotFoundError`` (404), ``ValidationError`` (422) or
    ``TransportError`` (anything else, including connection problems).
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    def connect(cls, base_url: str, *, timeout: float = 10.0) -> PostsApiClient:
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PostsApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def list_posts(self) -> list[PostOut]:
        data = await self._request("GET", POSTS_PATH)
        return [self._to_post(item) for item in self._expect_list(data)]

    async def get_post(self, post_id: int) -> PostOut:
        return self._to_post(await self._request("GET", f"{POSTS_PATH}/{post_id}"))

    async def create_post(self, title: str, content: str) -> PostOut:
        payload = {"title": title, "content": content}
        return self._to_post(await self._request("POST", POSTS_PATH, json=payload))

    async def update_post(self, post_id: int, title: str, content: str, published: bool) -> PostOut:
        payload = {"title": title, "content": content, "published": published}
        return self._to_post(await self._request("PUT", f"{POSTS_PATH}/{post_id}", json=payload))

    async def patch_post(self, post_id: int, **fields: Any) -> PostOut:
        return self._to_post(await self._request("PATCH", f"{POSTS_PATH}/{post_id}", json=fields))

    async def delete_post(self, post_id: int) -> str:
        return str(await self._request("DELETE", f"{POSTS_PATH}/{post_id}"))

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"Could not reach the server: {e}") from e

        body = self._json(response)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(self._message(body, "Post not found"))
        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY:
            raise ValidationError(self._message(body, "Invalid request"), details={"body": body})
        if response.is_error:
            logger.warning("%s %s answered %s", method, url, response.status_code)
            raise TransportError(
                self._message(body, f"Server answered {response.status_code}"),
                details={"status": response.status_code},
            )
        if not isinstance(body, dict) or "data" not in body:
            raise TransportError("Malformed response from server")
        return body["data"]

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _message(body: Any, default: str) -> str:
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return default

    @staticmethod
    def _expect_list(data: Any) -> list[Any]:
        if not isinstance(data, list):
            raise TransportError("Malformed response from server")
        return data

    @staticmethod
    def _to_post(data: Any) -> PostOut:
        try:
            return PostOut.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError("Malformed post in server response") from e

import logging
from typing import List, Optional

import httpx

from paperhub.api.comments.schemas import CommentOut
from paperhub.api.likes.schemas import LikeOut
from paperhub.client.errors import CommentNotFoundError, StoreError, WrongPasswordError
from paperhub.client.models import Comment

logger = logging.getLogger(__name__)


def _to_comment(data: dict) -> Comment:
    out = CommentOut.model_validate(data)
    return Comment(
        id=out.id,
        tool_id=out.tool_id,
        nickname=out.nickname,
        body=out.body,
        created_at=out.created_at,
    )


class RemoteStoreClient:
    """
    Comments and likes held by the PaperHub API.

    Every failure, network or server side, is raised as `StoreError`; a
    rejected delete password is the more specific `WrongPasswordError`.
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=10)
        self._owns_client = client is None

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise StoreError(f"Could not reach the server: {e}") from e
        if response.status_code == 403:
            raise WrongPasswordError("Wrong password.")
        if response.status_code == 404:
            raise CommentNotFoundError("Not found.")
        if response.is_error:
            logger.error("%s %s answered HTTP %s", method, path, response.status_code)
            raise StoreError(f"Server error (HTTP {response.status_code}).")
        return response

    @staticmethod
    def _parse(response: httpx.Response, parser):
        try:
            return parser(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Unexpected response from the server: {e}") from e

    # ---------------- comments ----------------
    async def list_comments(self, tool_id: int) -> List[Comment]:
        response = await self._request("GET", f"/comments/tool/{tool_id}")
        return self._parse(response, lambda items: [_to_comment(item) for item in items])

    async def count_comments(self, tool_id: int) -> int:
        response = await self._request("GET", f"/comments/tool/{tool_id}/count")
        return self._parse(response, lambda data: int(data["count"]))

    async def add_comment(self, tool_id: int, nickname: str, body: str, password: str) -> Comment:
        response = await self._request("POST", "/comments/", json={
            "tool_id": tool_id,
            "nickname": nickname,
            "body": body,
            "password": password,
        })
        return self._parse(response, _to_comment)

    async def delete_comment(self, comment_id: str, password: str) -> None:
        await self._request("DELETE", f"/comments/{comment_id}", json={"password": password})

    # ---------------- likes ----------------
    async def get_likes(self, tool_id: int) -> int:
        response = await self._request("GET", f"/likes/{tool_id}")
        return self._parse(response, lambda data: LikeOut.model_validate(data).count)

    async def like(self, tool_id: int, current_count: int) -> int:
        response = await self._request("POST", f"/likes/{tool_id}", json={"current_count": current_count})
        return self._parse(response, lambda data: LikeOut.model_validate(data).count)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

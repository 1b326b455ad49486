import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from paperhub.config import settings
from paperhub.client.errors import ErrorKind, StoreError, UIError, store_error_to_ui
from paperhub.client.events import COMMENT_COUNT, LIKE_COUNT, EventBus
from paperhub.client.local_state import StateStore
from paperhub.client.models import Comment
from paperhub.client.store import RemoteStoreClient

logger = logging.getLogger(__name__)

PasswordPrompt = Callable[[], Optional[str]]
NICKNAME_MAX_LENGTH = 50


class CommentBoard:
    """
    The comment thread of one tool, with optimistic add and delete.

    Every change is shown before the server confirms it. A failed call undoes
    only its own change, so overlapping calls settle on their own outcome.
    """

    def __init__(self, tool_id: int, store: RemoteStoreClient, bus: EventBus,
                 default_nickname: str = settings.DEFAULT_NICKNAME):
        self.tool_id = tool_id
        self.store = store
        self.bus = bus
        self.default_nickname = default_nickname
        self.comments: List[Comment] = []
        self.nickname = ""
        self.body = ""
        self.password = ""
        self.error: Optional[UIError] = None
        self.is_loading = False

    def _index_of(self, comment_id: str) -> Optional[int]:
        for index, comment in enumerate(self.comments):
            if comment.id == comment_id:
                return index
        return None

    async def load(self) -> bool:
        self.is_loading = True
        try:
            comments = await self.store.list_comments(self.tool_id)
        except StoreError as e:
            logger.error("Loading comments for tool %s failed: %s", self.tool_id, e)
            self.error = store_error_to_ui(e)
            return False
        finally:
            self.is_loading = False
        self.comments = comments
        self.bus.publish(COMMENT_COUNT, self.tool_id, len(comments))
        return True

    async def add(self) -> bool:
        if not self.body.strip() or not self.password.strip():
            self.error = UIError(ErrorKind.VALIDATION, "Please enter a comment and a password.")
            return False
        if len(self.nickname.strip()) > NICKNAME_MAX_LENGTH:
            self.error = UIError(ErrorKind.VALIDATION, f"Nicknames are at most {NICKNAME_MAX_LENGTH} characters.")
            return False

        saved_fields = (self.nickname, self.body, self.password)
        nickname = self.nickname.strip() or self.default_nickname
        body, password = self.body, self.password
        old_count = len(self.comments)

        pending = Comment(
            id=f"tmp-{uuid.uuid4().hex[:8]}",
            tool_id=self.tool_id,
            nickname=nickname,
            body=body,
            created_at=datetime.now(timezone.utc),
            pending=True,
        )
        self.comments.insert(0, pending)
        self.nickname = self.body = self.password = ""
        self.error = None

        try:
            created = await self.store.add_comment(self.tool_id, nickname, body, password)
        except StoreError as e:
            logger.warning("Rolling back comment on tool %s: %s", self.tool_id, e)
            index = self._index_of(pending.id)
            if index is not None:
                del self.comments[index]
            self.nickname, self.body, self.password = saved_fields
            self.error = store_error_to_ui(e)
            return False

        index = self._index_of(pending.id)
        if index is not None:
            self.comments[index] = created
        self.bus.publish(COMMENT_COUNT, self.tool_id, old_count + 1)
        return True

    async def delete(self, comment_id: str, prompt_password: PasswordPrompt) -> bool:
        """Delete after asking for the comment's password. A None answer cancels."""
        index = self._index_of(comment_id)
        if index is None or self.comments[index].pending:
            return False
        password = prompt_password()
        if password is None:
            return False

        # the list may have changed while the prompt was open
        index = self._index_of(comment_id)
        if index is None:
            return False
        removed = self.comments.pop(index)
        self.error = None

        try:
            await self.store.delete_comment(comment_id, password)
        except StoreError as e:
            logger.warning("Rolling back delete of comment %s: %s", comment_id, e)
            self.comments.insert(min(index, len(self.comments)), removed)
            self.error = store_error_to_ui(e)
            return False

        self.bus.publish(COMMENT_COUNT, self.tool_id, len(self.comments))
        return True


class LikeTracker:
    """
    Forward-only likes.

    Tools this client already liked are remembered in the persisted state,
    and liking them again does nothing. The server stores the count the
    client knew plus one, so likes from other clients can be overwritten.
    """

    def __init__(self, store: RemoteStoreClient, bus: EventBus, state: StateStore):
        self.store = store
        self.bus = bus
        self.state = state
        self.error: Optional[UIError] = None

    def is_liked(self, tool_id: int) -> bool:
        return self.state.is_liked(tool_id)

    async def like(self, tool_id: int, current_count: int) -> bool:
        if self.state.is_liked(tool_id):
            return False

        self.state.set_liked(tool_id, True)
        self.error = None
        self.bus.publish(LIKE_COUNT, tool_id, current_count + 1)

        try:
            count = await self.store.like(tool_id, current_count)
        except StoreError as e:
            logger.warning("Rolling back like of tool %s: %s", tool_id, e)
            self.state.set_liked(tool_id, False)
            self.bus.publish(LIKE_COUNT, tool_id, current_count)
            self.error = store_error_to_ui(e)
            return False

        self.bus.publish(LIKE_COUNT, tool_id, count)
        return True

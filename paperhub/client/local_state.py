import logging
import os
import datetime as dt
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class TodoItem(BaseModel):
    text: str
    completed: bool = False


class Goal(BaseModel):
    title: str = "Paper Submission"
    deadline: dt.date = dt.date(2026, 6, 30)


class LocalState(BaseModel):
    """Everything the client remembers between runs."""
    favorites: List[int] = Field(default_factory=list)
    liked_tools: List[int] = Field(default_factory=list)
    todos: List[TodoItem] = Field(default_factory=list)
    memo: str = ""
    goal: Goal = Field(default_factory=Goal)
    focus_seconds: int = 0


class StateStore:
    """
    JSON file behind `LocalState`.

    `load()` is called once at startup; components that change `state` call
    `save()` afterwards. `on_save` hooks run after every successful write.
    """

    def __init__(self, path: str):
        self.path = Path(os.path.expanduser(path))
        self.state = LocalState()
        self._on_save: List[Callable[[LocalState], None]] = []

    def load(self) -> LocalState:
        if not self.path.exists():
            self.state = LocalState()
            return self.state
        try:
            self.state = LocalState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            self.state = LocalState()
        return self.state

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(self.state.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
        for hook in list(self._on_save):
            hook(self.state)

    def on_save(self, hook: Callable[[LocalState], None]) -> None:
        self._on_save.append(hook)

    # ---------------- favorites ----------------
    def toggle_favorite(self, tool_id: int) -> bool:
        """Returns True when the tool is now a favorite."""
        favorites = self.state.favorites
        if tool_id in favorites:
            favorites.remove(tool_id)
            now_favorite = False
        else:
            favorites.append(tool_id)
            now_favorite = True
        self.save()
        return now_favorite

    def is_liked(self, tool_id: int) -> bool:
        return tool_id in self.state.liked_tools

    def set_liked(self, tool_id: int, liked: bool) -> None:
        liked_tools = self.state.liked_tools
        if liked and tool_id not in liked_tools:
            liked_tools.append(tool_id)
        elif not liked and tool_id in liked_tools:
            liked_tools.remove(tool_id)
        else:
            return
        self.save()


def open_state(path: Optional[str] = None) -> StateStore:
    from paperhub.config import settings

    store = StateStore(path or settings.STATE_FILE)
    store.load()
    return store

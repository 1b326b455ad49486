"""Sidebar widgets: focus garden, clocks, goal countdown, to-dos and memo."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from paperhub.client.local_state import Goal, StateStore, TodoItem
from paperhub.data.conferences import CONFERENCES, Conference

AOE = timezone(timedelta(hours=-12), "AoE")
COMPANIONS = ["🐱", "🐈", "🦁", "🐯", "🐈‍⬛"]


# ---------------- Focus garden ----------------
@dataclass(frozen=True)
class GardenStage:
    name: str
    icon: str
    progress: float  # percent towards the next stage


def format_focus_time(total_seconds: int) -> str:
    hours, rest = divmod(max(0, int(total_seconds)), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def garden_stage(total_seconds: int) -> GardenStage:
    if total_seconds < 300:
        return GardenStage("Seedling", "🌱", total_seconds / 300 * 100)
    if total_seconds < 1800:
        return GardenStage("Sprout", "🌿", (total_seconds - 300) / 1500 * 100)
    if total_seconds < 3600:
        return GardenStage("Small Tree", "🌳", (total_seconds - 1800) / 1800 * 100)
    return GardenStage("Great Tree", "🌲", 100.0)


def companions(total_seconds: int) -> List[str]:
    """One companion per focused hour, five at most."""
    count = min(len(COMPANIONS), int(total_seconds) // 3600)
    return COMPANIONS[:count]


def add_focus_time(store: StateStore, seconds: int) -> int:
    store.state.focus_seconds += max(0, int(seconds))
    store.save()
    return store.state.focus_seconds


# ---------------- Clocks ----------------
def aoe_now(now: Optional[datetime] = None) -> datetime:
    """Current time Anywhere on Earth (UTC-12), the usual paper deadline zone."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.astimezone()
    return now.astimezone(AOE)


def goal_countdown(deadline: date, now: Optional[datetime] = None) -> Dict[str, str]:
    """Days/hours/minutes/seconds left until the end (23:59:59 local) of `deadline`."""
    now = now or datetime.now()
    target = datetime.combine(deadline, time(23, 59, 59))
    if now.tzinfo is not None:
        target = target.replace(tzinfo=now.tzinfo)
    remaining = max(0, int((target - now).total_seconds()))
    days, rest = divmod(remaining, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {
        "d": f"{days:02d}",
        "h": f"{hours:02d}",
        "m": f"{minutes:02d}",
        "s": f"{seconds:02d}",
    }


def set_goal(store: StateStore, title: str, deadline: date) -> Goal:
    store.state.goal = Goal(title=title.strip() or store.state.goal.title, deadline=deadline)
    store.save()
    return store.state.goal


def upcoming_deadlines(today: Optional[date] = None) -> List[Tuple[Conference, int]]:
    """(conference, days left) for deadlines not yet passed, soonest first."""
    today = today or date.today()
    pending = [(conf, (conf.deadline - today).days) for conf in CONFERENCES if conf.deadline >= today]
    return sorted(pending, key=lambda item: item[1])


# ---------------- To-do list ----------------
def add_todo(store: StateStore, text: str) -> Optional[TodoItem]:
    text = text.strip()
    if not text:
        return None
    item = TodoItem(text=text)
    store.state.todos.append(item)
    store.save()
    return item


def toggle_todo(store: StateStore, index: int) -> TodoItem:
    item = store.state.todos[index]
    item.completed = not item.completed
    store.save()
    return item


def delete_todo(store: StateStore, index: int) -> TodoItem:
    item = store.state.todos.pop(index)
    store.save()
    return item


# ---------------- Memo ----------------
def set_memo(store: StateStore, text: str) -> None:
    store.state.memo = text
    store.save()


from typing import Iterable, List, Optional

from paperhub.data.tools import TOOLS, TOOLS_BY_ID, Tool
from . import schemas


def get_tool(tool_id: int) -> Optional[Tool]:
    return TOOLS_BY_ID.get(tool_id)

def filter_tools(query: Optional[str] = None, category: str = "all",
                 favorites: Iterable[int] = ()) -> List[Tool]:
    """
    Search the catalog.

    `query` matches title or description case-insensitively; `category` is a
    catalog category id, "all", or "fav" for the given favorite tool ids.
    """
    needle = (query or "").strip().lower()
    favorite_ids = set(favorites)

    def matches(tool: Tool) -> bool:
        if needle and needle not in tool.title.lower() and needle not in tool.desc.lower():
            return False
        if category == "all":
            return True
        if category == "fav":
            return tool.id in favorite_ids
        return tool.category == category

    return [tool for tool in TOOLS if matches(tool)]


def convert_author_names(authors: str) -> str:
    """
    BibTeX author list: commas become " and ", spaces become "~".

    Anything from the first literal " and " onwards is left as typed.
    """
    and_index = authors.lower().find(" and ")
    if and_index == -1:
        return authors.replace(" ", "~").replace(",", " and ")
    head, tail = authors[:and_index], authors[and_index:]
    return head.replace(" ", "~").replace(",", " and ") + tail


def calculate_improvement(baseline: float, new: float, is_percent: bool = False) -> schemas.ImprovementResponse:
    diff = new - baseline
    if is_percent:
        return schemas.ImprovementResponse(
            label="Improvement (%p)" if diff >= 0 else "Decline (%p)",
            value=f"{'+' if diff > 0 else ''}{diff:.2f}%p",
            is_positive=diff >= 0,
        )
    if baseline == 0:
        return schemas.ImprovementResponse(label="Improvement Rate", value="N/A", is_positive=True)
    rate = diff / baseline * 100
    return schemas.ImprovementResponse(
        label="Improvement Rate" if rate >= 0 else "Decline Rate",
        value=f"{'+' if rate > 0 else ''}{rate:.2f}%",
        is_positive=rate >= 0,
    )

"""Fixed catalog of browsable categories and their endpoint adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from constants import API_BASE, LIST_PAGE_SIZE, SEPARATOR
from models import CATEGORIES, CategoryId, Item, UnknownCategoryError, make_item

__all__ = [
    "EndpointSpec",
    "adapt_films",
    "adapt_named",
    "detail_url",
    "get_endpoint",
    "is_category",
]


@dataclass(frozen=True)
class EndpointSpec:
    category: CategoryId
    label: str
    list_url: str
    adapt: Callable[[Any], List[Item]]
    supports_detail: bool
    base_url: str = API_BASE

    def detail_url(self, identifier: str) -> str:
        return detail_url(self.category, identifier, base_url=self.base_url)


def adapt_films(raw: Dict[str, Any]) -> List[Item]:
    """Map `{result: [{properties: {...}}]}` to titled items with a subtitle."""
    items: List[Item] = []
    for record in raw["result"]:
        props = record["properties"]
        subtitle = f"{props.get('release_date', '')}{SEPARATOR}{props.get('director', '')}"
        items.append(make_item(props["title"], subtitle=subtitle))
    return items


def adapt_named(raw: Dict[str, Any]) -> List[Item]:
    """Map `{results: [{name, uid}]}` to items that support detail lookup."""
    return [make_item(r["name"], identifier=str(r["uid"])) for r in raw["results"]]


def detail_url(category: str, identifier: str, *, base_url: str = API_BASE) -> str:
    return f"{base_url}/{category}/{identifier}"


def is_category(value: str) -> bool:
    return value in CATEGORIES


def get_endpoint(category: str, *, base_url: str = API_BASE) -> EndpointSpec:
    """Return the endpoint spec for `category`."""
    base = base_url.rstrip("/")
    if category == "films":
        return EndpointSpec("films", "Films", f"{base}/films", adapt_films, False, base)
    if category == "people":
        return EndpointSpec(
            "people",
            "People",
            f"{base}/people?page=1&limit={LIST_PAGE_SIZE}",
            adapt_named,
            True,
            base,
        )
    if category == "planets":
        return EndpointSpec(
            "planets",
            "Planets",
            f"{base}/planets?page=1&limit={LIST_PAGE_SIZE}",
            adapt_named,
            True,
            base,
        )
    raise UnknownCategoryError(category)

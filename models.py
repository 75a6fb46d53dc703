"""Data structures used across the application."""

from __future__ import annotations

from typing import Literal, Optional, Tuple, TypedDict

CategoryId = Literal["films", "people", "planets"]

CATEGORIES: Tuple[CategoryId, ...] = ("films", "people", "planets")


class Item(TypedDict):
    """A single list entry; detail fields are filled in lazily."""

    title: str
    subtitle: Optional[str]
    identifier: Optional[str]
    detail: Optional[str]
    detail_loaded: bool
    detail_status: Optional[str]


class ViewRow(TypedDict):
    """Display-agnostic row produced by the view projection."""

    kind: str
    title: str
    subtitle: Optional[str]
    status: str
    identifier: Optional[str]
    category: Optional[str]


class TabView(TypedDict):
    category: str
    label: str
    active: bool


class BrowserError(Exception):
    """Base for errors raised while talking to the remote API."""


class ListFetchError(BrowserError):
    pass


class DetailFetchError(BrowserError):
    pass


class UnknownCategoryError(ValueError):
    def __init__(self, category: str) -> None:
        super().__init__(f"Unknown category '{category}'")
        self.category = category


def make_item(
    title: str,
    *,
    subtitle: Optional[str] = None,
    identifier: Optional[str] = None,
) -> Item:
    """Build an item with its detail fields in the not-yet-loaded state."""
    return {
        "title": title,
        "subtitle": subtitle,
        "identifier": identifier,
        "detail": None,
        "detail_loaded": False,
        "detail_status": None,
    }


__all__ = [
    "CATEGORIES",
    "BrowserError",
    "CategoryId",
    "DetailFetchError",
    "Item",
    "ListFetchError",
    "TabView",
    "UnknownCategoryError",
    "ViewRow",
    "make_item",
]

"""Named UI events routed to the list controller and detail loader."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from catalog import is_category
from controller import ListController
from details import DetailLoader
from models import UnknownCategoryError, ViewRow

__all__ = [
    "CATEGORY_SELECTED",
    "EventDispatcher",
    "FILTER_CHANGED",
    "ITEM_SELECTED",
    "RELOAD_REQUESTED",
    "UnknownItemError",
    "build_dispatcher",
]

CATEGORY_SELECTED = "on_category_selected"
FILTER_CHANGED = "on_filter_changed"
ITEM_SELECTED = "on_item_selected"
RELOAD_REQUESTED = "on_reload_requested"

Handler = Callable[..., List[ViewRow]]


class UnknownItemError(LookupError):
    def __init__(self, identifier: str) -> None:
        super().__init__(f"No item with identifier '{identifier}' in the current list")
        self.identifier = identifier


class EventDispatcher:
    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        if name in self._handlers:
            raise ValueError(f"Duplicate handler for event {name}")
        self._handlers[name] = handler

    def dispatch(self, name: str, **payload: Any) -> List[ViewRow]:
        handler = self._handlers.get(name)
        if handler is None:
            raise KeyError(f"No handler registered for event {name}")
        return handler(**payload)

    def names(self) -> List[str]:
        return list(self._handlers)


def on_category_selected(controller: ListController, category: str) -> List[ViewRow]:
    if not is_category(category):
        raise UnknownCategoryError(category)
    controller.select_category(category)  # type: ignore[arg-type]
    return controller.render()


def on_filter_changed(controller: ListController, query: str) -> List[ViewRow]:
    controller.set_filter(query)
    return controller.render()


def on_item_selected(
    controller: ListController, loader: DetailLoader, identifier: str
) -> List[ViewRow]:
    item = controller.find_item(identifier)
    if item is None:
        raise UnknownItemError(identifier)
    loader.load_detail(controller.category, item, on_change=controller.refresh)
    return controller.render()


def on_reload_requested(controller: ListController) -> List[ViewRow]:
    controller.reload()
    return controller.render()


def build_dispatcher(controller: ListController, loader: DetailLoader) -> EventDispatcher:
    """Register the UI event handlers against one controller/loader pair."""
    dispatcher = EventDispatcher()
    dispatcher.register(
        CATEGORY_SELECTED,
        lambda category: on_category_selected(controller, category),
    )
    dispatcher.register(
        FILTER_CHANGED,
        lambda query: on_filter_changed(controller, query),
    )
    dispatcher.register(
        ITEM_SELECTED,
        lambda identifier: on_item_selected(controller, loader, identifier),
    )
    dispatcher.register(RELOAD_REQUESTED, lambda: on_reload_requested(controller))
    return dispatcher

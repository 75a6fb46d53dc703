"""List controller: owns the selected category, the item set and the filter."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

import requests

from catalog import EndpointSpec, get_endpoint
from client import build_session, fetch_json
from constants import API_BASE, DEFAULT_CATEGORY, DEFAULT_TIMEOUT, LIST_ERROR_PREFIX
from models import CategoryId, Item, ListFetchError, ViewRow
from views import filter_items, render_rows

__all__ = ["ListController"]

logger = logging.getLogger(__name__)

RenderListener = Callable[[List[ViewRow]], None]


class ListController:
    """Fetches one category at a time and exposes a filtered view of it.

    `state` is one of ``idle`` (nothing fetched yet), ``loading``, ``ready``
    or ``error``. Every fetch is tagged with the selection generation at
    issue time and its result is dropped if the selection moved on.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        base_url: str = API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
        category: CategoryId = DEFAULT_CATEGORY,
    ) -> None:
        self.session = session if session is not None else build_session()
        self.base_url = base_url
        self.timeout = timeout
        self.category: CategoryId = category
        self.items: List[Item] = []
        self.query = ""
        self.state = "idle"
        self.error: Optional[str] = None
        self._generation = 0
        self._listeners: List[RenderListener] = []

    @property
    def endpoint(self) -> EndpointSpec:
        return get_endpoint(self.category, base_url=self.base_url)

    def subscribe(self, listener: RenderListener) -> None:
        self._listeners.append(listener)

    def select_category(self, category: CategoryId) -> bool:
        """Switch to `category` and fetch it; returns False if already selected."""
        if category == self.category and self.state != "idle":
            return False
        get_endpoint(category, base_url=self.base_url)
        self.category = category
        self.items = []
        self.fetch_list()
        return True

    def reload(self) -> bool:
        return self.fetch_list()

    def fetch_list(self) -> bool:
        """Fetch the current category; returns False if the result was discarded."""
        self._generation += 1
        generation = self._generation
        category = self.category
        endpoint = self.endpoint

        self.state = "loading"
        self.error = None
        self._notify()

        try:
            raw = fetch_json(
                self.session,
                endpoint.list_url,
                error_cls=ListFetchError,
                timeout=self.timeout,
            )
            try:
                items = endpoint.adapt(raw)
            except (KeyError, TypeError, AttributeError) as exc:
                raise ListFetchError("unexpected response shape") from exc
        except ListFetchError as exc:
            if generation != self._generation:
                logger.info("Discarding stale %s list error: %s", category, exc)
                return False
            logger.warning("Fetching %s list failed: %s", category, exc)
            self.items = []
            self.state = "error"
            self.error = f"{LIST_ERROR_PREFIX}: {exc}"
            self._notify()
            return True

        if generation != self._generation:
            logger.info("Discarding stale %s list (%d items)", category, len(items))
            return False

        self.items = items
        self.state = "ready"
        self._notify()
        return True

    def set_filter(self, query: str) -> None:
        self.query = (query or "").lower()
        self._notify()

    def visible_items(self) -> List[Item]:
        if self.state != "ready":
            return []
        return filter_items(self.items, self.query)

    def find_item(self, identifier: str) -> Optional[Item]:
        for item in self.items:
            if item["identifier"] == identifier:
                return item
        return None

    def render(self) -> List[ViewRow]:
        return render_rows(
            self.items,
            self.query,
            category=self.category,
            state=self.state,
            error=self.error,
        )

    def refresh(self) -> None:
        """Push the current rows to listeners after an in-place item change."""
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        rows = self.render()
        for listener in self._listeners:
            listener(rows)

"""Lazy per-item detail loading with memoization on the item itself."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from catalog import get_endpoint, is_category
from client import build_session, fetch_json
from constants import (
    API_BASE,
    DEFAULT_TIMEOUT,
    DETAIL_ERROR_PREFIX,
    DETAIL_LOADING_TEXT,
    NO_DETAILS_TEXT,
    SEPARATOR,
)
from models import DetailFetchError, Item

__all__ = ["DetailLoader", "SUMMARIZERS", "format_person", "format_planet"]

logger = logging.getLogger(__name__)


def _join(parts: list) -> str:
    return SEPARATOR.join(p for p in parts if p) or NO_DETAILS_TEXT


def format_person(props: Mapping[str, Any]) -> str:
    """height (cm) · gender · birth year"""
    height = f"{props['height']} cm" if props.get("height") else ""
    return _join([height, props.get("gender") or "", props.get("birth_year") or ""])


def format_planet(props: Mapping[str, Any]) -> str:
    """climate · terrain · population"""
    population = props.get("population")
    pop = f"pop {population}" if population and population != "unknown" else ""
    return _join([props.get("climate") or "", props.get("terrain") or "", pop])


SUMMARIZERS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "people": format_person,
    "planets": format_planet,
}


class DetailLoader:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        base_url: str = API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session if session is not None else build_session()
        self.base_url = base_url
        self.timeout = timeout

    def load_detail(
        self,
        category: str,
        item: Item,
        on_change: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Fetch and summarise detail for `item` once.

        `on_change` is called after the item is marked loading and again once
        its detail text is final.

        Returns False without touching the network when the category has no
        detail endpoint, the item has no identifier, or detail was already
        loaded (successfully or not).
        """
        if not is_category(category):
            return False
        endpoint = get_endpoint(category, base_url=self.base_url)
        identifier = item.get("identifier")
        if not endpoint.supports_detail or not identifier or item["detail_loaded"]:
            return False

        item["detail"] = DETAIL_LOADING_TEXT
        item["detail_status"] = "loading"
        if on_change is not None:
            on_change()
        try:
            raw = fetch_json(
                self.session,
                endpoint.detail_url(identifier),
                error_cls=DetailFetchError,
                timeout=self.timeout,
            )
            result = raw.get("result") if isinstance(raw, dict) else None
            props = result.get("properties") if isinstance(result, dict) else None
            try:
                item["detail"] = SUMMARIZERS[category](props or {})
            except (KeyError, TypeError, AttributeError) as exc:
                raise DetailFetchError("unexpected response shape") from exc
            item["detail_status"] = "ok"
        except DetailFetchError as exc:
            logger.warning("Fetching %s/%s detail failed: %s", category, identifier, exc)
            item["detail"] = f"{DETAIL_ERROR_PREFIX}: {exc}"
            item["detail_status"] = "error"
        finally:
            item["detail_loaded"] = True
        if on_change is not None:
            on_change()
        return True

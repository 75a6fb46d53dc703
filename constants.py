"""Shared configuration constants for the application."""

from __future__ import annotations

import os

from models import CategoryId

API_BASE = os.getenv("SWAPI_BASE_URL", "https://swapi.tech/api").rstrip("/")
DEFAULT_TIMEOUT = int(os.getenv("SWAPI_TIMEOUT", "10"))
USER_AGENT = "swapi-browser/0.1 (+https://swapi.tech)"

DEFAULT_CATEGORY: CategoryId = "films"
LIST_PAGE_SIZE = 100

SEPARATOR = " · "
LOADING_TEXT = "Loading…"
EMPTY_TEXT = "Nothing found"
LIST_ERROR_PREFIX = "Loading error"
DETAIL_LOADING_TEXT = "Loading details…"
DETAIL_ERROR_PREFIX = "Failed to load details"
NO_DETAILS_TEXT = "No details"

_EXPORTED_NAMES = (
    "API_BASE",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "DEFAULT_CATEGORY",
    "LIST_PAGE_SIZE",
    "SEPARATOR",
    "LOADING_TEXT",
    "EMPTY_TEXT",
    "LIST_ERROR_PREFIX",
    "DETAIL_LOADING_TEXT",
    "DETAIL_ERROR_PREFIX",
    "NO_DETAILS_TEXT",
)

__all__ = [name for name in _EXPORTED_NAMES if name in globals()]

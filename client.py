"""HTTP helpers for talking to the Star Wars API."""

from __future__ import annotations

import logging
from typing import Any, Type

import requests

from constants import DEFAULT_TIMEOUT, USER_AGENT
from models import BrowserError

__all__ = ["build_session", "fetch_json"]

logger = logging.getLogger(__name__)


def build_session() -> requests.Session:
    """Create a `requests.Session` with JSON headers and no retry policy."""
    session = requests.Session()
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    })
    return session


def fetch_json(
    session: requests.Session,
    url: str,
    *,
    error_cls: Type[BrowserError] = BrowserError,
    timeout: int = DEFAULT_TIMEOUT,
) -> Any:
    """GET `url` and decode its JSON body.

    Transport failures, non-2xx statuses and undecodable bodies are raised
    as `error_cls` with a short human-readable message.
    """
    logger.debug("GET %s", url)
    try:
        resp = session.get(url, timeout=timeout)
    except requests.exceptions.Timeout as exc:
        raise error_cls(f"timed out after {timeout}s") from exc
    except requests.exceptions.RequestException as exc:
        raise error_cls(str(exc) or exc.__class__.__name__) from exc

    if not 200 <= resp.status_code < 300:
        raise error_cls(f"HTTP {resp.status_code}")

    try:
        return resp.json()
    except ValueError as exc:
        raise error_cls("invalid JSON in response") from exc

"""Pure projections from controller state to display-agnostic rows."""

from __future__ import annotations

import csv
import io
from typing import Iterable, List, Optional, Sequence

from catalog import get_endpoint
from constants import EMPTY_TEXT, LOADING_TEXT
from models import CATEGORIES, Item, TabView, ViewRow

__all__ = [
    "filter_items",
    "render_rows",
    "render_tabs",
    "rows_to_text",
    "to_csv_bytes",
]


def filter_items(items: Sequence[Item], query: str) -> List[Item]:
    """Keep items whose title contains `query` (case-insensitive), in order."""
    needle = query.lower()
    return [item for item in items if needle in item["title"].lower()]


def _placeholder(kind: str, text: str, status: str) -> ViewRow:
    return {
        "kind": kind,
        "title": text,
        "subtitle": None,
        "status": status,
        "identifier": None,
        "category": None,
    }


def _item_row(item: Item, category: Optional[str]) -> ViewRow:
    return {
        "kind": "item",
        "title": item["title"],
        "subtitle": item["detail"] if item["detail"] is not None else item["subtitle"],
        "status": item["detail_status"] or "idle",
        "identifier": item["identifier"],
        "category": category,
    }


def render_rows(
    items: Sequence[Item],
    query: str = "",
    *,
    category: Optional[str] = None,
    state: str = "ready",
    error: Optional[str] = None,
) -> List[ViewRow]:
    """Project the item set to rows.

    A loading or failed list renders as a single placeholder row, and so
    does a filter that matches nothing. The item set is never modified.
    """
    if state == "loading":
        return [_placeholder("loading", LOADING_TEXT, "loading")]
    if state == "error":
        return [_placeholder("error", error or "Loading error", "error")]

    matching = filter_items(items, query)
    if not matching:
        return [_placeholder("empty", EMPTY_TEXT, "empty")]
    return [_item_row(item, category) for item in matching]


def render_tabs(current: str) -> List[TabView]:
    return [
        {"category": cat, "label": get_endpoint(cat).label, "active": cat == current}
        for cat in CATEGORIES
    ]


def rows_to_text(rows: Iterable[ViewRow]) -> str:
    """Render rows as plain text lines, one card per line."""
    lines: List[str] = []
    for row in rows:
        if row["kind"] != "item":
            lines.append(f"[{row['kind']}] {row['title']}")
            continue
        line = f"- {row['title']}"
        if row["subtitle"]:
            line += f" ({row['subtitle']})"
        if row["identifier"]:
            line += f" #{row['identifier']}"
        lines.append(line)
    return "\n".join(lines) + "\n"


def to_csv_bytes(rows: Iterable[ViewRow]) -> bytes:
    """Serialize rendered item rows into CSV and return the encoded bytes."""
    output = io.StringIO()
    fieldnames = ["category", "identifier", "title", "subtitle", "status"]
    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        if row["kind"] != "item":
            continue
        writer.writerow(row)
    return output.getvalue().encode("utf-8")

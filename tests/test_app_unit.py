"""Unit tests for the web surface and command line in app.py."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from app import build_browser, create_app, main, parse_args, run_cli
from events import CATEGORY_SELECTED, FILTER_CHANGED, ITEM_SELECTED, RELOAD_REQUESTED
from stubs import (
    BASE,
    FILMS_URL,
    PEOPLE_URL,
    PLANETS_URL,
    DummyResponse,
    DummySession,
    detail_payload,
    films_payload,
    named_payload,
)


@pytest.fixture
def session() -> DummySession:
    return DummySession(
        {
            FILMS_URL: DummyResponse(
                films_payload(
                    {"title": "A New Hope", "release_date": "1977-05-25", "director": "George Lucas"},
                    {"title": "The Empire Strikes Back", "release_date": "1980-05-17", "director": "Irvin Kershner"},
                )
            ),
            PEOPLE_URL: DummyResponse(named_payload("Luke Skywalker", "Leia Organa")),
            PLANETS_URL: DummyResponse({"message": "down"}, status_code=500),
            f"{BASE}/people/1": DummyResponse(
                detail_payload(height="172", gender="male", birth_year="19BBY")
            ),
        }
    )


@pytest.fixture
def flask_app(session: DummySession) -> Flask:
    return create_app(build_browser(session, base_url=BASE))


@pytest.fixture
def client(flask_app: Flask) -> FlaskClient:
    return flask_app.test_client()


def test_dispatcher_registers_named_events(session: DummySession) -> None:
    browser = build_browser(session, base_url=BASE)

    assert sorted(browser.dispatcher.names()) == sorted(
        [CATEGORY_SELECTED, FILTER_CHANGED, ITEM_SELECTED, RELOAD_REQUESTED]
    )


def test_index_loads_initial_category_once(client: FlaskClient, session: DummySession) -> None:
    first = client.get("/")
    second = client.get("/")

    assert first.status_code == 200
    html = first.get_data(as_text=True)
    assert "A New Hope" in html
    assert "1977-05-25 · George Lucas" in html
    assert 'class="tab is-active" data-page="films"' in html
    assert second.status_code == 200
    assert session.get_calls == [FILMS_URL]


def test_view_payload_lists_tabs_and_rows(client: FlaskClient) -> None:
    payload = client.get("/api/view").get_json()

    assert payload["category"] == "films"
    assert [(t["category"], t["active"]) for t in payload["tabs"]] == [
        ("films", True),
        ("people", False),
        ("planets", False),
    ]
    assert [row["title"] for row in payload["rows"]] == ["A New Hope", "The Empire Strikes Back"]


def test_category_filter_and_detail_flow(client: FlaskClient, session: DummySession) -> None:
    client.post("/api/category/people")
    filtered = client.post("/api/filter", json={"q": "LU"}).get_json()

    assert [row["title"] for row in filtered["rows"]] == ["Luke Skywalker"]
    assert filtered["query"] == "lu"

    detail = client.post("/api/items/1/detail").get_json()
    again = client.post("/api/items/1/detail").get_json()

    assert detail["rows"][0]["subtitle"] == "172 cm · male · 19BBY"
    assert again["rows"] == detail["rows"]
    assert session.get_calls.count(f"{BASE}/people/1") == 1


def test_filter_accepts_form_data(client: FlaskClient) -> None:
    client.get("/")

    payload = client.post("/api/filter", data={"q": "empire"}).get_json()

    assert [row["title"] for row in payload["rows"]] == ["The Empire Strikes Back"]


def test_list_error_is_single_inline_entry(client: FlaskClient) -> None:
    payload = client.post("/api/category/planets").get_json()

    assert payload["state"] == "error"
    assert payload["rows"] == [
        {
            "kind": "error",
            "title": "Loading error: HTTP 500",
            "subtitle": None,
            "status": "error",
            "identifier": None,
            "category": None,
        }
    ]


def test_reload_refetches_current_category(client: FlaskClient, session: DummySession) -> None:
    client.post("/api/category/planets")
    session.routes[PLANETS_URL] = DummyResponse(named_payload("Tatooine"))

    payload = client.post("/api/reload").get_json()

    assert payload["state"] == "ready"
    assert [row["title"] for row in payload["rows"]] == ["Tatooine"]


def test_unknown_category_and_item_return_404(client: FlaskClient) -> None:
    assert client.post("/api/category/starships").status_code == 404
    client.post("/api/category/people")
    assert client.post("/api/items/42/detail").status_code == 404


def test_download_csv_exports_rendered_rows(client: FlaskClient) -> None:
    client.get("/")

    resp = client.get("/download_csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    rows = list(csv.DictReader(resp.get_data(as_text=True).splitlines()))
    assert [row["title"] for row in rows] == ["A New Hope", "The Empire Strikes Back"]
    assert rows[0]["subtitle"] == "1977-05-25 · George Lucas"


def test_missing_template_is_fatal(monkeypatch: pytest.MonkeyPatch, session: DummySession) -> None:
    monkeypatch.setattr("app.REQUIRED_TEMPLATES", ("missing.html",))

    with pytest.raises(RuntimeError, match="missing.html"):
        create_app(build_browser(session, base_url=BASE))


def test_cli_prints_filtered_rows_with_detail(
    session: DummySession, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "out" / "people.csv"
    args = parse_args(["--base-url", BASE, "--category", "people", "--filter", "sky", "--detail", "1", "--csv", str(output)])

    code = run_cli(args, session=session)

    out = capsys.readouterr().out
    assert code == 0
    assert "- Luke Skywalker (172 cm · male · 19BBY) #1" in out
    assert "Leia" not in out
    assert output.exists()


def test_cli_reports_list_error(session: DummySession, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(parse_args(["--base-url", BASE, "--category", "planets"]), session=session)

    assert code == 1
    assert "[ERROR] Loading error: HTTP 500" in capsys.readouterr().err



def test_item_selection_notifies_subscribers(session: DummySession) -> None:
    browser = build_browser(session, base_url=BASE)
    browser.dispatcher.dispatch(CATEGORY_SELECTED, category="people")
    seen = []
    browser.controller.subscribe(lambda rows: seen.append(rows[0]["subtitle"]))

    browser.dispatcher.dispatch(ITEM_SELECTED, identifier="1")

    assert seen == ["Loading details…", "172 cm · male · 19BBY"]


@pytest.mark.parametrize("argv", [[], ["-v"], ["--port", "9000"], ["--serve", "-c", "people"]])
def test_main_serves_single_threaded_without_listing_flags(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, argv
) -> None:
    calls = []
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: calls.append(kwargs))
    caplog.set_level(logging.INFO, logger="app")

    assert main(argv) == 0

    assert len(calls) == 1
    assert calls[0]["threaded"] is False
    assert "Serving on http://127.0.0.1:" in caplog.text


def test_main_lists_when_a_listing_flag_is_given(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []
    monkeypatch.setattr("app.run_cli", lambda args: seen.append(args.category) or 0)
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: pytest.fail("server started"))

    assert main(["-v", "--filter", "hope"]) == 0

    assert seen == [None]

import json

import pytest
import requests

from courtside.tui import KeyEvent


def team(abbr: str, id_: int = 1) -> dict:
    return {
        "id": id_,
        "abbreviation": abbr,
        "city": "City",
        "conference": "West",
        "division": "Pacific",
        "full_name": f"{abbr} Full",
        "name": abbr.title(),
    }


def game(home: str, home_score: int, visitor: str, visitor_score: int, id_: int = 1) -> dict:
    return {
        "id": id_,
        "date": "2023-01-15T00:00:00.000Z",
        "home_team": team(home, 14),
        "home_team_score": home_score,
        "period": 4,
        "postseason": False,
        "season": 2022,
        "status": "Final",
        "time": "",
        "visitor_team": team(visitor, 2),
        "visitor_team_score": visitor_score,
        "extra_field": "ignored",
    }


def page(*games: dict) -> dict:
    return {"data": list(games), "meta": {"current_page": 1, "next_page": None, "per_page": 25}}


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Answers every GET with the next queued response (or raises it, if it is an exception)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


@pytest.fixture
def lal_bos_page() -> dict:
    return page(game("LAL", 101, "BOS", 99))


@pytest.fixture
def ok_response(lal_bos_page):
    return FakeResponse(json.dumps(lal_bos_page))


class FakeReader:
    """Terminal stand-in: hands out queued keys (None = poll timed out)."""

    def __init__(self, *keys):
        self.keys = list(keys)
        self.entered = False
        self.exited = False
        self.timeouts = []

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc):
        self.exited = True

    def poll(self, timeout):
        self.timeouts.append(timeout)
        if not self.keys:
            raise AssertionError("polled after quit")
        key = self.keys.pop(0)
        return KeyEvent(key) if key else None

"""
balldontlie games endpoint: one page of NBA results for a single date.

Decoding is strict about the fields we model and ignores everything else.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
import requests

API = "https://www.balldontlie.io/api/v1/games/"
DEFAULT_TIMEOUT = 10

UA = "courtside/0.1 (+https://www.balldontlie.io)"


class DecodeError(ValueError):
    """Response body is not JSON shaped like a games page."""


# --- decode helpers -----------------------------------------------------------

def _req(obj: dict, key: str, kind: type, where: str):
    if not isinstance(obj, dict):
        raise DecodeError(f"{where}: expected object, got {type(obj).__name__}")
    if key not in obj:
        raise DecodeError(f"{where}: missing field '{key}'")
    val = obj[key]
    # bool is an int subclass; JSON true is not a score
    if kind is int and isinstance(val, bool):
        raise DecodeError(f"{where}.{key}: expected int, got bool")
    if not isinstance(val, kind):
        raise DecodeError(f"{where}.{key}: expected {kind.__name__}, got {type(val).__name__}")
    return val

def _opt(obj: dict, key: str, kind: type, where: str):
    if obj.get(key) is None:
        return None
    return _req(obj, key, kind, where)

def _count(obj: dict, key: str, where: str) -> int:
    val = _req(obj, key, int, where)
    if val < 0:
        raise DecodeError(f"{where}.{key}: negative value {val}")
    return val


# --- models -------------------------------------------------------------------

@dataclass(frozen=True)
class Team:
    id: int
    abbreviation: str
    city: str
    conference: str
    division: str
    full_name: str
    name: str

    @classmethod
    def from_dict(cls, d: dict, where: str = "team") -> "Team":
        return cls(
            id=_req(d, "id", int, where),
            abbreviation=_req(d, "abbreviation", str, where),
            city=_req(d, "city", str, where),
            conference=_req(d, "conference", str, where),
            division=_req(d, "division", str, where),
            full_name=_req(d, "full_name", str, where),
            name=_req(d, "name", str, where),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "abbreviation": self.abbreviation,
            "city": self.city,
            "conference": self.conference,
            "division": self.division,
            "full_name": self.full_name,
            "name": self.name,
        }


@dataclass(frozen=True)
class Game:
    id: int
    date: str
    home_team: Team
    home_team_score: int
    period: int
    postseason: bool
    season: int
    status: str
    time: str | None
    visitor_team: Team
    visitor_team_score: int

    @classmethod
    def from_dict(cls, d: dict, where: str = "game") -> "Game":
        return cls(
            id=_req(d, "id", int, where),
            date=_req(d, "date", str, where),
            home_team=Team.from_dict(_req(d, "home_team", dict, where), f"{where}.home_team"),
            home_team_score=_count(d, "home_team_score", where),
            period=_count(d, "period", where),
            postseason=_req(d, "postseason", bool, where),
            season=_count(d, "season", where),
            status=_req(d, "status", str, where),
            time=_opt(d, "time", str, where),
            visitor_team=Team.from_dict(_req(d, "visitor_team", dict, where), f"{where}.visitor_team"),
            visitor_team_score=_count(d, "visitor_team_score", where),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "home_team": self.home_team.to_dict(),
            "home_team_score": self.home_team_score,
            "period": self.period,
            "postseason": self.postseason,
            "season": self.season,
            "status": self.status,
            "time": self.time,
            "visitor_team": self.visitor_team.to_dict(),
            "visitor_team_score": self.visitor_team_score,
        }

    def display_line(self) -> str:
        return (
            f"{self.home_team.abbreviation} {self.home_team_score}:"
            f"{self.visitor_team_score} {self.visitor_team.abbreviation}\n"
        )


@dataclass(frozen=True)
class Meta:
    current_page: int
    next_page: int | None
    per_page: int

    @classmethod
    def from_dict(cls, d: dict, where: str = "meta") -> "Meta":
        return cls(
            current_page=_req(d, "current_page", int, where),
            next_page=_opt(d, "next_page", int, where),
            per_page=_req(d, "per_page", int, where),
        )

    def to_dict(self) -> dict:
        return {
            "current_page": self.current_page,
            "next_page": self.next_page,
            "per_page": self.per_page,
        }


@dataclass(frozen=True)
class GameData:
    """One results page: games in API order plus pagination info (only page 1 is ever read)."""
    data: list[Game] = field(default_factory=list)
    meta: Meta = field(default_factory=lambda: Meta(current_page=1, next_page=None, per_page=25))

    @classmethod
    def from_dict(cls, d: dict) -> "GameData":
        games = _req(d, "data", list, "page")
        return cls(
            data=[Game.from_dict(g, f"data[{i}]") for i, g in enumerate(games)],
            meta=Meta.from_dict(_req(d, "meta", dict, "page")),
        )

    @classmethod
    def from_json(cls, text: str) -> "GameData":
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError) as e:
            raise DecodeError(f"invalid JSON: {e}") from e
        return cls.from_dict(payload)

    def to_dict(self) -> dict:
        return {"data": [g.to_dict() for g in self.data], "meta": self.meta.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch: "ok", "empty" (zero games) or "error" (transient)."""
    kind: str
    data: GameData | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind != "error"


# --- http ---------------------------------------------------------------------

def http_session() -> requests.Session:
    s = requests.Session()
    s.headers.update({
        "User-Agent": UA,
        "Accept": "application/json",
    })
    return s

def day_param(day: datetime) -> str:
    # naive datetimes are taken as UTC
    if day.tzinfo is None:
        day = day.replace(tzinfo=timezone.utc)
    return day.astimezone(timezone.utc).strftime("%Y-%m-%d")

def fetch_games(session: requests.Session, day: datetime, timeout: float = DEFAULT_TIMEOUT) -> GameData:
    # first page only; meta.next_page is kept but never followed
    r = session.get(API, params={"dates[]": day_param(day)}, timeout=timeout)
    r.raise_for_status()
    return GameData.from_json(r.text)

def fetch_outcome(session: requests.Session, day: datetime, timeout: float = DEFAULT_TIMEOUT) -> FetchOutcome:
    try:
        data = fetch_games(session, day, timeout=timeout)
    except requests.RequestException as e:
        return FetchOutcome("error", reason=_short_reason(e))
    except DecodeError as e:
        return FetchOutcome("error", reason=str(e))
    return FetchOutcome("ok" if data.data else "empty", data=data)

def _short_reason(e: requests.RequestException) -> str:
    resp = getattr(e, "response", None)
    if resp is not None:
        return f"http {resp.status_code}"
    return type(e).__name__

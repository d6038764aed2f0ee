"""
Interactive day-by-day results viewer.

One loop, no threads: poll stdin for up to POLL_SECONDS, apply the key to the
navigation state (fetching synchronously when the day moves), redraw the panel,
stop after the frame that follows 'q'.
"""

from __future__ import annotations
import os, select, sys
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

try:
    import termios
    import tty
except ImportError:  # pragma: no cover
    termios = None
    tty = None

import requests
from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .api import DEFAULT_TIMEOUT, FetchOutcome, GameData, day_param, fetch_outcome

POLL_SECONDS = 0.25

# h/l move a week, j/k a day; h and j go forward
KEY_OFFSETS = {"h": 7, "j": 1, "k": -1, "l": -7}

NAVIGATION = (
    "\n"
    "Navigation:\n"
    "one day: j|k\n"
    "one week: h|l\n"
    "today: t\n"
    "quit: q"
)

Fetch = Callable[[datetime], FetchOutcome]
Clock = Callable[[], datetime]


class TerminalError(RuntimeError):
    """The terminal could not be put into (or out of) interactive mode."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- state --------------------------------------------------------------------

@dataclass
class NavState:
    day: datetime
    quit: bool = False
    result: GameData | None = None
    status: str | None = None

    def apply(self, outcome: FetchOutcome) -> None:
        # a failed fetch leaves the last good page on screen
        if outcome.ok:
            self.result = outcome.data
            self.status = None
        else:
            self.status = f"Could not load {day_param(self.day)}: {outcome.reason}"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    kind: str = "press"


def startup_state(fetch: Fetch, clock: Clock = utcnow) -> NavState:
    # opens on today's date but with yesterday's games
    now = clock()
    yesterday = now - timedelta(days=1)
    state = NavState(day=yesterday)
    state.apply(fetch(yesterday))
    state.day = now
    return state


# --- input --------------------------------------------------------------------

def handle_key(state: NavState, event: KeyEvent, fetch: Fetch, clock: Clock = utcnow) -> bool:
    """Apply one key event. Returns True when the selected day moved (and a fetch ran)."""
    if event.kind != "press":
        return False
    key = event.key
    if key == "q":
        state.quit = True
        return False
    if key in KEY_OFFSETS:
        state.day = state.day + timedelta(days=KEY_OFFSETS[key])
    elif key == "t":
        state.day = clock()
    else:
        return False
    state.apply(fetch(state.day))
    return True


class KeyReader:
    """stdin in cbreak mode for the lifetime of the with-block."""

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._fd: int | None = None
        self._saved = None

    def __enter__(self) -> "KeyReader":
        if termios is None or tty is None:
            raise TerminalError("interactive mode needs a POSIX terminal")
        if not self.stream.isatty():
            raise TerminalError("stdin is not a terminal")
        fd = self.stream.fileno()
        try:
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as e:
            raise TerminalError(f"could not enter cbreak mode: {e}") from e
        self._fd = fd
        return self

    def __exit__(self, *exc) -> None:
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def poll(self, timeout: float) -> KeyEvent | None:
        r, _, _ = select.select([self._fd], [], [], timeout)
        if not r:
            return None
        ch = os.read(self._fd, 1)
        if not ch:
            # select keeps reporting a hung-up fd as readable
            raise TerminalError("stdin closed")
        return KeyEvent(ch.decode("utf-8", errors="replace"))


# --- view ---------------------------------------------------------------------

def render(state: NavState, now: datetime) -> tuple[str, str]:
    """(title, body) for the current state."""
    if state.result is None:
        return "", ""
    date = day_param(state.day)
    if state.day > now:
        return f"{date} is in the future.", ""
    lines = "".join(g.display_line() for g in state.result.data)
    return f"NBA Game results of: {date}", lines + NAVIGATION

def build_panel(state: NavState, now: datetime, height: int | None = None) -> Panel:
    title, body = render(state, now)
    return Panel(
        Text(body),
        title=Text(title) if title else None,
        title_align="left",
        subtitle=Text(state.status, style="yellow") if state.status else None,
        subtitle_align="left",
        box=box.SQUARE,
        expand=True,
        height=height,
    )


# --- loop ---------------------------------------------------------------------

@contextmanager
def terminal(console: Console, reader) -> Iterator[Live]:
    # both context managers unwind on any exit path, error or not
    with reader:
        with Live(
            console=console,
            screen=True,
            auto_refresh=False,
            transient=True,
            redirect_stdout=False,
            redirect_stderr=False,
        ) as live:
            yield live

def run(
    session: requests.Session,
    console: Console | None = None,
    reader=None,
    clock: Clock = utcnow,
    poll_timeout: float = POLL_SECONDS,
    timeout: float = DEFAULT_TIMEOUT,
    on_error: Callable[[str], None] | None = None,
) -> NavState:
    console = console or Console()
    reader = reader if reader is not None else KeyReader()

    def fetch(day: datetime) -> FetchOutcome:
        outcome = fetch_outcome(session, day, timeout=timeout)
        if not outcome.ok and on_error:
            on_error(f"{day_param(day)}: {outcome.reason}")
        return outcome

    with terminal(console, reader) as live:
        state = startup_state(fetch, clock)
        while True:
            event = reader.poll(poll_timeout)
            if event is not None:
                handle_key(state, event, fetch, clock)
            live.update(build_panel(state, clock(), console.size.height), refresh=True)
            if state.quit:
                break
    return state

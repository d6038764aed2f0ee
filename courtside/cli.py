#!/usr/bin/env python3
"""
courtside: NBA results in your shell.

- Interactive: browse day by day (j/k) or week by week (h/l), t for today, q to quit
- One-shot: --date YYYY-MM-DD prints that day's results and exits
- Minimal output, ANSI color optional

Note: Uses the balldontlie games endpoint, first results page only.
"""

from __future__ import annotations
import argparse, sys
from datetime import datetime, timezone

from .api import DEFAULT_TIMEOUT, day_param, fetch_outcome, http_session
from .tui import TerminalError, run

# --- tiny helpers -------------------------------------------------------------

def colorize(enabled: bool, s: str, fg: str = "37") -> str:
    # cheap ANSI: fg expects '31'..'37'
    if not enabled:
        return s
    start = "\x1b[" + fg + "m"
    end = "\x1b[0m"
    return f"{start}{s}{end}"

def warn(msg: str, color: bool = True):
    print(colorize(color, f"⚠ {msg}", "33"), file=sys.stderr)

def log_to(path: str | None, color: bool = True):
    # appends timestamped lines; None means drop. An unwritable file is
    # reported once and then ignored.
    broken = False

    def write(msg: str):
        nonlocal broken
        if not path or broken:
            return
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{stamp} {msg}\n")
        except OSError as e:
            broken = True
            warn(f"cannot write log {path}: {e.strerror or e}", color)
    return write

def parse_date(s: str) -> datetime:
    try:
        d = datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {s!r}") from None
    return d.replace(tzinfo=timezone.utc)

# --- one-shot -----------------------------------------------------------------

def print_day(day: datetime, timeout: float, color: bool, log) -> int:
    date = day_param(day)
    outcome = fetch_outcome(http_session(), day, timeout=timeout)
    if not outcome.ok:
        warn(f"request for {date} failed: {outcome.reason}", color)
        log(f"{date}: {outcome.reason}")
        return 1
    print(colorize(color, f"These are the results for {date}!", "32"))
    for game in outcome.data.data:
        print(game.display_line(), end="")
    return 0

# --- cli ---------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Browse NBA game results in your terminal")
    ap.add_argument("--date", type=parse_date, help="YYYY-MM-DD: print that day's results and exit")
    ap.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                    help=f"HTTP timeout in seconds (default {DEFAULT_TIMEOUT})")
    ap.add_argument("--no-color", action="store_true", help="Disable ANSI color")
    ap.add_argument("--log", help="Append failed requests to a file")
    return ap

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    color = not args.no_color
    log = log_to(args.log, color)

    if args.date:
        return print_day(args.date, args.timeout, color, log)

    try:
        run(http_session(), timeout=args.timeout, on_error=log)
    except TerminalError as e:
        warn(str(e), color)
        return 1
    except KeyboardInterrupt:
        print("\nBye.")
    return 0

if __name__ == "__main__":
    sys.exit(main())

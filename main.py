#!/usr/bin/env python3
"""
courtside: NBA results in your shell.

Run without arguments for the interactive viewer, or with --date YYYY-MM-DD
to print one day's results.
"""

import sys

from courtside.cli import main

if __name__ == "__main__":
    sys.exit(main())

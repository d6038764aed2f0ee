"""courtside: browse NBA game results in the terminal."""

__version__ = "0.1.0"

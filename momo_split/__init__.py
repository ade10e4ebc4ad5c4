"""Group expense splitting bot with balance and settlement calculation."""

__version__ = "0.1.0"

"""Automated clock-in/clock-out for the MyProtime time-tracking site."""

__version__ = "1.0.0"

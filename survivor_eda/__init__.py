"""Survivor pool exploratory data preparation."""

__version__ = "0.1.0"

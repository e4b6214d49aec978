"""Tickoff - a terminal to-do list with recurring tasks."""

__version__ = "0.1.0"

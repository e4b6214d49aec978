"""Exception types raised by the Tickoff core."""


class TickoffError(Exception):
    """Base class for all Tickoff errors."""


class ValidationError(TickoffError, ValueError):
    """Bad user input: blank text, unknown repeat or sort criterion, bad date."""


class TaskIndexError(TickoffError, IndexError):
    """A position outside the current view, or an id no longer in the store."""


class InvalidPositionError(ValidationError, TaskIndexError):
    """A position that is not a number at all.

    Catchable both as a ValidationError and as a TaskIndexError.
    """


class PersistenceError(TickoffError):
    """The task file could not be read, decoded or written."""

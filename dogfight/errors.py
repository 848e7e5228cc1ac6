"""Exceptions raised by the dogfight core."""


class DogfightError(Exception):
    """Base class for dogfight errors."""


class OutcomeAlreadyResolved(DogfightError):
    """A session's win/timeout result was already written to the record."""

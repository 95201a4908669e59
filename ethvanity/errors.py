# -*- coding: utf-8 -*-


class FatalSearchError(Exception):
    """Base class for conditions that must abort the whole search."""


class EntropyFailure(FatalSearchError):
    """The random source could not produce seed bytes."""


class DerivationFailure(FatalSearchError):
    """A seed could not be turned into a valid key or address."""


class LogWriteFailure(FatalSearchError):
    """The result log could not be opened or appended."""


class QueueClosedViolation(FatalSearchError):
    """A match was put on the result channel after it was closed."""

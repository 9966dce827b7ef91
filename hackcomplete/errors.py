class HackCompleteError(Exception):
    """Base class for errors raised by hackcomplete."""


class InvariantViolation(HackCompleteError):
    """
    The typechecker environment handed to the completion engine is
    inconsistent (e.g. a class constructor that is not a function).

    This is never recoverable and must reach the host pipeline.
    """

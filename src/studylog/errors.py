"""Exception types raised by the study-day engine."""


class StudyLogError(Exception):
    """Base class for engine errors."""


class InvalidInput(StudyLogError, ValueError):
    """A caller supplied a value the engine refuses to interpret."""


class NotFound(StudyLogError, LookupError):
    """A referenced record does not exist."""

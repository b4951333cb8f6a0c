"""
errors.py
=========
Exception hierarchy for the clinic record & scheduling core.

Every error carries a short ``reason`` string that the console layer can
print as-is before returning to the menu loop.
"""


class ClinicError(Exception):
    """Base class for every failure raised by the clinic core."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ValidationError(ClinicError):
    """A field is malformed or out of range (e.g. negative age, bad blood pressure)."""

    def __init__(self, reason: str, field=None):
        super().__init__(reason)
        self.field = field


class InvalidChoice(ValidationError):
    """A value is not a member of one of the fixed option lists."""


class NotFound(ClinicError):
    """No matching patient or record."""


class NoMatch(NotFound):
    """No diagnosis rule matches the given symptoms."""


class Conflict(ClinicError):
    """The requested appointment slot is already booked."""


class PersistenceError(ClinicError):
    """Reading or writing a record file failed."""

    def __init__(self, reason: str, path=None):
        super().__init__(reason)
        self.path = path


class NotAuthorized(ClinicError):
    """Staff login failed."""

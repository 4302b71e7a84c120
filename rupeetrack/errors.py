"""Exception types raised by rupeetrack.

The aggregation functions raise none of these; they are raised at the
ingestion boundary, by the store and by authentication, and are caught
by the commands.
"""


class RupeeTrackError(Exception):
    """Base class for rupeetrack errors."""


class ValidationError(RupeeTrackError, ValueError):
    """User input could not be turned into well-formed transaction fields."""


class PersistenceError(RupeeTrackError):
    """The store rejected an operation (constraint, connectivity, or ownership)."""


class AuthenticationError(RupeeTrackError):
    """Sign-up or sign-in failed, or no user is signed in."""

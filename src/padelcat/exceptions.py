"""Custom exception hierarchy for padelcat.

Exception tree:
    PadelcatError
    +-- ValidationError       (bad argument or record, raised before any I/O)
    +-- DuplicateEmailError   (registration with an email already on file)
    +-- NotFoundError         (expected lookup returned nothing)
    |   +-- PlayerNotFoundError
    |   +-- MatchNotFoundError
    +-- AuthenticationError   (credential mismatch on login)
    +-- IncorrectLinkError    (score sync found 0 or 2+ roster entries)
    +-- TransportError        (remote fetch failed)
    +-- ParseError            (markup unusable or structural assumption broken)

None of these are retried anywhere in the package. They propagate to the
caller, which decides how to report them.
"""

from typing import Optional


class PadelcatError(Exception):
    """Base exception for all padelcat errors."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ValidationError(PadelcatError):
    """A required argument is missing, of the wrong type, or empty."""

    pass


class DuplicateEmailError(PadelcatError):
    """A player with the given email is already registered."""

    pass


class NotFoundError(PadelcatError):
    """A lookup that was expected to succeed returned nothing."""

    pass


class PlayerNotFoundError(NotFoundError):
    pass


class MatchNotFoundError(NotFoundError):
    pass


class AuthenticationError(PadelcatError):
    """Wrong credentials."""

    pass


class IncorrectLinkError(PadelcatError):
    """Score sync did not find exactly one roster entry for a link."""

    pass


class TransportError(PadelcatError):
    """Network failure, timeout, or non-success status from the remote site."""

    pass


class ParseError(PadelcatError):
    """Fetched document could not be interpreted.

    Raised when the markup cannot be parsed at all, or when a positional
    convention (such as the match id window in a match href) is violated.
    """

    pass

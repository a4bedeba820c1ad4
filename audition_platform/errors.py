"""Exceptions raised by the matching core.

Every error is terminal for the request that triggered it. The web layer maps
``status_code`` and ``code`` onto its HTTP response.
"""


class MatchError(Exception):
    """Base exception for matching-core failures."""

    status_code = 400
    code = "match_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(MatchError):
    """No identity was resolved for the caller."""

    status_code = 401
    code = "not_authenticated"


class NotAuthorized(MatchError):
    """The caller lacks rights for the requested group."""

    status_code = 403
    code = "not_authorized"


class InvalidReference(MatchError):
    """A referenced comper or group does not exist."""

    status_code = 404
    code = "invalid_reference"


class AlreadyDecided(MatchError):
    """The status slot for this group has already been decided."""

    status_code = 409
    code = "already_decided"


class DuplicateSubmission(MatchError):
    """Preferences were already submitted for this identity."""

    status_code = 409
    code = "duplicate_submission"


class EmptyRanking(MatchError):
    """A preference submission ranked no groups."""

    status_code = 400
    code = "empty_ranking"


class InvalidRanking(MatchError):
    """A ranking repeats a group or overlaps the unranked set."""

    status_code = 400
    code = "invalid_ranking"


class DelayNotConfigured(MatchError):
    """No announcement delay configuration has been stored."""

    status_code = 503
    code = "delay_not_configured"


__all__ = [
    "MatchError",
    "NotAuthenticated",
    "NotAuthorized",
    "InvalidReference",
    "AlreadyDecided",
    "DuplicateSubmission",
    "EmptyRanking",
    "InvalidRanking",
    "DelayNotConfigured",
]

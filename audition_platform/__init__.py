"""Platform layer for the one-round audition matching process."""

__version__ = "1.0.0"

from .errors import (
    AlreadyDecided,
    DelayNotConfigured,
    DuplicateSubmission,
    EmptyRanking,
    InvalidRanking,
    InvalidReference,
    MatchError,
    NotAuthenticated,
    NotAuthorized,
)
from .match_state_machine import (
    ACCEPTED,
    REJECTED,
    UNDECIDED,
    Resolution,
    announcement_state,
    apply_decision,
    evaluate,
    initial_statuses,
    needs_announcement,
)
from .models import Comper, DelayConfig, GroupAffiliation, UpdateEntry

__all__ = [
    "__version__",
    "MatchError",
    "NotAuthenticated",
    "NotAuthorized",
    "InvalidReference",
    "AlreadyDecided",
    "DuplicateSubmission",
    "EmptyRanking",
    "InvalidRanking",
    "DelayNotConfigured",
    "UNDECIDED",
    "REJECTED",
    "ACCEPTED",
    "Resolution",
    "evaluate",
    "apply_decision",
    "initial_statuses",
    "announcement_state",
    "needs_announcement",
    "Comper",
    "UpdateEntry",
    "GroupAffiliation",
    "DelayConfig",
]

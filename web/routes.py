"""
REST API routes for the audition-match Web UI.

The upstream auth layer resolves the caller and forwards their identity in
the ``X-User-Email`` header.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, Field

from audition_platform.errors import MatchError, NotAuthenticated
from audition_platform.runtime.config import (
    IDENTITY_HEADER,
    SITE_CONFIG,
    get_announce_policy,
    get_db_path,
    get_groups,
)
from audition_platform.scheduler import SchedulerPort
from audition_platform.services import (
    add_affiliation,
    clear_decisions,
    format_update,
    get_affiliation,
    get_default_scheduler,
    get_delay_config,
    get_submission,
    list_compers_for_group,
    list_update_feed,
    record_group_decision,
    require_admin,
    require_affiliation,
    set_delay_config,
    submit_preferences,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Request models ---

class SubmissionRequest(BaseModel):
    preferred_name: str = Field(min_length=1)
    rank: list[str]
    unranked: list[str] = Field(default_factory=list)


class DecisionRequest(BaseModel):
    status: bool


class AffiliationRequest(BaseModel):
    email: str = Field(min_length=1)
    group: str
    is_admin: bool = False


class DelayRequest(BaseModel):
    baseline: float = Field(ge=0, allow_inf_nan=False)
    range: float = Field(ge=0, allow_inf_nan=False)


# --- Dependencies ---

def db_path_dependency() -> Path:
    return get_db_path()


def scheduler_dependency() -> SchedulerPort:
    return get_default_scheduler()


def current_identity(
    x_user_email: Optional[str] = Header(default=None, alias=IDENTITY_HEADER),
) -> str:
    """Return the caller's identity, or raise 401 when none was resolved."""
    if not x_user_email or not x_user_email.strip():
        raise _http_error(NotAuthenticated("Called while not logged in"))
    return x_user_email.strip()


# --- Helpers ---

def _http_error(e: MatchError) -> HTTPException:
    """Translate a core error into an HTTP error response."""
    return HTTPException(
        status_code=e.status_code,
        detail={"code": e.code, "message": e.message},
    )


# --- Routes ---

@router.get("/config")
def get_config():
    """Return site copy and the participating groups."""
    return {
        **SITE_CONFIG,
        "groups": list(get_groups()),
        "announce_policy": get_announce_policy(),
    }


@router.get("/me")
def get_me(
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Return the caller's group affiliation, or null for auditionees."""
    affiliation = get_affiliation(db_path, email)
    return {
        "email": email,
        "affiliation": affiliation.to_dict() if affiliation else None,
    }


@router.get("/submission")
def get_submission_route(
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Return the caller's submitted preferences, if any."""
    submission = get_submission(db_path, email)
    return {"exists": submission is not None, "submission": submission}


@router.post("/submission", status_code=201)
def submit_preferences_route(
    req: SubmissionRequest,
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Submit the caller's ranked group preferences (once)."""
    try:
        comper = submit_preferences(
            db_path, email, req.preferred_name, req.rank, req.unranked
        )
    except MatchError as e:
        raise _http_error(e) from e
    return comper.to_dict()


@router.get("/compers")
def list_compers_route(
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """List the compers relevant to the caller's group."""
    try:
        affiliation = require_affiliation(db_path, email)
    except MatchError as e:
        raise _http_error(e) from e
    return {"group": affiliation.group, **list_compers_for_group(db_path, affiliation.group)}


@router.post("/compers/{comper_id}/decision")
def decide_comper_route(
    comper_id: int,
    req: DecisionRequest,
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
    scheduler: SchedulerPort = Depends(scheduler_dependency),
):
    """Record the caller's group's accept/reject decision on a comper."""
    try:
        affiliation = require_affiliation(db_path, email)
        resolution = record_group_decision(
            db_path, comper_id, affiliation.group, req.status, scheduler=scheduler
        )
    except MatchError as e:
        logger.info("Decision by %s on comper #%d refused: %s", email, comper_id, e.code)
        raise _http_error(e) from e
    return {
        "comper_id": comper_id,
        "group": affiliation.group,
        "decision": req.status,
        "resolution": resolution.state,
    }


@router.get("/updates")
def list_updates_route(
    group: Optional[str] = Query(None, description="Only entries for compers who ranked this group"),
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Return the update feed, newest first."""
    try:
        require_affiliation(db_path, email)
    except MatchError as e:
        raise _http_error(e) from e
    entries = list_update_feed(db_path, group)
    return {
        "updates": [
            {**entry.to_dict(), "message": format_update(entry)}
            for entry in entries
        ]
    }


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------

def _ensure_admin(db_path: Path, email: str) -> None:
    try:
        require_admin(db_path, email)
    except MatchError as e:
        raise _http_error(e) from e


@router.post("/admin/affiliations", status_code=201)
def add_affiliation_route(
    req: AffiliationRequest,
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Affiliate a representative with a group."""
    _ensure_admin(db_path, email)
    try:
        affiliation = add_affiliation(db_path, req.email, req.group, req.is_admin)
    except MatchError as e:
        raise _http_error(e) from e
    return affiliation.to_dict()


@router.get("/admin/delay")
def get_delay_route(
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Return the announcement delay window."""
    _ensure_admin(db_path, email)
    config = get_delay_config(db_path)
    return {"configured": config is not None, "delay": config.to_dict() if config else None}


@router.put("/admin/delay")
def set_delay_route(
    req: DelayRequest,
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Create or replace the announcement delay window."""
    _ensure_admin(db_path, email)
    config = set_delay_config(db_path, req.baseline, req.range)
    return {"configured": True, "delay": config.to_dict()}


@router.post("/admin/reset")
def reset_route(
    email: str = Depends(current_identity),
    db_path: Path = Depends(db_path_dependency),
):
    """Clear every decision and match, and purge the update feed."""
    _ensure_admin(db_path, email)
    logger.warning("Bulk reset requested by %s", email)
    return clear_decisions(db_path)

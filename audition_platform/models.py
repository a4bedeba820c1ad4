"""
Data structures for the audition-match system.
"""

from dataclasses import dataclass, field
from typing import Optional

from audition_platform.match_state_machine import (
    Resolution,
    announcement_state,
    evaluate,
)


@dataclass
class Comper:
    """An auditionee and their ranked preferences."""
    email: str
    preferred_name: str
    ranked_groups: list[str]
    unranked_groups: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)  # aligned with ranked_groups
    matched: bool = False
    matched_group: Optional[str] = None  # group name or "None", write-once
    match_scheduled: bool = False
    id: Optional[int] = None
    created_at: Optional[str] = None

    def resolution(self) -> Resolution:
        return evaluate(self.statuses)

    @property
    def announcement(self) -> str:
        return announcement_state(self.match_scheduled, self.matched)

    def decision_for(self, group: str) -> Optional[str]:
        """Return the slot state for ``group``, or None if it was not ranked."""
        try:
            return self.statuses[self.ranked_groups.index(group)]
        except ValueError:
            return None

    def to_dict(self, include_state: bool = True) -> dict:
        """Convert to a dict. If include_state=False, omits decision/match state."""
        result = {
            "id": self.id,
            "email": self.email,
            "preferred_name": self.preferred_name,
            "ranked_groups": list(self.ranked_groups),
            "unranked_groups": list(self.unranked_groups),
            "created_at": self.created_at,
        }
        if include_state:
            result["statuses"] = list(self.statuses)
            result["matched"] = self.matched
            result["matched_group"] = self.matched_group
            result["match_scheduled"] = self.match_scheduled
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Comper":
        return cls(
            id=data.get("id"),
            email=data["email"],
            preferred_name=data.get("preferred_name", ""),
            ranked_groups=list(data.get("ranked_groups", [])),
            unranked_groups=list(data.get("unranked_groups", [])),
            statuses=list(data.get("statuses", [])),
            matched=bool(data.get("matched", False)),
            matched_group=data.get("matched_group"),
            match_scheduled=bool(data.get("match_scheduled", False)),
            created_at=data.get("created_at"),
        )


@dataclass
class UpdateEntry:
    """An immutable feed entry recording one comper's resolution."""
    name: str
    email: str
    group: str
    relevant_groups: list[str] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "group": self.group,
            "relevant_groups": list(self.relevant_groups),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UpdateEntry":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            email=data.get("email", ""),
            group=data.get("group", ""),
            relevant_groups=list(data.get("relevant_groups", [])),
            created_at=data.get("created_at"),
        )


@dataclass
class GroupAffiliation:
    """Links a representative's identity to the group they decide for."""
    email: str
    group: str
    is_admin: bool = False

    def to_dict(self) -> dict:
        return {"email": self.email, "group": self.group, "is_admin": self.is_admin}


@dataclass
class DelayConfig:
    """Announcement delay window, in milliseconds."""
    baseline: float
    range: float

    def to_dict(self) -> dict:
        return {"baseline": self.baseline, "range": self.range}

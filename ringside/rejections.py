"""
ringside.rejections
===================

Structured, expected failures of a transition.

A :class:`Rejection` is a value, not an exception: guards return it inside
an :class:`ringside.changes.Outcome`.  It names the attempted
:class:`Action`, a machine-readable :class:`Reason` code and the entity it
concerns, and carries enough ``context`` (offending member, title names,
member minimum, ...) to render a message without re-reading the roster.

Callers who would rather use exceptions can call ``Outcome.unwrap()``,
which raises :class:`TransitionRejected`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Action(Enum):
    """Every transition the engine can decide on."""
    EMPLOY = "employ"
    RELEASE = "release"
    SUSPEND = "suspend"
    REINSTATE = "reinstate"
    INJURE = "injure"
    CLEAR_INJURY = "clear_injury"
    RETIRE = "retire"
    UNRETIRE = "unretire"
    ACTIVATE = "activate"
    DEBUT = "debut"
    DEACTIVATE = "deactivate"
    DISBAND = "disband"
    DELETE = "delete"
    RESTORE = "restore"
    UPDATE_STABLE = "update_stable"
    UPDATE_EMPLOYMENT = "update_employment"
    SPLIT = "split"
    ADD_MEMBERS = "add_members"
    REMOVE_MEMBERS = "remove_members"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value) -> "Action":
        """Accept an Action, its value (``"employ"``) or name (``"EMPLOY"``)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        text = _ALIASES.get(text, text)
        return cls(text)

    @property
    def family(self) -> str:
        return _FAMILIES[self]

    @property
    def verb(self) -> str:
        """What the entity "cannot ..." when this action is rejected."""
        return _VERBS[self]


_ALIASES = {"heal": "clear_injury", "clear_from_injury": "clear_injury"}

_FAMILIES = {
    Action.EMPLOY: "CannotBeEmployed",
    Action.RELEASE: "CannotBeReleased",
    Action.SUSPEND: "CannotBeSuspended",
    Action.REINSTATE: "CannotBeReinstated",
    Action.INJURE: "CannotBeInjured",
    Action.CLEAR_INJURY: "CannotBeClearedFromInjury",
    Action.RETIRE: "CannotBeRetired",
    Action.UNRETIRE: "CannotBeUnretired",
    Action.ACTIVATE: "CannotBeActivated",
    Action.DEBUT: "CannotBeDebuted",
    Action.DEACTIVATE: "CannotBeDeactivated",
    Action.DISBAND: "CannotBeDisbanded",
    Action.DELETE: "CannotBeDeleted",
    Action.RESTORE: "CannotBeRestored",
    Action.UPDATE_STABLE: "CannotUpdateStable",
    Action.UPDATE_EMPLOYMENT: "CannotUpdateEmployment",
    Action.SPLIT: "CannotSplitStable",
    Action.ADD_MEMBERS: "MembershipConflict",
    Action.REMOVE_MEMBERS: "CannotRemoveMembers",
}

_VERBS = {
    Action.EMPLOY: "be employed",
    Action.RELEASE: "be released",
    Action.SUSPEND: "be suspended",
    Action.REINSTATE: "be reinstated",
    Action.INJURE: "be injured",
    Action.CLEAR_INJURY: "be cleared from injury",
    Action.RETIRE: "be retired",
    Action.UNRETIRE: "be unretired",
    Action.ACTIVATE: "be activated",
    Action.DEBUT: "be debuted",
    Action.DEACTIVATE: "be deactivated",
    Action.DISBAND: "be disbanded",
    Action.DELETE: "be deleted",
    Action.RESTORE: "be restored",
    Action.UPDATE_STABLE: "have its debut date changed",
    Action.UPDATE_EMPLOYMENT: "have its employment date changed",
    Action.SPLIT: "be split",
    Action.ADD_MEMBERS: "take on these members",
    Action.REMOVE_MEMBERS: "lose these members",
}


class Reason:
    """
    Known rejection codes.

    Convention: snake_case strings, shared across actions; the
    :class:`Action` on the rejection tells them apart.
    """

    ENTITY_DELETED = "entity_deleted"

    # ── Employment ────────────────────────────────────────────
    EMPLOYED = "employed"
    UNEMPLOYED = "unemployed"
    RELEASED = "released"
    FUTURE_EMPLOYMENT = "future_employment"
    CURRENTLY_EMPLOYED = "currently_employed"
    ACTIVE_CHAMPION = "active_champion"
    NOTICE_PERIOD = "notice_period_unresolved"

    # ── Suspension / injury / retirement ──────────────────────
    SUSPENDED = "suspended"
    INJURED = "injured"
    RETIRED = "retired"
    NOT_INJURED = "not_injured"
    NOT_RETIRED = "not_retired"
    BOOKABLE = "bookable"
    AVAILABLE = "available"
    DISCIPLINARY_REVIEW = "disciplinary_review_pending"
    MEDICAL_CLEARANCE_MISSING = "medical_clearance_missing"
    ONGOING_TREATMENT = "ongoing_treatment"
    PERMANENTLY_RETIRED = "permanently_retired"
    MEDICAL_RESTRICTION = "medical_restriction"
    CONTRACTUAL_LIMITATION = "contractual_limitation"

    # ── Activity ──────────────────────────────────────────────
    ACTIVATED = "activated"
    UNACTIVATED = "unactivated"
    FUTURE_ACTIVATION = "future_activation"
    DEACTIVATED = "deactivated"
    DISBANDED = "disbanded"
    ALREADY_DEBUTED = "already_debuted"
    CURRENTLY_ACTIVE = "currently_active"
    INSUFFICIENT_MEMBERS = "insufficient_members"

    # ── Members (context names the member) ────────────────────
    NO_ACTIVE_WRESTLERS = "no_active_wrestlers"
    WRESTLER_SUSPENDED = "wrestler_suspended"
    WRESTLER_INJURED = "wrestler_injured"
    WRESTLER_NOT_ELIGIBLE = "wrestler_not_eligible"
    MEMBER_NOT_ELIGIBLE = "member_not_eligible"
    MEMBER_IS_CHAMPION = "member_is_champion"
    MEMBER_NOT_EMPLOYED = "member_not_employed"
    NOT_A_MEMBER = "not_a_member"
    ALREADY_MEMBER = "already_member"
    IN_ANOTHER_STABLE = "in_another_stable"
    MEMBER_RETIRED = "member_retired"
    MEMBER_DELETED = "member_deleted"

    # ── Naming / soft delete ──────────────────────────────────
    NOT_DELETED = "not_deleted"
    REPLACEMENT_EXISTS = "replacement_exists"
    BLANK_NAME = "blank_name"
    NAME_TAKEN = "name_taken"


# What the entity "is" when a reason applies; formatted with the context.
_PHRASES = {
    Reason.ENTITY_DELETED: "has been deleted",
    Reason.EMPLOYED: "is already employed",
    Reason.UNEMPLOYED: "is unemployed",
    Reason.RELEASED: "is released",
    Reason.FUTURE_EMPLOYMENT: "has a future employment",
    Reason.CURRENTLY_EMPLOYED: "is currently employed",
    Reason.ACTIVE_CHAMPION: "is the current {titles} champion",
    Reason.NOTICE_PERIOD: "has not served the {notice_days} day release notice",
    Reason.SUSPENDED: "is suspended",
    Reason.INJURED: "is injured",
    Reason.RETIRED: "is retired",
    Reason.NOT_INJURED: "is not injured",
    Reason.NOT_RETIRED: "is not retired",
    Reason.BOOKABLE: "is bookable",
    Reason.AVAILABLE: "is available",
    Reason.DISCIPLINARY_REVIEW: "has a disciplinary review pending",
    Reason.MEDICAL_CLEARANCE_MISSING: "has no medical clearance on file",
    Reason.ONGOING_TREATMENT: "is still in treatment",
    Reason.PERMANENTLY_RETIRED: "is permanently retired",
    Reason.MEDICAL_RESTRICTION: "is under a medical restriction ({restriction})",
    Reason.CONTRACTUAL_LIMITATION: "is bound by a contractual limitation ({restriction})",
    Reason.ACTIVATED: "is already active",
    Reason.UNACTIVATED: "has never been activated",
    Reason.FUTURE_ACTIVATION: "has a future activation",
    Reason.DEACTIVATED: "is already inactive",
    Reason.DISBANDED: "is already disbanded",
    Reason.ALREADY_DEBUTED: "has already debuted",
    Reason.CURRENTLY_ACTIVE: "is currently active",
    Reason.INSUFFICIENT_MEMBERS: "has {current} of the {minimum} members required",
    Reason.NO_ACTIVE_WRESTLERS: "has no current wrestlers",
    Reason.WRESTLER_SUSPENDED: "has a suspended wrestler",
    Reason.WRESTLER_INJURED: "has an injured wrestler",
    Reason.WRESTLER_NOT_ELIGIBLE: "has a wrestler who cannot follow",
    Reason.NOT_DELETED: "is not deleted",
    Reason.REPLACEMENT_EXISTS: "has been replaced by another {type_label} named '{replacement}'",
    Reason.BLANK_NAME: "was given a blank name for the new stable",
    Reason.NAME_TAKEN: "cannot take the name '{name}', which is already in use",
}

# Member-level reasons, rendered as "... because <member> <phrase>".
_MEMBER_PHRASES = {
    Reason.WRESTLER_SUSPENDED: "is suspended",
    Reason.WRESTLER_INJURED: "is injured",
    Reason.WRESTLER_NOT_ELIGIBLE: None,
    Reason.MEMBER_NOT_ELIGIBLE: None,
    Reason.MEMBER_IS_CHAMPION: "is the current {titles} champion",
    Reason.MEMBER_NOT_EMPLOYED: "is not employed",
    Reason.NOT_A_MEMBER: "is not a current member",
    Reason.ALREADY_MEMBER: "is already a member",
    Reason.IN_ANOTHER_STABLE: "is already in another stable",
    Reason.MEMBER_RETIRED: "is retired",
    Reason.MEMBER_DELETED: "has been deleted",
}


class _Blank(dict):
    def __missing__(self, key):
        return "?"


def _label(entity_type: Optional[str]) -> str:
    return entity_type.replace("_", " ") if entity_type else "entity"


@dataclass(frozen=True)
class Rejection:
    """
    Why a transition was refused.

    Parameters
    ----------
    action : Action
        The transition that was attempted.
    reason : str
        A :class:`Reason` code.
    entity_type : str | None
        Entity type value (``"tag_team"``) of the subject, when known.
    entity_name : str | None
        Display name of the subject, when known.
    context : Mapping[str, Any]
        Action-specific detail: ``member``, ``member_type``,
        ``member_reason``, ``titles``, ``minimum``, ``current``,
        ``notice_days``, ``restriction``, ``replacement``, ``name``.
    """
    action: Action
    reason: str
    entity_type: Optional[str] = None
    entity_name: Optional[str] = None
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.reason:
            raise ValueError("reason must be a non-empty string")

    @classmethod
    def of(cls, action: Action, reason: str, entity=None, **context) -> "Rejection":
        """Build a rejection about *entity* (any roster snapshot)."""
        if entity is None:
            return cls(action, reason, context=context)
        return cls(action, reason, entity.member_type.value, entity.name, context)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def family(self) -> str:
        return self.action.family

    @property
    def member(self) -> Optional[str]:
        return self.context.get("member")

    @property
    def message(self) -> str:
        values = _Blank(self.context)
        values["type_label"] = _label(self.entity_type)
        if "titles" in self.context:
            values["titles"] = ", ".join(self.context["titles"])

        if self.reason in _MEMBER_PHRASES:
            phrase = _MEMBER_PHRASES[self.reason]
            if phrase is None:
                phrase = _PHRASES.get(self.context.get("member_reason"), "is not eligible")
            subject = _label(self.entity_type).capitalize()
            if self.entity_name:
                subject = f"{subject} '{self.entity_name}'"
            member = f"{_label(self.context.get('member_type'))} '{self.context.get('member', '?')}'"
            return f"{subject} cannot {self.action.verb} because {member} {phrase.format_map(values)}."

        phrase = _PHRASES.get(self.reason, self.reason.replace("_", " "))
        subject = f"This {_label(self.entity_type)}"
        if self.entity_name:
            subject = f"{subject} '{self.entity_name}'"
        return f"{subject} {phrase.format_map(values)} and cannot {self.action.verb}."

    def to_dict(self) -> Dict[str, Any]:
        """Serialise for a caller-facing payload."""
        return {
            "action": self.action.value,
            "family": self.family,
            "reason": self.reason,
            "entity_type": self.entity_type,
            "entity_name": self.entity_name,
            "context": dict(self.context),
            "message": self.message,
        }


class TransitionRejected(Exception):
    """Raised by ``Outcome.unwrap()`` for callers that prefer exceptions."""

    def __init__(self, rejection: Rejection):
        super().__init__(rejection.message)
        self.rejection = rejection

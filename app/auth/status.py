"""
Customer account status: the resolver and the transition table.

The stored ``status`` column can go stale with respect to the clock (a
suspension runs out, a customer stops logging in). ``resolve_status`` derives
the effective status from the stored fields plus ``now`` without touching the
record; ``apply_transition`` is the only code that writes the status fields.
"""
import datetime as dt
import enum
from dataclasses import dataclass
from typing import Optional

SYSTEM_ACTOR = "system"
INACTIVITY_WINDOW = dt.timedelta(days=60)

DEFAULT_BLOCK_REASON = "Account blocked by admin"
DEFAULT_SUSPENSION_REASON = "Account temporarily suspended"
SUSPENSION_ENDED_REASON = "Suspension period ended"
INACTIVITY_REASON = "No activity for 60+ days"
LOCKOUT_REASON = "Too many failed login attempts"

INACTIVE_LOGIN_MESSAGE = "Welcome back! We missed you"
INACTIVE_MESSAGE = "Your account is inactive"


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"


class Transition(str, enum.Enum):
    # admin-triggered
    BLOCK = "block"
    UNBLOCK = "unblock"
    SUSPEND = "suspend"
    ACTIVATE = "activate"
    # automatic
    SUSPENSION_EXPIRED = "suspension_expired"
    INACTIVITY = "inactivity"
    REACTIVATED = "reactivated"
    LOCKOUT = "lockout"


_ANY = frozenset(AccountStatus)

# transition -> (allowed stored source states, target state)
TRANSITIONS = {
    Transition.BLOCK: (_ANY, AccountStatus.BLOCKED),
    Transition.UNBLOCK: (_ANY, AccountStatus.ACTIVE),
    Transition.SUSPEND: (_ANY, AccountStatus.SUSPENDED),
    Transition.ACTIVATE: (_ANY, AccountStatus.ACTIVE),
    Transition.SUSPENSION_EXPIRED: (frozenset({AccountStatus.SUSPENDED}), AccountStatus.ACTIVE),
    Transition.INACTIVITY: (frozenset({AccountStatus.ACTIVE}), AccountStatus.INACTIVE),
    Transition.REACTIVATED: (frozenset({AccountStatus.INACTIVE}), AccountStatus.ACTIVE),
    Transition.LOCKOUT: (frozenset({AccountStatus.ACTIVE, AccountStatus.INACTIVE}), AccountStatus.SUSPENDED),
}


class InvalidTransition(Exception):
    pass


@dataclass(frozen=True)
class ResolvedStatus:
    status: AccountStatus
    reason: Optional[str]
    changed_at: Optional[dt.datetime]
    changed_by: Optional[str]
    suspension_until: Optional[dt.datetime] = None
    # set when a stored suspension has run out at resolution time
    suspension_ended: bool = False

    def advisory(self, last_login_at=None, at_login=False) -> Optional[dict]:
        """Non-blocking notice for callers that let SUSPENDED/INACTIVE through.

        The INACTIVE greeting is only used in the login response.
        """
        if self.status is AccountStatus.SUSPENDED:
            return {
                "message": "Your account is suspended",
                "reason": self.reason,
                "suspension_until": isoformat(self.suspension_until),
            }
        if self.status is AccountStatus.INACTIVE:
            return {
                "message": INACTIVE_LOGIN_MESSAGE if at_login else INACTIVE_MESSAGE,
                "last_login": isoformat(last_login_at or self.changed_at),
            }
        return None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "reason": self.reason,
            "changed_at": isoformat(self.changed_at),
            "changed_by": self.changed_by,
            "suspension_until": isoformat(self.suspension_until),
        }


def isoformat(value):
    return value.isoformat() if isinstance(value, dt.datetime) else None


def _as_utc(value) -> Optional[dt.datetime]:
    """Naive UTC datetime, or None for anything that is not a datetime."""
    if not isinstance(value, dt.datetime):
        return None
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return value


def _stored_status(account) -> Optional[AccountStatus]:
    try:
        return AccountStatus(account.status)
    except ValueError:
        return None


def resolve_status(account, now: dt.datetime) -> ResolvedStatus:
    """Effective status of ``account`` at ``now``.

    First match wins: BLOCKED, then SUSPENDED (or ACTIVE once the suspension
    has run out), then INACTIVE after 60 days without a login, then ACTIVE.
    The account is never modified.
    """
    now = _as_utc(now)
    stored = _stored_status(account)

    if stored is AccountStatus.BLOCKED:
        return ResolvedStatus(
            status=AccountStatus.BLOCKED,
            reason=account.status_reason or DEFAULT_BLOCK_REASON,
            changed_at=account.status_changed_at,
            changed_by=account.status_changed_by,
        )

    if stored is AccountStatus.SUSPENDED:
        until = _as_utc(account.suspension_until)
        if until is not None and now is not None and now > until:
            return ResolvedStatus(
                status=AccountStatus.ACTIVE,
                reason=SUSPENSION_ENDED_REASON,
                changed_at=now,
                changed_by=SYSTEM_ACTOR,
                suspension_ended=True,
            )
        return ResolvedStatus(
            status=AccountStatus.SUSPENDED,
            reason=account.status_reason or DEFAULT_SUSPENSION_REASON,
            changed_at=account.status_changed_at,
            changed_by=account.status_changed_by,
            suspension_until=account.suspension_until,
        )

    last_login = _as_utc(account.last_login_at)
    if last_login is not None and now is not None and last_login < now - INACTIVITY_WINDOW:
        return ResolvedStatus(
            status=AccountStatus.INACTIVE,
            reason=INACTIVITY_REASON,
            changed_at=account.last_login_at,
            changed_by=SYSTEM_ACTOR,
        )

    return ResolvedStatus(
        status=AccountStatus.ACTIVE,
        reason=account.status_reason,
        changed_at=account.status_changed_at,
        changed_by=account.status_changed_by,
    )


def implied_transition(account, resolved: ResolvedStatus) -> Optional[Transition]:
    """Automatic correction that brings the stored status in line with ``resolved``."""
    stored = _stored_status(account)
    if stored is AccountStatus.SUSPENDED and resolved.suspension_ended:
        return Transition.SUSPENSION_EXPIRED
    if stored is AccountStatus.ACTIVE and resolved.status is AccountStatus.INACTIVE:
        return Transition.INACTIVITY
    if stored is AccountStatus.INACTIVE and resolved.status is AccountStatus.ACTIVE:
        return Transition.REACTIVATED
    return None


def apply_transition(account, transition: Transition, now: dt.datetime, *,
                     actor: str = SYSTEM_ACTOR, reason: Optional[str] = None,
                     suspension_until: Optional[dt.datetime] = None) -> AccountStatus:
    """Write a transition onto the stored status fields of ``account``.

    ``suspension_until`` is kept only when the target state is SUSPENDED.
    """
    sources, target = TRANSITIONS[transition]
    current = _stored_status(account)
    if current is not None and current not in sources:
        raise InvalidTransition(f"{transition.value} not allowed from {current.value}")
    if target is AccountStatus.SUSPENDED and suspension_until is None:
        raise InvalidTransition("suspension requires an end time")

    account.status = target.value
    account.status_reason = reason
    account.status_changed_at = now
    account.status_changed_by = actor
    account.suspension_until = suspension_until if target is AccountStatus.SUSPENDED else None
    return target

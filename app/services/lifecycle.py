"""
Customer lifecycle enforcement.

Every decision here starts from ``resolve_status``; stored fields are only
read through it. The functions mutate the ORM object and flush where a
server-side expression is needed, but never commit: callers own the
transaction (see ``app.utils.db.transactional``).
"""
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, or_, and_

from models import db
from models.customer import CustomerAccount
from app.auth.status import (
    AccountStatus,
    ResolvedStatus,
    Transition,
    INACTIVITY_REASON,
    INACTIVITY_WINDOW,
    LOCKOUT_REASON,
    apply_transition,
    implied_transition,
    isoformat,
    resolve_status,
)
from app.metrics import ACCOUNT_LOCKOUTS, GATE_REJECTIONS, STATUS_TRANSITIONS
from app.services.exceptions import (
    AccountBlockedError,
    AccountSuspendedError,
    AuthenticationError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from app.utils.passwords import verify_password

logger = logging.getLogger(__name__)

MAX_FAILED_LOGINS = 5
LOCKOUT_PERIOD = dt.timedelta(hours=24)
DEFAULT_SUSPENSION_DAYS = 7
MAX_SUSPENSION_DAYS = 3650


@dataclass
class LoginDecision:
    resolved: ResolvedStatus
    error: Optional[ServiceError] = None
    warning: Optional[dict] = None
    info: Optional[dict] = None

    @property
    def allowed(self) -> bool:
        return self.error is None


def _blocked_error(resolved: ResolvedStatus, message=None) -> AccountBlockedError:
    return AccountBlockedError(
        message,
        reason=resolved.reason,
        blocked_at=isoformat(resolved.changed_at),
        blocked_by=resolved.changed_by,
    )


def _record_transition(account, transition: Transition, now, **kwargs):
    apply_transition(account, transition, now, **kwargs)
    STATUS_TRANSITIONS.labels(transition.value).inc()
    logger.info({
        "event": "account_status_transition",
        "customer_id": account.id,
        "transition": transition.value,
        "status": account.status,
        "actor": account.status_changed_by,
    })


# --- Write-back ---

def _write_back(account, resolved: ResolvedStatus, now) -> Optional[Transition]:
    transition = implied_transition(account, resolved)
    if transition is Transition.INACTIVITY:
        _record_transition(account, transition, now, reason=INACTIVITY_REASON)
    elif transition is not None:
        _record_transition(account, transition, now)
    return transition


def reconcile(account, now: dt.datetime) -> ResolvedStatus:
    """Resolve ``account`` and persist the automatic correction it implies.

    Returns the resolution, which stays the source of truth for the caller.
    Applying it twice yields the same stored state.
    """
    resolved = resolve_status(account, now)
    _write_back(account, resolved, now)
    return resolved


def reconcile_all(now: dt.datetime) -> dict:
    """Sweep every customer whose stored status may have drifted. Does NOT commit."""
    cutoff = now - INACTIVITY_WINDOW
    candidates = (
        CustomerAccount.query.filter(
            or_(
                and_(CustomerAccount.status == AccountStatus.SUSPENDED.value,
                     CustomerAccount.suspension_until < now),
                and_(CustomerAccount.status == AccountStatus.ACTIVE.value,
                     CustomerAccount.last_login_at < cutoff),
                CustomerAccount.status == AccountStatus.INACTIVE.value,
            )
        )
        .order_by(CustomerAccount.id)
        .all()
    )
    counts = {}
    for account in candidates:
        transition = _write_back(account, resolve_status(account, now), now)
        if transition is not None:
            counts[transition.value] = counts.get(transition.value, 0) + 1
    return counts


# --- Login gate ---

def _register_failed_login(account, now: dt.datetime) -> int:
    """Count a failed password check; suspend on the fifth consecutive one."""
    # server-side increment so concurrent failures are not lost
    account.login_attempts = func.coalesce(CustomerAccount.login_attempts, 0) + 1
    db.session.flush()
    attempts = account.login_attempts
    if attempts >= MAX_FAILED_LOGINS and account.status != AccountStatus.SUSPENDED.value:
        _record_transition(
            account,
            Transition.LOCKOUT,
            now,
            reason=LOCKOUT_REASON,
            suspension_until=now + LOCKOUT_PERIOD,
        )
        ACCOUNT_LOCKOUTS.inc()
        logger.warning({"event": "account_lockout", "customer_id": account.id, "attempts": attempts})
    return attempts


def check_login(account, password: str, now: dt.datetime) -> LoginDecision:
    """Apply the login rules to ``account`` for a submitted ``password``.

    BLOCKED accounts are refused before the password is looked at. A wrong
    password is counted (and may trigger the lockout) and yields a decision
    carrying an AuthenticationError; the caller must commit before raising it
    so the attempt is recorded. A correct password resets the counter, stamps
    the login and writes back any automatic correction.
    """
    resolved = resolve_status(account, now)
    if resolved.status is AccountStatus.BLOCKED:
        GATE_REJECTIONS.labels("login", resolved.status.value).inc()
        return LoginDecision(resolved=resolved, error=_blocked_error(resolved))

    if not verify_password(password, account.password_hash):
        attempts = _register_failed_login(account, now)
        remaining = max(0, MAX_FAILED_LOGINS - attempts)
        return LoginDecision(
            resolved=resolved,
            error=AuthenticationError(remaining_attempts=remaining),
        )

    account.login_attempts = 0
    account.last_login_at = now
    reconcile(account, now)

    decision = LoginDecision(resolved=resolved)
    if resolved.status is AccountStatus.SUSPENDED:
        decision.warning = resolved.advisory()
    elif resolved.status is AccountStatus.INACTIVE:
        decision.info = resolved.advisory(at_login=True)
    return decision


# --- Request gates ---

def enforce_account_action(account, now: dt.datetime) -> ResolvedStatus:
    """Generic authenticated action: only BLOCKED is refused."""
    resolved = reconcile(account, now)
    if resolved.status is AccountStatus.BLOCKED:
        GATE_REJECTIONS.labels("action", resolved.status.value).inc()
        raise _blocked_error(resolved)
    return resolved


def enforce_order_placement(account, now: dt.datetime) -> ResolvedStatus:
    """Order placement: BLOCKED and SUSPENDED are refused, INACTIVE is fine."""
    resolved = reconcile(account, now)
    if resolved.status is AccountStatus.BLOCKED:
        GATE_REJECTIONS.labels("order", resolved.status.value).inc()
        raise AccountBlockedError(
            "Your account has been blocked. You cannot place orders.",
            reason=resolved.reason,
        )
    if resolved.status is AccountStatus.SUSPENDED:
        GATE_REJECTIONS.labels("order", resolved.status.value).inc()
        raise AccountSuspendedError(
            "Your account is suspended. You cannot place orders.",
            reason=resolved.reason,
            suspension_until=isoformat(resolved.suspension_until),
        )
    return resolved


# --- Admin-initiated transitions ---

def get_customer(customer_id) -> CustomerAccount:
    account = db.session.get(CustomerAccount, customer_id)
    if account is None:
        raise NotFoundError("User not found")
    return account


def _require_reason(reason, message) -> str:
    if not isinstance(reason, str) or not reason.strip():
        raise ValidationError(message)
    return reason.strip()


def _suspension_days(days) -> int:
    if days is None:
        return DEFAULT_SUSPENSION_DAYS
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ValidationError("Suspension days must be a positive integer")
    if days > MAX_SUSPENSION_DAYS:
        raise ValidationError(f"Suspension cannot exceed {MAX_SUSPENSION_DAYS} days")
    return days


def block_customer(customer_id, reason, actor: str, now: dt.datetime) -> CustomerAccount:
    reason = _require_reason(reason, "Please provide a reason for blocking")
    account = get_customer(customer_id)
    _record_transition(account, Transition.BLOCK, now, actor=actor, reason=reason)
    return account


def suspend_customer(customer_id, reason, actor: str, now: dt.datetime, days=None) -> CustomerAccount:
    reason = _require_reason(reason, "Please provide a reason for suspension")
    days = _suspension_days(days)
    account = get_customer(customer_id)
    _record_transition(
        account,
        Transition.SUSPEND,
        now,
        actor=actor,
        reason=reason,
        suspension_until=now + dt.timedelta(days=days),
    )
    return account


def unblock_customer(customer_id, actor: str, now: dt.datetime) -> CustomerAccount:
    account = get_customer(customer_id)
    _record_transition(account, Transition.UNBLOCK, now, actor=actor)
    account.login_attempts = 0
    return account


def activate_customer(customer_id, actor: str, now: dt.datetime) -> CustomerAccount:
    account = get_customer(customer_id)
    _record_transition(account, Transition.ACTIVATE, now, actor=actor)
    account.login_attempts = 0
    return account


def customer_status_report(account, now: dt.datetime) -> dict:
    """Stored and resolved status side by side."""
    resolved = resolve_status(account, now)
    return {
        "id": account.id,
        "name": account.name,
        "email": account.email,
        "stored_status": account.status,
        "resolved_status": resolved.status.value,
        "reason": resolved.reason,
        "changed_at": isoformat(resolved.changed_at),
        "changed_by": resolved.changed_by,
        "suspension_until": isoformat(resolved.suspension_until),
        "last_login_at": isoformat(account.last_login_at),
        "login_attempts": account.login_attempts,
        "created_at": isoformat(account.created_at),
    }

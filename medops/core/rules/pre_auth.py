"""Pre-authorization approval state machine.

A raised pre-auth starts as PENDING. Insurance may temp-approve it, approve
it, or reject it::

    PENDING ──TEMP_APPROVE──> TEMP_APPROVED
    PENDING | TEMP_APPROVED ──APPROVE──> APPROVED
    PENDING | TEMP_APPROVED ──REJECT───> REJECTED

APPROVED and REJECTED are terminal. Every decision requires the case to sit in
PREAUTH_RAISED and, for a new-hospital request, the request to have been
marked raised with the hospital first. Guards are checked in that order so the
error a caller sees is always the most fundamental one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from medops.core.errors import TransitionError
from medops.core.models.domain import CaseStage, PreAuthAction, PreAuthStatus

TERMINAL_STATUSES: FrozenSet[PreAuthStatus] = frozenset({PreAuthStatus.APPROVED, PreAuthStatus.REJECTED})

_ALLOWED_FROM: Dict[PreAuthAction, FrozenSet[PreAuthStatus]] = {
    PreAuthAction.TEMP_APPROVE: frozenset({PreAuthStatus.PENDING}),
    PreAuthAction.APPROVE: frozenset({PreAuthStatus.PENDING, PreAuthStatus.TEMP_APPROVED}),
    PreAuthAction.REJECT: frozenset({PreAuthStatus.PENDING, PreAuthStatus.TEMP_APPROVED}),
}

_TARGET: Dict[PreAuthAction, PreAuthStatus] = {
    PreAuthAction.TEMP_APPROVE: PreAuthStatus.TEMP_APPROVED,
    PreAuthAction.APPROVE: PreAuthStatus.APPROVED,
    PreAuthAction.REJECT: PreAuthStatus.REJECTED,
}


@dataclass(frozen=True)
class PreAuthContext:
    """Facts about the case that gate a pre-auth decision."""

    case_stage: CaseStage
    has_hospital_suggestions: bool
    initiate_form_complete: bool
    is_new_hospital_request: bool = False
    new_hospital_request_raised: bool = False
    rejection_reason: Optional[str] = None


def is_initiate_form_complete(total_bill_amount: Optional[float], copay: Optional[float]) -> bool:
    """The initiate form counts as filled once it has a positive bill amount and a copay value."""
    return total_bill_amount is not None and total_bill_amount > 0 and copay is not None


def _violation(
    status: PreAuthStatus, action: PreAuthAction, context: PreAuthContext, check_reason: bool = True
) -> Optional[str]:
    if status == PreAuthStatus.APPROVED:
        return "pre-auth already approved"
    if status == PreAuthStatus.REJECTED:
        return "pre-auth already rejected"
    if context.case_stage != CaseStage.PREAUTH_RAISED:
        return f"case must be in {CaseStage.PREAUTH_RAISED.value}, currently {CaseStage(context.case_stage).value}"
    if context.is_new_hospital_request and not context.new_hospital_request_raised:
        return "new hospital request must be marked as raised first"
    if status not in _ALLOWED_FROM[action]:
        return f"not allowed from {status.value}"

    if action in (PreAuthAction.TEMP_APPROVE, PreAuthAction.APPROVE) and not context.has_hospital_suggestions:
        return "hospital suggestions are required"
    if action == PreAuthAction.APPROVE and not context.initiate_form_complete:
        return "initiate form must be filled with bill amount and copay"
    if action == PreAuthAction.REJECT and check_reason:
        if not context.rejection_reason or not context.rejection_reason.strip():
            return "rejection reason is required"
    return None


def transition(status: PreAuthStatus, action: PreAuthAction, context: PreAuthContext) -> PreAuthStatus:
    """Apply a decision to a pre-auth status.

    Args:
        status: Current approval status
        action: Decision being taken
        context: Case facts gating the decision

    Returns:
        The new status

    Raises:
        TransitionError: If any guard fails
    """
    status = PreAuthStatus(status)
    action = PreAuthAction(action)
    reason = _violation(status, action, context)
    if reason is not None:
        raise TransitionError(status.value, action.value, reason)
    return _TARGET[action]


def available_actions(status: PreAuthStatus, context: PreAuthContext) -> List[PreAuthAction]:
    """List the decisions whose guards currently pass.

    The rejection reason is supplied with the decision itself, so REJECT is
    offered whenever the status and stage allow it.
    """
    status = PreAuthStatus(status)
    return [action for action in PreAuthAction if _violation(status, action, context, check_reason=False) is None]

"""Case stage guards for the lead workflow.

Each step of the case flow accepts the lead only in specific stages. The
helpers here answer "may this step run now" and "where does the case go next",
leaving persistence and notifications to the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from medops.core.errors import InvalidStateError, ValidationFailedError
from medops.core.models.domain import CaseStage, IPDStatus

KYP_BASIC_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.NEW_LEAD})
SUGGESTION_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.KYP_BASIC_PENDING})
KYP_DETAILED_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.KYP_BASIC_COMPLETE})
RAISE_PREAUTH_STAGES: FrozenSet[CaseStage] = frozenset(
    {CaseStage.KYP_DETAILED_PENDING, CaseStage.KYP_DETAILED_COMPLETE, CaseStage.KYP_COMPLETE}
)
INITIATE_FORM_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.PREAUTH_RAISED, CaseStage.PREAUTH_COMPLETE})
INITIATE_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.PREAUTH_COMPLETE})
IPD_MARK_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.INITIATED, CaseStage.ADMITTED})
DISCHARGE_STAGES: FrozenSet[CaseStage] = frozenset({CaseStage.INITIATED, CaseStage.ADMITTED})
DISCHARGE_SHEET_STAGES: FrozenSet[CaseStage] = frozenset(
    {CaseStage.ADMITTED, CaseStage.IPD_DONE, CaseStage.DISCHARGED}
)


def require_stage(current: str, allowed: Iterable[CaseStage], action: str) -> CaseStage:
    """Raise unless the case sits in one of the allowed stages.

    Args:
        current: The lead's current case stage
        allowed: Stages in which ``action`` may run
        action: Human-readable action name used in the error message

    Returns:
        The current stage as an enum member
    """
    stage = CaseStage(current)
    allowed_set = frozenset(allowed)
    if stage not in allowed_set:
        expected = ", ".join(sorted(s.value for s in allowed_set))
        raise InvalidStateError(f"Cannot {action}. Current stage: {stage.value}. Expected one of: {expected}")
    return stage


@dataclass(frozen=True)
class HospitalChoice:
    """The hospital a BD picked when raising the pre-auth."""

    hospital_name: str
    room_type: Optional[str]
    is_new_hospital_request: bool


def validate_hospital_choice(
    suggested_names: Iterable[str],
    requested_hospital_name: Optional[str],
    requested_room_type: Optional[str],
    is_new_hospital_request: bool,
    new_hospital_name: Optional[str],
) -> HospitalChoice:
    """Check the hospital chosen for a pre-auth against insurance's suggestions."""
    suggestions = [name.strip() for name in suggested_names if name and name.strip()]
    if not suggestions:
        raise ValidationFailedError("Insurance has not suggested any hospitals for this case yet")

    if is_new_hospital_request:
        if not new_hospital_name or not new_hospital_name.strip():
            raise ValidationFailedError("New hospital name is required for a new hospital request")
        return HospitalChoice(
            hospital_name=new_hospital_name.strip(),
            room_type=requested_room_type.strip() if requested_room_type else None,
            is_new_hospital_request=True,
        )

    if not requested_hospital_name or not requested_hospital_name.strip():
        raise ValidationFailedError("Requested hospital is required")
    name = requested_hospital_name.strip()
    if name.lower() not in {s.lower() for s in suggestions}:
        raise ValidationFailedError(f"Hospital '{name}' is not one of the suggested hospitals")
    if not requested_room_type or not requested_room_type.strip():
        raise ValidationFailedError("Room type is required for a suggested hospital")
    return HospitalChoice(hospital_name=name, room_type=requested_room_type.strip(), is_new_hospital_request=False)


def validate_ipd_mark(
    status: IPDStatus,
    reason: Optional[str],
    new_surgery_date: Optional[datetime],
    discharge_date: Optional[datetime],
) -> None:
    """Check that an IPD status update carries the details its status needs."""
    status = IPDStatus(status)
    has_reason = bool(reason and reason.strip())
    if status == IPDStatus.POSTPONED:
        if not has_reason:
            raise ValidationFailedError("Reason is required for postponed status")
        if new_surgery_date is None:
            raise ValidationFailedError("New surgery date is required for postponed status")
    elif status == IPDStatus.CANCELLED and not has_reason:
        raise ValidationFailedError("Reason is required for cancelled status")
    elif status == IPDStatus.DISCHARGED and discharge_date is None:
        raise ValidationFailedError("Discharge date is required for discharged status")


def stage_after_ipd_mark(current: str, status: IPDStatus) -> CaseStage:
    """Case stage after an IPD status update. Only admission and discharge move the case."""
    status = IPDStatus(status)
    if status == IPDStatus.DISCHARGED:
        return CaseStage.DISCHARGED
    if status == IPDStatus.ADMITTED_DONE:
        return CaseStage.ADMITTED
    return CaseStage(current)

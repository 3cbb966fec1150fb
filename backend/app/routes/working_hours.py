from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.services.conflict_detector import check_conflicts
from app.services.hierarchy_resolver import get_entity_or_404
from app.services.reconciliation import update_schedule_with_reconciliation
from app.services.schedule_store import get_schedule
from app.services.suggestion_service import suggest_for_entity, suggest_schedule
from app.services.working_hours_service import save_schedule, validate_schedule
from app.utils import messages
from app.utils.working_hours import BilingualMessage, WorkingHourEntry

router = APIRouter()


class ScheduleValidateRequest(BaseModel):
    entity_type: str
    entity_id: int
    schedule: List[WorkingHourEntry]


class CheckConflictsRequest(BaseModel):
    entity_id: int
    entity_type: str = "user"
    proposed_schedule: List[WorkingHourEntry]


class ScheduleUpdateRequest(BaseModel):
    schedule: List[WorkingHourEntry]


class ScheduleReconcileRequest(BaseModel):
    schedule: List[WorkingHourEntry]
    handle_conflicts: str
    notify_patients: bool = True
    reason: Optional[str] = None


class WorkingHoursResponse(BaseModel):
    entity_type: str
    entity_id: int
    working_hours: List[WorkingHourEntry]


class ScheduleUpdateResponse(WorkingHoursResponse):
    message: BilingualMessage


@router.post("/working-hours/validate")
def validate_working_hours(request: ScheduleValidateRequest, session: Session = Depends(get_session)):
    """Check a week against interval rules and the parent's hours without saving"""
    result = validate_schedule(session, request.entity_type, request.entity_id, request.schedule)
    return result.to_dict()


@router.get("/working-hours/suggest")
def suggest_working_hours(
    role: str,
    parent_entity_type: str,
    parent_entity_id: int,
    session: Session = Depends(get_session),
):
    """Suggest hours for a new doctor (from a clinic) or staff member (from a complex)"""
    return suggest_schedule(session, role, parent_entity_type, parent_entity_id).to_dict()


@router.get("/working-hours/suggest/{entity_type}/{entity_id}")
def suggest_working_hours_for_entity(entity_type: str, entity_id: int, session: Session = Depends(get_session)):
    """Suggest hours for an existing entity from its parent, or standard business hours"""
    return suggest_for_entity(session, entity_type, entity_id).to_dict()


@router.post("/working-hours/check-conflicts")
def check_working_hours_conflicts(request: CheckConflictsRequest, session: Session = Depends(get_session)):
    """List future appointments the proposed hours would orphan (read-only)"""
    get_entity_or_404(session, request.entity_type, request.entity_id)
    result = check_conflicts(
        session,
        request.entity_id,
        request.proposed_schedule,
        entity_type=request.entity_type,
    )
    return result.to_dict()


@router.put("/working-hours/{entity_type}/{entity_id}/with-rescheduling")
def update_working_hours_with_rescheduling(
    entity_type: str,
    entity_id: int,
    request: ScheduleReconcileRequest,
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    """Replace hours and resolve conflicting appointments in one transaction"""
    result = update_schedule_with_reconciliation(
        session,
        entity_type,
        entity_id,
        request.schedule,
        handle_conflicts=request.handle_conflicts,
        notify_patients=request.notify_patients,
        reason=request.reason,
    )
    response = result.to_dict()
    response["message"] = messages.SCHEDULE_UPDATED.model_dump()
    return response


@router.put("/working-hours/{entity_type}/{entity_id}", response_model=ScheduleUpdateResponse)
def update_working_hours(
    entity_type: str,
    entity_id: int,
    request: ScheduleUpdateRequest,
    session: Session = Depends(get_session),
):
    """Replace hours; refused with 409 if any future appointment would be orphaned"""
    saved = save_schedule(session, entity_type, entity_id, request.schedule)
    return ScheduleUpdateResponse(
        entity_type=entity_type,
        entity_id=entity_id,
        working_hours=saved,
        message=messages.SCHEDULE_UPDATED,
    )


@router.get("/working-hours/{entity_type}/{entity_id}", response_model=WorkingHoursResponse)
def get_working_hours(entity_type: str, entity_id: int, session: Session = Depends(get_session)):
    """Get an entity's stored week (empty when never configured)"""
    get_entity_or_404(session, entity_type, entity_id)
    return WorkingHoursResponse(
        entity_type=entity_type,
        entity_id=entity_id,
        working_hours=get_schedule(session, entity_type, entity_id),
    )

# civic_events/api/v1/enrollments.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status

from civic_events.api.deps import get_current_person, get_workflow
from civic_events.db.base import MAX_ROW_ID
from civic_events.models.person import Person
from civic_events.schemas.enrollment import Enrollment, EnrollmentCheck, EnrollmentCreate
from civic_events.services.enrollment import EnrollmentWorkflow

router = APIRouter()

@router.post("/events/{event_id}/enrollments", response_model=Enrollment, status_code=status.HTTP_201_CREATED)
def enroll(
    body: EnrollmentCreate,
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    workflow: EnrollmentWorkflow = Depends(get_workflow),
    me: Person = Depends(get_current_person),
):
    # sem person_id = a própria pessoa logada se inscreve
    person_id = body.person_id if body.person_id is not None else me.id
    return workflow.enroll(event_id, person_id)

@router.get("/events/{event_id}/enrollments", response_model=List[Enrollment])
def list_event_enrollments(
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    workflow: EnrollmentWorkflow = Depends(get_workflow),
    _: Person = Depends(get_current_person),
):
    return workflow.enrollments_for_event(event_id)

@router.get("/events/{event_id}/enrollments/{person_id}", response_model=EnrollmentCheck)
def check_enrollment(
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    person_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    workflow: EnrollmentWorkflow = Depends(get_workflow),
    _: Person = Depends(get_current_person),
):
    return EnrollmentCheck(event_id=event_id, person_id=person_id, enrolled=workflow.is_enrolled(person_id, event_id))

@router.get("/people/me/enrollments", response_model=List[Enrollment])
def my_enrollments(
    workflow: EnrollmentWorkflow = Depends(get_workflow),
    me: Person = Depends(get_current_person),
):
    return workflow.enrollments_for_person(me.id)

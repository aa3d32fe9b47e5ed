# civic_events/schemas/enrollment.py
from datetime import date
from typing import Optional
from pydantic import BaseModel

class EnrollmentCreate(BaseModel):
    person_id: Optional[int] = None

class Enrollment(BaseModel):
    id: int
    event_id: int
    person_id: int
    enrolled_on: date

    model_config = {"from_attributes": True}

class EnrollmentCheck(BaseModel):
    event_id: int
    person_id: int
    enrolled: bool

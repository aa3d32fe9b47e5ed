# civic_events/api/v1/people.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from civic_events.api.deps import get_current_person, get_directory
from civic_events.db.base import MAX_ROW_ID
from civic_events.core.errors import NotFoundError
from civic_events.models.person import MAX_NATIONAL_ID, Person
from civic_events.schemas.person import PersonOut, PersonRegister, PersonRegisterSimple, PersonUpdate
from civic_events.services.directory import PersonDirectory

router = APIRouter()

@router.post("/", response_model=PersonOut, status_code=status.HTTP_201_CREATED)
def register(body: PersonRegister, directory: PersonDirectory = Depends(get_directory)):
    return directory.register(body)

@router.post("/simple", response_model=PersonOut, status_code=status.HTTP_201_CREATED)
def register_simple(
    body: PersonRegisterSimple,
    directory: PersonDirectory = Depends(get_directory),
    _: Person = Depends(get_current_person),
):
    return directory.register_simple(body)

@router.get("/", response_model=List[PersonOut])
def search_people(
    q: Optional[str] = Query(None, description="Busca por nome ou sobrenome"),
    limit: int = Query(50, ge=1, le=200),
    directory: PersonDirectory = Depends(get_directory),
    _: Person = Depends(get_current_person),
):
    return directory.search(q, limit=limit)

@router.get("/me", response_model=PersonOut)
def read_me(me: Person = Depends(get_current_person)):
    return me

@router.put("/me", response_model=PersonOut)
def update_me(
    body: PersonUpdate,
    directory: PersonDirectory = Depends(get_directory),
    me: Person = Depends(get_current_person),
):
    return directory.update_profile(me.id, body)

@router.get("/by-national-id/{national_id}", response_model=PersonOut)
def get_by_national_id(
    national_id: int = Path(..., ge=1, le=MAX_NATIONAL_ID),
    directory: PersonDirectory = Depends(get_directory),
    _: Person = Depends(get_current_person),
):
    person = directory.find_by_national_id(national_id)
    if person is None:
        raise NotFoundError("national_id", national_id)
    return person

@router.get("/{person_id}", response_model=PersonOut)
def get_person(
    person_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    directory: PersonDirectory = Depends(get_directory),
    _: Person = Depends(get_current_person),
):
    return directory.get(person_id)

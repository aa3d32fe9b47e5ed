# civic_events/api/v1/events.py
from typing import List

from fastapi import APIRouter, Body, Depends, Path, status

from civic_events.api.deps import get_current_person, get_event_service
from civic_events.db.base import MAX_ROW_ID
from civic_events.models.person import Person
from civic_events.schemas.event import Event, EventCreate, EventStateUpdate, EventUpdate
from civic_events.services.events import EventService

router = APIRouter()

@router.get("/", response_model=List[Event])
def list_events(service: EventService = Depends(get_event_service)):
    return service.all()

@router.get("/available", response_model=List[Event])
def list_available(service: EventService = Depends(get_event_service)):
    return service.available()

@router.get("/mine", response_model=List[Event])
def list_mine(service: EventService = Depends(get_event_service), me: Person = Depends(get_current_person)):
    return service.by_organizer(me.id)

@router.post("/", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    body: EventCreate,
    service: EventService = Depends(get_event_service),
    me: Person = Depends(get_current_person),
):
    # quem cria vira responsável pelo evento
    return service.create(body, organizer=me)

@router.get("/{event_id}", response_model=Event)
def get_event(event_id: int = Path(..., ge=1, le=MAX_ROW_ID), service: EventService = Depends(get_event_service)):
    return service.get(event_id)

@router.put("/{event_id}", response_model=Event)
def update_event(
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    body: EventUpdate = Body(...),
    service: EventService = Depends(get_event_service),
    me: Person = Depends(get_current_person),
):
    return service.update(event_id, body, editor=me)

@router.put("/{event_id}/state", response_model=Event)
def set_state(
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    body: EventStateUpdate = Body(...),
    service: EventService = Depends(get_event_service),
    me: Person = Depends(get_current_person),
):
    return service.set_state(event_id, body.state, editor=me)

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    service: EventService = Depends(get_event_service),
    me: Person = Depends(get_current_person),
):
    service.delete(event_id, editor=me)

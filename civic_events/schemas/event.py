from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from civic_events.models.event import EventKind, EventState, Modality

class FilmIn(BaseModel):
    title: Optional[str] = None
    position: Optional[int] = None

class Film(BaseModel):
    id: int
    title: str
    position: int

    model_config = {"from_attributes": True}

# Campos específicos de cada tipo; a obrigatoriedade por tipo é checada no EventService
class EventDetails(BaseModel):
    stand_count: Optional[int] = None
    outdoor: Optional[bool] = None
    free_entry: Optional[bool] = None
    venue: Optional[str] = Field(default=None, max_length=200)
    artist_ids: Optional[List[int]] = None
    art_type: Optional[str] = Field(default=None, max_length=120)
    curator_id: Optional[int] = None
    instructor_id: Optional[int] = None
    modality: Optional[Modality] = None
    has_talks: Optional[bool] = None
    films: Optional[List[FilmIn]] = None

class EventBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    kind: EventKind = EventKind.other
    start_date: Optional[date] = None
    duration_days: Optional[int] = Field(default=None, ge=1)
    capacity: Optional[int] = Field(default=None, ge=0)

class EventCreate(EventBase, EventDetails):
    state: EventState = EventState.pending
    # outros responsáveis além de quem cria
    organizer_ids: Optional[List[int]] = None

class EventUpdate(EventDetails):
    # o tipo não muda depois de criado
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    duration_days: Optional[int] = Field(default=None, ge=1)
    capacity: Optional[int] = Field(default=None, ge=0)
    state: Optional[EventState] = None
    # substitui os demais responsáveis; quem edita continua na lista
    organizer_ids: Optional[List[int]] = None

class EventStateUpdate(BaseModel):
    state: EventState

class Event(EventBase):
    id: int
    state: EventState
    organizer_ids: List[int] = []
    seats_taken: int = 0
    remaining_capacity: Optional[int] = None
    enrollment_open: bool = False

    stand_count: Optional[int] = None
    outdoor: Optional[bool] = None
    free_entry: Optional[bool] = None
    venue: Optional[str] = None
    artist_ids: List[int] = []
    art_type: Optional[str] = None
    curator_id: Optional[int] = None
    instructor_id: Optional[int] = None
    modality: Optional[Modality] = None
    has_talks: Optional[bool] = None
    films: List[Film] = []

    model_config = {"from_attributes": True}

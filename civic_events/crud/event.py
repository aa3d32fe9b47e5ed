# civic_events/crud/event.py
from typing import Iterable, Optional, Sequence
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from civic_events.core.errors import NotFoundError, StorageFault, ValidationError
from civic_events.crud.base import CRUDBase, violated
from civic_events.models.event import Event, EventState, Film, event_organizers
from civic_events.schemas.event import EventCreate, EventUpdate
from civic_events.services.ports import Capacitated, Capacity, Unlimited

class SqlEventCatalog(CRUDBase[Event, EventCreate, EventUpdate]):
    """EventCatalog em SQLAlchemy; leituras são snapshots do momento da chamada."""

    def __init__(self, db: Session):
        super().__init__(Event, db)

    def get(self, event_id: int) -> Optional[Event]:
        ev = self.db.get(Event, event_id)
        if ev is not None:
            # snapshot fresco: o contador de vagas muda por UPDATE direto
            self.db.refresh(ev)
        return ev

    def _require(self, event_id: int) -> Event:
        ev = self.get(event_id)
        if ev is None:
            raise NotFoundError("event", event_id)
        return ev

    def get_state(self, event_id: int) -> EventState:
        return self._require(event_id).state

    def get_capacity(self, event_id: int) -> Capacity:
        ev = self._require(event_id)
        if ev.capacity is None:
            return Unlimited()
        return Capacitated(remaining=ev.remaining_capacity)

    def add(self, ev: Event) -> Event:
        return self._write(ev)

    def save(self, ev: Event) -> Event:
        return self._write(ev)

    def replace_films(self, ev: Event, films: Iterable[Film]) -> None:
        # apaga as antigas antes de inserir: (event_id, position) é único
        ev.films.clear()
        self.db.flush()
        ev.films.extend(films)

    def _write(self, ev: Event) -> Event:
        try:
            return self.commit_new(ev)
        except IntegrityError as exc:
            if violated(exc, "uq_films_event_position", ("films.event_id", "films.position")):
                raise ValidationError("films", "duplicate position") from exc
            raise StorageFault(details={"entity": "Event"}) from exc

    def list_by_states(self, states: Sequence[EventState]) -> Sequence[Event]:
        stmt = select(Event).where(Event.state.in_(list(states))).order_by(Event.start_date, Event.id)
        return self.db.execute(stmt).scalars().all()

    def list_by_organizer(self, organizer_id: int) -> Sequence[Event]:
        stmt = (
            select(Event)
            .join(event_organizers, event_organizers.c.event_id == Event.id)
            .where(event_organizers.c.person_id == organizer_id)
            .order_by(Event.start_date, Event.id)
        )
        return self.db.execute(stmt).scalars().all()

    def list_all(self) -> Sequence[Event]:
        return self.db.execute(select(Event).order_by(Event.start_date, Event.id)).scalars().all()

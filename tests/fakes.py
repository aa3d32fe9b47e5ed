"""Implementações em memória das portas dos serviços."""
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from civic_events.core.errors import CapacityError, DuplicateError, NotFoundError, UniquenessError
from civic_events.models import Enrollment, Event, EventKind, EventState, Person
from civic_events.services.ports import Capacitated, Unlimited


class InMemoryPersonStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._people: Dict[int, Person] = {}
        self._next_id = 1

    def get(self, person_id):
        return self._people.get(person_id)

    def get_by_national_id(self, national_id):
        return next((p for p in self._people.values() if p.national_id == national_id), None)

    def get_by_handle(self, handle):
        return next((p for p in self._people.values() if p.handle is not None and p.handle == handle), None)

    def get_by_email(self, email):
        return next((p for p in self._people.values() if p.email and p.email.lower() == email.lower()), None)

    def search_by_name(self, fragment, limit=50):
        needle = fragment.strip().lower()
        found = [
            p for p in self._people.values()
            if needle in p.first_name.lower() or needle in p.last_name.lower()
        ]
        return sorted(found, key=lambda p: (p.last_name, p.first_name, p.id))[:limit]

    def _check_constraints(self, person: Person):
        for other in self._people.values():
            if other.id == person.id:
                continue
            if other.national_id == person.national_id:
                raise UniquenessError("national_id")
            if person.handle is not None and other.handle == person.handle:
                raise UniquenessError("handle")
            if person.handle is not None and other.handle is not None and person.email and other.email == person.email:
                raise UniquenessError("email")

    def add(self, person):
        with self._lock:
            self._check_constraints(person)
            person.id = self._next_id
            person.created_at = datetime.now(timezone.utc)
            self._next_id += 1
            self._people[person.id] = person
            return person

    def save(self, person):
        with self._lock:
            self._check_constraints(person)
            self._people[person.id] = person
            return person

    def __len__(self):
        return len(self._people)


class InMemoryEventCatalog:
    def __init__(self):
        self._events: Dict[int, Event] = {}
        self._next_id = 1

    def add_event(self, state=EventState.confirmed, capacity: Optional[int] = None, seats_taken: int = 0, name="Evento"):
        ev = Event(
            id=self._next_id,
            name=name,
            kind=EventKind.workshop if capacity is not None else EventKind.other,
            state=state,
            capacity=capacity,
            seats_taken=seats_taken,
        )
        self._events[ev.id] = ev
        self._next_id += 1
        return ev

    def get(self, event_id):
        return self._events.get(event_id)

    def _require(self, event_id):
        ev = self._events.get(event_id)
        if ev is None:
            raise NotFoundError("event", event_id)
        return ev

    def get_state(self, event_id):
        return self._require(event_id).state

    def get_capacity(self, event_id):
        ev = self._require(event_id)
        if ev.capacity is None:
            return Unlimited()
        return Capacitated(remaining=ev.capacity - ev.seats_taken)


class InMemoryEnrollmentLedger:
    """Insere se ausente sob o próprio lock, como a constraint única no SQL."""

    def __init__(self, catalog: InMemoryEventCatalog):
        self.catalog = catalog
        self._lock = threading.Lock()
        self._records: Dict[Tuple[int, int], Enrollment] = {}
        self._next_id = 1

    def is_enrolled(self, person_id, event_id):
        return (event_id, person_id) in self._records

    def add(self, enrollment, *, claim_seat=False):
        key = (enrollment.event_id, enrollment.person_id)
        with self._lock:
            if key in self._records:
                raise DuplicateError()
            if claim_seat:
                ev = self.catalog.get(enrollment.event_id)
                if ev.capacity is None or ev.seats_taken >= ev.capacity:
                    raise CapacityError()
                ev.seats_taken += 1
            enrollment.id = self._next_id
            self._next_id += 1
            self._records[key] = enrollment
            return enrollment

    def list_for_event(self, event_id):
        return [e for (ev, _), e in sorted(self._records.items()) if ev == event_id]

    def list_for_person(self, person_id):
        return [e for (_, p), e in sorted(self._records.items()) if p == person_id]

    def __len__(self):
        return len(self._records)


def plain_hasher(password: str) -> str:
    return "plain$" + password


def plain_verifier(password: str, stored: Optional[str]) -> bool:
    return stored == "plain$" + password

# civic_events/services/events.py
"""Manutenção do catálogo de eventos (fora do núcleo de inscrição).

Cada tipo de evento exige seus próprios dados: feira (quantidade de
stands), show (artistas), exposição (tipo de arte e curador), oficina
(vagas, instrutor e modalidade) e ciclo de cinema (filmes com ordem de
projeção única). A validação segue a ordem do formulário: campos
comuns primeiro, depois os do tipo. Só os responsáveis pelo evento
podem editá-lo, mudar o estado ou removê-lo.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from civic_events.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from civic_events.core.locks import KeyedLocks
from civic_events.crud.event import SqlEventCatalog
from civic_events.db.base import MAX_ROW_ID
from civic_events.models.event import Event, EventKind, EventState, Film, is_enrollment_admissible
from civic_events.models.person import Person
from civic_events.schemas.event import EventCreate, EventUpdate
from civic_events.services.enrollment import event_locks
from civic_events.services.ports import PersonStore

logger = logging.getLogger(__name__)

# campos usados por cada tipo; os demais ficam vazios
KIND_FIELDS = {
    EventKind.fair: ("stand_count", "outdoor"),
    EventKind.concert: ("artist_ids", "free_entry", "venue"),
    EventKind.exhibition: ("art_type", "curator_id"),
    EventKind.workshop: ("instructor_id", "modality"),
    EventKind.film_cycle: ("has_talks", "films"),
    EventKind.other: (),
}

_DETAIL_COLUMNS = (
    "stand_count", "outdoor", "free_entry", "venue", "art_type",
    "curator_id", "instructor_id", "modality", "has_talks",
)
_FLAGS = ("outdoor", "free_entry", "has_talks")

# None nestes campos de um update significa "não mudar"
_KEEP_IF_NULL = ("name", "start_date", "duration_days", "state")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_common(data: Mapping[str, Any]) -> None:
    if _blank(data.get("name")):
        raise ValidationError("name", "required")
    if data.get("start_date") is None:
        raise ValidationError("start_date", "required")
    duration = data.get("duration_days")
    if duration is None:
        raise ValidationError("duration_days", "required")
    if duration <= 0:
        raise ValidationError("duration_days", "must be positive")
    capacity = data.get("capacity")
    if capacity is not None and capacity < 0:
        raise ValidationError("capacity", "must not be negative")


def _check_films(films: Optional[Sequence[Mapping[str, Any]]]) -> None:
    if not films:
        raise ValidationError("films", "required")
    seen = set()
    for film in films:
        if _blank(film.get("title")) or film.get("position") is None:
            raise ValidationError("films", "title and position required")
        position = film["position"]
        if position <= 0:
            raise ValidationError("films", "position must be positive")
        if position in seen:
            raise ValidationError("films", f"duplicate position {position}")
        seen.add(position)


def _check_kind(kind: EventKind, data: Mapping[str, Any]) -> None:
    if kind is EventKind.fair:
        if data.get("stand_count") is None:
            raise ValidationError("stand_count", "required")
        if data["stand_count"] <= 0:
            raise ValidationError("stand_count", "must be positive")
    elif kind is EventKind.concert:
        if not data.get("artist_ids"):
            raise ValidationError("artist_ids", "required")
    elif kind is EventKind.exhibition:
        if _blank(data.get("art_type")):
            raise ValidationError("art_type", "required")
        if data.get("curator_id") is None:
            raise ValidationError("curator_id", "required")
    elif kind is EventKind.workshop:
        if data.get("capacity") is None:
            raise ValidationError("capacity", "required")
        if data["capacity"] <= 0:
            raise ValidationError("capacity", "must be positive")
        if data.get("instructor_id") is None:
            raise ValidationError("instructor_id", "required")
        if data.get("modality") is None:
            raise ValidationError("modality", "required")
    elif kind is EventKind.film_cycle:
        _check_films(data.get("films"))


def _snapshot(ev: Event) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": ev.name,
        "start_date": ev.start_date,
        "duration_days": ev.duration_days,
        "capacity": ev.capacity,
        "state": ev.state,
        "artist_ids": ev.artist_ids,
        "films": [{"title": f.title, "position": f.position} for f in ev.films],
    }
    for column in _DETAIL_COLUMNS:
        data[column] = getattr(ev, column)
    return data


class EventService:
    def __init__(self, catalog: SqlEventCatalog, people: PersonStore, locks: Optional[KeyedLocks] = None):
        self.catalog = catalog
        self.people = people
        self._locks = locks if locks is not None else event_locks

    def _person(self, field: str, person_id: int) -> Person:
        person = self.people.get(person_id) if 0 < person_id <= MAX_ROW_ID else None
        if person is None:
            raise NotFoundError(field, person_id)
        return person

    def _resolve(self, kind: EventKind, data: Mapping[str, Any]) -> Dict[str, Any]:
        refs: Dict[str, Any] = {"artists": []}
        if kind is EventKind.concert:
            ids = list(dict.fromkeys(data["artist_ids"]))
            refs["artists"] = [self._person("artist_ids", pid) for pid in ids]
        elif kind is EventKind.exhibition:
            self._person("curator_id", data["curator_id"])
        elif kind is EventKind.workshop:
            self._person("instructor_id", data["instructor_id"])
        return refs

    def _organizers(self, owner: Person, extra_ids: Optional[Sequence[int]]) -> List[Person]:
        people = [owner]
        for pid in dict.fromkeys(extra_ids or ()):
            if pid != owner.id:
                people.append(self._person("organizer_ids", pid))
        return people

    def _apply_details(self, ev: Event, data: Mapping[str, Any], refs: Mapping[str, Any]) -> None:
        fields = KIND_FIELDS[ev.kind]
        for column in _DETAIL_COLUMNS:
            value = data.get(column) if column in fields else None
            if column in _FLAGS and column in fields and value is None:
                value = False
            if column in ("venue", "art_type") and value is not None:
                value = value.strip() or None
            setattr(ev, column, value)
        ev.artists = refs["artists"]

    @staticmethod
    def _films(data: Mapping[str, Any]) -> List[Film]:
        return [Film(title=f["title"].strip(), position=f["position"]) for f in data["films"]]

    def create(self, body: EventCreate, organizer: Person) -> Event:
        data = body.model_dump()
        _check_common(data)
        _check_kind(body.kind, data)
        refs = self._resolve(body.kind, data)
        organizers = self._organizers(organizer, data.get("organizer_ids"))

        ev = Event(
            name=data["name"].strip(),
            kind=body.kind,
            start_date=data["start_date"],
            duration_days=data["duration_days"],
            state=body.state,
            capacity=data["capacity"],
            seats_taken=0,
        )
        ev.organizers = organizers
        self._apply_details(ev, data, refs)
        if body.kind is EventKind.film_cycle:
            ev.films = self._films(data)
        ev = self.catalog.add(ev)
        logger.info("event created id=%s kind=%s state=%s", ev.id, ev.kind.value, ev.state.value)
        return ev

    def get(self, event_id: int) -> Event:
        ev = self.catalog.get(event_id) if 0 < event_id <= MAX_ROW_ID else None
        if ev is None:
            raise NotFoundError("event", event_id)
        return ev

    def _owned(self, event_id: int, person: Person) -> Event:
        ev = self.get(event_id)
        if person.id not in ev.organizer_ids:
            raise PermissionDeniedError(details={"event_id": event_id})
        return ev

    def update(self, event_id: int, changes: EventUpdate, editor: Person) -> Event:
        """Edita o evento; só os campos enviados mudam, o tipo nunca."""
        sent = changes.model_dump(exclude_unset=True)
        with self._locks.hold(("event", event_id)):
            ev = self._owned(event_id, editor)
            data = _snapshot(ev)
            data.update({k: v for k, v in sent.items() if not (k in _KEEP_IF_NULL and v is None)})
            _check_common(data)
            _check_kind(ev.kind, data)
            refs = self._resolve(ev.kind, data)
            organizer_ids = sent.get("organizer_ids")
            organizers = self._organizers(editor, organizer_ids) if organizer_ids is not None else None

            if "capacity" in sent and data["capacity"] != ev.capacity:
                # eventos sem limite não contam vagas; recontar antes de limitar
                enrolled = len(ev.enrollments)
                if data["capacity"] is not None and data["capacity"] < enrolled:
                    raise ValidationError("capacity", "below enrolled count")
                ev.seats_taken = enrolled
                ev.capacity = data["capacity"]

            ev.name = data["name"].strip()
            ev.start_date = data["start_date"]
            ev.duration_days = data["duration_days"]
            ev.state = data["state"]
            self._apply_details(ev, data, refs)
            if organizers is not None:
                ev.organizers = organizers
            if ev.kind is EventKind.film_cycle and "films" in sent:
                self.catalog.replace_films(ev, self._films(data))
            ev = self.catalog.save(ev)
        logger.info("event id=%s updated by person id=%s", ev.id, editor.id)
        return ev

    def set_state(self, event_id: int, state: EventState, editor: Optional[Person] = None) -> Event:
        with self._locks.hold(("event", event_id)):
            ev = self._owned(event_id, editor) if editor is not None else self.get(event_id)
            ev = self.catalog.update(ev, {"state": state})
        logger.info("event id=%s moved to %s", ev.id, state.value)
        return ev

    def delete(self, event_id: int, editor: Person) -> None:
        with self._locks.hold(("event", event_id)):
            ev = self._owned(event_id, editor)
            enrolled = len(ev.enrollments)
            self.catalog.remove(ev)
        logger.info("event id=%s removed by person id=%s (%s enrollments dropped)", event_id, editor.id, enrolled)

    def available(self) -> Sequence[Event]:
        return self.catalog.list_by_states([s for s in EventState if is_enrollment_admissible(s)])

    def by_organizer(self, organizer_id: int) -> Sequence[Event]:
        return self.catalog.list_by_organizer(organizer_id)

    def all(self) -> Sequence[Event]:
        return self.catalog.list_all()

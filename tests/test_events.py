"""EventService sobre SQLAlchemy: dados por tipo, responsáveis, edição e remoção."""
from datetime import date

import pytest
from sqlalchemy import func, select

from civic_events.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from civic_events.core.locks import KeyedLocks
from civic_events.crud.enrollment import SqlEnrollmentLedger
from civic_events.crud.event import SqlEventCatalog
from civic_events.crud.person import PersonRepository
from civic_events.models import Enrollment, EventKind, EventState, Film, Modality, Person
from civic_events.models.event import event_organizers
from civic_events.schemas.event import EventCreate, EventUpdate
from civic_events.services.enrollment import EnrollmentWorkflow
from civic_events.services.events import EventService

TODAY = date(2026, 10, 17)


def make_person(db, national_id, handle=None):
    person = Person(national_id=national_id, first_name="P", last_name=str(national_id), handle=handle)
    db.add(person); db.commit(); db.refresh(person)
    return person


def body(**overrides):
    data = {"name": "Feria del libro", "kind": "fair", "start_date": "2026-11-01", "duration_days": 3, "stand_count": 12}
    data.update(overrides)
    return EventCreate(**data)


@pytest.fixture
def service(db):
    return EventService(SqlEventCatalog(db), PersonRepository(db), locks=KeyedLocks())


@pytest.fixture
def owner(db):
    return make_person(db, 1, handle="owner")


def enroll(db, event_id, person_id):
    workflow = EnrollmentWorkflow(SqlEventCatalog(db), SqlEnrollmentLedger(db), locks=KeyedLocks(), today=lambda: TODAY)
    return workflow.enroll(event_id, person_id)


def reason_for(service, owner, **overrides):
    with pytest.raises(ValidationError) as exc:
        service.create(body(**overrides), organizer=owner)
    return exc.value.field, exc.value.reason


class TestCreate:
    def test_fair(self, service, owner):
        ev = service.create(body(outdoor=True, artist_ids=[99]), organizer=owner)
        assert ev.id is not None
        assert (ev.kind, ev.stand_count, ev.outdoor) == (EventKind.fair, 12, True)
        # dados de outros tipos são descartados
        assert ev.artist_ids == []
        assert ev.organizer_ids == [owner.id]

    def test_common_fields_checked_first(self, service, owner):
        assert reason_for(service, owner, name="  ", start_date=None) == ("name", "required")
        assert reason_for(service, owner, start_date=None, stand_count=None) == ("start_date", "required")
        assert reason_for(service, owner, duration_days=None, stand_count=None) == ("duration_days", "required")

    def test_fair_requires_positive_stand_count(self, service, owner):
        assert reason_for(service, owner, stand_count=None) == ("stand_count", "required")
        assert reason_for(service, owner, stand_count=0) == ("stand_count", "must be positive")

    def test_flags_default_to_false(self, service, owner):
        assert service.create(body(), organizer=owner).outdoor is False

    def test_concert_artists(self, service, db, owner):
        a, b = make_person(db, 2), make_person(db, 3)
        assert reason_for(service, owner, kind="concert", stand_count=None) == ("artist_ids", "required")

        ev = service.create(body(kind="concert", artist_ids=[b.id, a.id, b.id], venue=" Plaza ", stand_count=None), organizer=owner)
        assert ev.artist_ids == [a.id, b.id]
        assert (ev.venue, ev.free_entry, ev.stand_count) == ("Plaza", False, None)

        with pytest.raises(NotFoundError) as exc:
            service.create(body(kind="concert", artist_ids=[404]), organizer=owner)
        assert exc.value.field == "artist_ids"

    def test_exhibition(self, service, db, owner):
        curator = make_person(db, 2)
        assert reason_for(service, owner, kind="exhibition", curator_id=curator.id) == ("art_type", "required")
        assert reason_for(service, owner, kind="exhibition", art_type="Pintura") == ("curator_id", "required")

        ev = service.create(body(kind="exhibition", art_type="Pintura", curator_id=curator.id), organizer=owner)
        assert ev.curator.id == curator.id

    def test_workshop(self, service, owner):
        kw = dict(kind="workshop", instructor_id=owner.id, modality="virtual")
        assert reason_for(service, owner, **kw) == ("capacity", "required")
        assert reason_for(service, owner, capacity=0, **kw) == ("capacity", "must be positive")
        assert reason_for(service, owner, kind="workshop", capacity=5, modality="virtual") == ("instructor_id", "required")
        assert reason_for(service, owner, kind="workshop", capacity=5, instructor_id=owner.id) == ("modality", "required")

        ev = service.create(body(capacity=5, **kw), organizer=owner)
        assert (ev.modality, ev.remaining_capacity) == (Modality.virtual, 5)
        assert ev.instructor.id == owner.id

    def test_unknown_instructor(self, service, owner):
        with pytest.raises(NotFoundError) as exc:
            service.create(body(kind="workshop", capacity=5, instructor_id=2**31, modality="virtual"), organizer=owner)
        assert exc.value.field == "instructor_id"

    def test_film_cycle(self, service, owner):
        assert reason_for(service, owner, kind="film_cycle") == ("films", "required")
        assert reason_for(service, owner, kind="film_cycle", films=[{"title": "Nueve reinas"}]) == (
            "films", "title and position required")
        assert reason_for(service, owner, kind="film_cycle", films=[{"title": "A", "position": 0}]) == (
            "films", "position must be positive")
        assert reason_for(service, owner, kind="film_cycle", films=[
            {"title": "A", "position": 2}, {"title": "B", "position": 2},
        ]) == ("films", "duplicate position 2")

        ev = service.create(body(kind="film_cycle", films=[
            {"title": "Relatos salvajes", "position": 2}, {"title": "Nueve reinas", "position": 1},
        ]), organizer=owner)
        assert [f.title for f in ev.films] == ["Nueve reinas", "Relatos salvajes"]
        assert ev.has_talks is False

    def test_several_organizers(self, service, db, owner):
        other = make_person(db, 2)
        ev = service.create(body(organizer_ids=[other.id, owner.id]), organizer=owner)
        assert ev.organizer_ids == [owner.id, other.id]
        assert [e.id for e in service.by_organizer(other.id)] == [ev.id]

        with pytest.raises(NotFoundError) as exc:
            service.create(body(organizer_ids=[404]), organizer=owner)
        assert exc.value.field == "organizer_ids"


class TestEdit:
    def test_only_sent_fields_change(self, service, owner):
        ev = service.create(body(), organizer=owner)
        updated = service.update(ev.id, EventUpdate(name=" Feria de ciencias ", stand_count=20), editor=owner)
        assert (updated.name, updated.stand_count) == ("Feria de ciencias", 20)
        assert updated.duration_days == 3
        assert updated.kind is EventKind.fair

    def test_kind_rules_apply_to_merged_data(self, service, owner):
        ev = service.create(body(), organizer=owner)
        with pytest.raises(ValidationError) as exc:
            service.update(ev.id, EventUpdate(stand_count=None), editor=owner)
        assert exc.value.field == "stand_count"

    def test_non_organizer_forbidden(self, service, db, owner):
        stranger = make_person(db, 2, handle="stranger")
        ev = service.create(body(), organizer=owner)
        with pytest.raises(PermissionDeniedError):
            service.update(ev.id, EventUpdate(name="Mía"), editor=stranger)
        with pytest.raises(PermissionDeniedError):
            service.set_state(ev.id, EventState.cancelled, editor=stranger)
        with pytest.raises(PermissionDeniedError):
            service.delete(ev.id, editor=stranger)
        assert service.get(ev.id).name == "Feria del libro"

    def test_co_organizer_may_edit(self, service, db, owner):
        other = make_person(db, 2, handle="other")
        ev = service.create(body(organizer_ids=[other.id]), organizer=owner)
        assert service.update(ev.id, EventUpdate(stand_count=3), editor=other).stand_count == 3

    def test_capacity_not_below_enrolled(self, service, db, owner):
        ev = service.create(body(kind="workshop", capacity=3, instructor_id=owner.id, modality="in_person"), organizer=owner)
        service.set_state(ev.id, EventState.confirmed, editor=owner)
        for n in (2, 3):
            enroll(db, ev.id, make_person(db, n).id)

        with pytest.raises(ValidationError) as exc:
            service.update(ev.id, EventUpdate(capacity=1), editor=owner)
        assert exc.value.reason == "below enrolled count"

        updated = service.update(ev.id, EventUpdate(capacity=10), editor=owner)
        assert (updated.seats_taken, updated.remaining_capacity) == (2, 8)

    def test_replace_films_reusing_positions(self, service, owner):
        ev = service.create(body(kind="film_cycle", films=[
            {"title": "A", "position": 1}, {"title": "B", "position": 2},
        ]), organizer=owner)
        updated = service.update(ev.id, EventUpdate(films=[
            {"title": "B", "position": 1}, {"title": "A", "position": 2}, {"title": "C", "position": 3},
        ]), editor=owner)
        assert [(f.position, f.title) for f in updated.films] == [(1, "B"), (2, "A"), (3, "C")]

    def test_unknown_event(self, service, owner):
        with pytest.raises(NotFoundError):
            service.update(404, EventUpdate(name="x"), editor=owner)
        with pytest.raises(NotFoundError):
            service.get(2**31)


def test_delete_drops_enrollments_and_films(service, db, owner):
    ev = service.create(body(kind="film_cycle", state="confirmed", films=[{"title": "A", "position": 1}]), organizer=owner)
    enroll(db, ev.id, make_person(db, 2).id)

    service.delete(ev.id, editor=owner)

    with pytest.raises(NotFoundError):
        service.get(ev.id)
    assert db.scalar(select(func.count()).select_from(Enrollment)) == 0
    assert db.scalar(select(func.count()).select_from(Film)) == 0
    assert db.scalar(select(func.count()).select_from(event_organizers)) == 0
    assert db.get(Person, owner.id) is not None

# civic_events/models/event.py
from enum import Enum
from typing import List, Optional
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, Column, String, Integer, Date, DateTime, ForeignKey, CheckConstraint, Table, UniqueConstraint,
    Enum as SAEnum, func,
)
from civic_events.db.base import Base

class EventState(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    finished = "finished"
    cancelled = "cancelled"

class EventKind(str, Enum):
    fair = "fair"
    concert = "concert"
    exhibition = "exhibition"
    workshop = "workshop"
    film_cycle = "film_cycle"
    other = "other"

class Modality(str, Enum):
    in_person = "in_person"
    virtual = "virtual"

_ADMISSIBLE_STATES = frozenset({EventState.confirmed, EventState.in_progress})

def is_enrollment_admissible(state: EventState) -> bool:
    """Fonte única de verdade sobre quais estados aceitam novas inscrições.

    Todo estado novo em :class:`EventState` deve ser revisto contra este conjunto.
    """
    return state in _ADMISSIBLE_STATES

def _enum_values(enum_cls):
    return [m.value for m in enum_cls]

# responsáveis pelo evento (quem cria entra automaticamente)
event_organizers = Table(
    "event_organizers",
    Base.metadata,
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("person_id", ForeignKey("people.id"), primary_key=True),
)

concert_artists = Table(
    "concert_artists",
    Base.metadata,
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("person_id", ForeignKey("people.id"), primary_key=True),
)

class Event(Base):
    __tablename__ = "events"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    kind: Mapped[EventKind] = mapped_column(
        SAEnum(EventKind, name="event_kind", native_enum=False, values_callable=_enum_values),
        default=EventKind.other,
    )
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    duration_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    state: Mapped[EventState] = mapped_column(
        SAEnum(EventState, name="event_state", native_enum=False, values_callable=_enum_values),
        default=EventState.pending,
    )
    # NULL = sem limite de vagas
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    seats_taken: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # feira
    stand_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    outdoor: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    # show
    free_entry: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    venue: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    # exposição
    art_type: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    curator_id: Mapped[Optional[int]] = mapped_column(ForeignKey("people.id"), nullable=True)
    # oficina
    instructor_id: Mapped[Optional[int]] = mapped_column(ForeignKey("people.id"), nullable=True)
    modality: Mapped[Optional[Modality]] = mapped_column(
        SAEnum(Modality, name="event_modality", native_enum=False, values_callable=_enum_values),
        nullable=True,
    )
    # ciclo de cinema
    has_talks: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    organizers = relationship("Person", secondary=event_organizers, order_by="Person.id")
    artists = relationship("Person", secondary=concert_artists, order_by="Person.id")
    curator = relationship("Person", foreign_keys="Event.curator_id")
    instructor = relationship("Person", foreign_keys="Event.instructor_id")
    films: Mapped[List["Film"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="Film.position",
    )
    enrollments = relationship("Enrollment", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("seats_taken >= 0", name="seats_taken_non_negative"),
        CheckConstraint("capacity IS NULL OR capacity >= 0", name="capacity_non_negative"),
    )

    @property
    def remaining_capacity(self) -> Optional[int]:
        if self.capacity is None:
            return None
        return self.capacity - (self.seats_taken or 0)

    @property
    def enrollment_open(self) -> bool:
        return is_enrollment_admissible(self.state)

    @property
    def organizer_ids(self) -> List[int]:
        return [p.id for p in self.organizers]

    @property
    def artist_ids(self) -> List[int]:
        return [p.id for p in self.artists]

class Film(Base):
    __tablename__ = "films"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"))
    title: Mapped[str] = mapped_column(String(200))
    # ordem de projeção dentro do ciclo, a partir de 1
    position: Mapped[int] = mapped_column(Integer)

    event: Mapped["Event"] = relationship(back_populates="films")

    __table_args__ = (
        CheckConstraint("position > 0", name="position_positive"),
        UniqueConstraint("event_id", "position", name="uq_films_event_position"),
    )

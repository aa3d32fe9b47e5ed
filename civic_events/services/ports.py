# civic_events/services/ports.py
"""Interfaces dos colaboradores dos serviços do núcleo.

Os serviços recebem estes objetos pelo construtor, então as
implementações SQLAlchemy de ``civic_events.crud`` podem ser trocadas
por versões em memória.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Union

from civic_events.models import Enrollment, Event, EventState, Person


@dataclass(frozen=True)
class Unlimited:
    """Evento sem limite de inscrições."""


@dataclass(frozen=True)
class Capacitated:
    """Evento limitado por um contador de vagas restantes."""

    remaining: int


Capacity = Union[Unlimited, Capacitated]


class PersonStore(Protocol):
    def get(self, person_id: int) -> Optional[Person]: ...

    def get_by_national_id(self, national_id: int) -> Optional[Person]: ...

    def get_by_handle(self, handle: str) -> Optional[Person]: ...

    def get_by_email(self, email: str) -> Optional[Person]: ...

    def search_by_name(self, fragment: str, limit: int = 50) -> Sequence[Person]: ...

    def add(self, person: Person) -> Person:
        """Grava uma pessoa nova; UniquenessError em conflito no banco."""
        ...

    def save(self, person: Person) -> Person: ...


class EventCatalog(Protocol):
    def get(self, event_id: int) -> Optional[Event]: ...

    def get_state(self, event_id: int) -> EventState: ...

    def get_capacity(self, event_id: int) -> Capacity: ...


class EnrollmentLedger(Protocol):
    def is_enrolled(self, person_id: int, event_id: int) -> bool: ...

    def add(self, enrollment: Enrollment, *, claim_seat: bool = False) -> Enrollment:
        """Insere se ainda não existir.

        Com ``claim_seat`` a vaga do evento é ocupada na mesma transação.
        Levanta DuplicateError / CapacityError; nada é gravado quando
        qualquer um dos dois é levantado.
        """
        ...

    def list_for_event(self, event_id: int) -> Sequence[Enrollment]: ...

    def list_for_person(self, person_id: int) -> Sequence[Enrollment]: ...

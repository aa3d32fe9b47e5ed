# civic_events/services/enrollment.py
"""Inscrição de uma pessoa em um evento.

``enroll`` verifica, nesta ordem: argumentos presentes, pessoa e evento
existentes, estado do evento admissível, vagas restantes (só em eventos
com limite de vagas) e ausência de inscrição anterior. As checagens e a gravação
rodam sob um lock por evento, e a gravação no ledger também é
condicional (par único + contador de vagas), então chamadas
concorrentes de outros processos também não estouram o limite nem
duplicam a inscrição.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from civic_events.core.config import settings
from civic_events.core.errors import (
    CapacityError,
    CivicEventsError,
    DuplicateError,
    NotFoundError,
    StateError,
    ValidationError,
)
from civic_events.core.locks import KeyedLocks
from civic_events.db.base import MAX_ROW_ID
from civic_events.models.enrollment import Enrollment
from civic_events.models.event import is_enrollment_admissible
from civic_events.services.ports import Capacitated, EnrollmentLedger, EventCatalog, PersonStore

logger = logging.getLogger(__name__)

# compartilhado com o EventService (edição/remoção do evento)
event_locks = KeyedLocks()


def local_today() -> date:
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


class EnrollmentWorkflow:
    def __init__(
        self,
        catalog: EventCatalog,
        ledger: EnrollmentLedger,
        people: Optional[PersonStore] = None,
        locks: Optional[KeyedLocks] = None,
        today: Callable[[], date] = local_today,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.people = people
        self._locks = locks if locks is not None else event_locks
        self._today = today

    def enroll(self, event_id: Optional[int], person_id: Optional[int]) -> Enrollment:
        if event_id is None:
            raise ValidationError("event", "required")
        if person_id is None:
            raise ValidationError("person", "required")

        try:
            # fora da faixa da chave: não pode existir
            if not 0 < event_id <= MAX_ROW_ID:
                raise NotFoundError("event", event_id)
            if not 0 < person_id <= MAX_ROW_ID:
                raise NotFoundError("person", person_id)
            if self.people is not None and self.people.get(person_id) is None:
                raise NotFoundError("person", person_id)
            with self._locks.hold(("event", event_id)):
                enrollment = self._admit(event_id, person_id)
        except CivicEventsError as exc:
            logger.info("enrollment rejected event=%s person=%s (%s)", event_id, person_id, exc.code)
            raise
        logger.info("enrolled person=%s into event=%s on %s", person_id, event_id, enrollment.enrolled_on)
        return enrollment

    def _admit(self, event_id: int, person_id: int) -> Enrollment:
        state = self.catalog.get_state(event_id)
        if not is_enrollment_admissible(state):
            raise StateError(details={"event_id": event_id, "state": state.value})

        capacity = self.catalog.get_capacity(event_id)
        capacitated = isinstance(capacity, Capacitated)
        if capacitated and capacity.remaining <= 0:
            raise CapacityError(details={"event_id": event_id})

        if self.ledger.is_enrolled(person_id, event_id):
            raise DuplicateError(details={"event_id": event_id, "person_id": person_id})

        enrollment = Enrollment(event_id=event_id, person_id=person_id, enrolled_on=self._today())
        return self.ledger.add(enrollment, claim_seat=capacitated)

    def is_enrolled(self, person_id: Optional[int], event_id: Optional[int]) -> bool:
        if person_id is None or event_id is None:
            return False
        return self.ledger.is_enrolled(person_id, event_id)

    def enrollments_for_event(self, event_id: int) -> Sequence[Enrollment]:
        return self.ledger.list_for_event(event_id)

    def enrollments_for_person(self, person_id: int) -> Sequence[Enrollment]:
        return self.ledger.list_for_person(person_id)

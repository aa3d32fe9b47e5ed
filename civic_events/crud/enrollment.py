# civic_events/crud/enrollment.py
import logging
from typing import Sequence
from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from civic_events.core.errors import CapacityError, DuplicateError, StorageFault
from civic_events.crud.base import violated
from civic_events.models.enrollment import Enrollment
from civic_events.models.event import Event

logger = logging.getLogger(__name__)

class SqlEnrollmentLedger:
    """EnrollmentLedger em SQLAlchemy.

    ``add`` é o "insert if absent" atômico: a UniqueConstraint
    (event_id, person_id) e o UPDATE condicional do contador de vagas
    valem mesmo entre processos distintos usando o mesmo banco.
    """

    def __init__(self, db: Session):
        self.db = db

    def is_enrolled(self, person_id: int, event_id: int) -> bool:
        if person_id is None or event_id is None:
            return False
        count = self.db.scalar(
            select(func.count()).select_from(Enrollment)
            .where(Enrollment.person_id == person_id, Enrollment.event_id == event_id)
        )
        return bool(count)

    def add(self, enrollment: Enrollment, *, claim_seat: bool = False) -> Enrollment:
        try:
            if claim_seat:
                result = self.db.execute(
                    update(Event)
                    .where(
                        Event.id == enrollment.event_id,
                        Event.capacity.is_not(None),
                        Event.seats_taken < Event.capacity,
                    )
                    .values(seats_taken=Event.seats_taken + 1)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    self.db.rollback()
                    raise CapacityError()
            self.db.add(enrollment)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if violated(exc, "uq_enrollment_event_person", ("enrollments.event_id", "enrollments.person_id")):
                raise DuplicateError() from exc
            logger.error("enrollment insert failed: %s", exc)
            raise StorageFault(details={"entity": "Enrollment"}) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("enrollment insert failed: %s", exc)
            raise StorageFault(details={"entity": "Enrollment"}) from exc
        self.db.refresh(enrollment)
        return enrollment

    def list_for_event(self, event_id: int) -> Sequence[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.event_id == event_id).order_by(Enrollment.id)
        return self.db.execute(stmt).scalars().all()

    def list_for_person(self, person_id: int) -> Sequence[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.person_id == person_id).order_by(Enrollment.id)
        return self.db.execute(stmt).scalars().all()

# civic_events/crud/person.py
from typing import Optional, Sequence
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from civic_events.core.errors import StorageFault, UniquenessError
from civic_events.crud.base import CRUDBase, violated
from civic_events.models.person import Person

# ordem = ordem de reporte (national_id -> handle -> email)
_UNIQUE_ATTRIBUTES = (
    ("national_id", "uq_people_national_id", ("people.national_id",)),
    ("handle", "uq_people_handle", ("people.handle",)),
    ("email", "uq_people_email", ("people.email",)),
)

class PersonRepository(CRUDBase[Person, None, None]):
    """PersonStore em SQLAlchemy."""

    def __init__(self, db: Session):
        super().__init__(Person, db)

    def get_by_national_id(self, national_id: int) -> Optional[Person]:
        return self.db.execute(select(Person).where(Person.national_id == national_id)).scalar_one_or_none()

    def get_by_handle(self, handle: str) -> Optional[Person]:
        return self.db.execute(select(Person).where(Person.handle == handle)).scalar_one_or_none()

    def get_by_email(self, email: str) -> Optional[Person]:
        # simplificados podem repetir e-mail; basta saber se existe algum
        return self.db.scalars(select(Person).where(func.lower(Person.email) == email.lower()).order_by(Person.id).limit(1)).first()

    def search_by_name(self, fragment: str, limit: int = 50) -> Sequence[Person]:
        # % e _ digitados são literais, não curingas
        needle = fragment.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        like = f"%{needle}%"
        stmt = (
            select(Person)
            .where(
                func.lower(Person.first_name).like(like, escape="\\")
                | func.lower(Person.last_name).like(like, escape="\\")
            )
            .order_by(Person.last_name, Person.first_name, Person.id)
            .limit(limit)
        )
        return self.db.execute(stmt).scalars().all()

    def add(self, person: Person) -> Person:
        return self._write(person)

    def save(self, person: Person) -> Person:
        return self._write(person)

    def _write(self, person: Person) -> Person:
        try:
            return self.commit_new(person)
        except IntegrityError as exc:
            for attribute, constraint, columns in _UNIQUE_ATTRIBUTES:
                if violated(exc, constraint, columns):
                    raise UniquenessError(attribute) from exc
            raise StorageFault(details={"entity": "Person"}) from exc

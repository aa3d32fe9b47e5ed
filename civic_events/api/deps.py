# civic_events/api/deps.py
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from civic_events.core.errors import AuthenticationError
from civic_events.core.tokens import decode_access
from civic_events.crud.enrollment import SqlEnrollmentLedger
from civic_events.crud.event import SqlEventCatalog
from civic_events.crud.person import PersonRepository
from civic_events.db.session import get_db
from civic_events.models.person import Person
from civic_events.services.directory import PersonDirectory
from civic_events.services.enrollment import EnrollmentWorkflow
from civic_events.services.events import EventService

def get_directory(db: Session = Depends(get_db)) -> PersonDirectory:
    return PersonDirectory(PersonRepository(db))

def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(SqlEventCatalog(db), PersonRepository(db))

def get_workflow(db: Session = Depends(get_db)) -> EnrollmentWorkflow:
    return EnrollmentWorkflow(SqlEventCatalog(db), SqlEnrollmentLedger(db), people=PersonRepository(db))

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid Authorization header")
    return parts[1]

def get_current_person(
    token: str = Depends(get_bearer_token),
    directory: PersonDirectory = Depends(get_directory),
) -> Person:
    payload = decode_access(token)
    if not payload:
        raise AuthenticationError("Invalid token")
    person = directory.store.get(int(payload["sub"]))
    if person is None or not person.has_account:
        raise AuthenticationError("Person not found")
    return person

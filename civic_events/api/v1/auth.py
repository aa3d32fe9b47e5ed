# civic_events/api/v1/auth.py
from fastapi import APIRouter, Depends

from civic_events.api.deps import get_directory
from civic_events.core.errors import AuthenticationError
from civic_events.core.tokens import create_access_token
from civic_events.schemas.person import LoginIn, PersonOut, TokenOut
from civic_events.services.directory import PersonDirectory

router = APIRouter()

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, directory: PersonDirectory = Depends(get_directory)):
    person = directory.authenticate(body.handle, body.password)
    if person is None:
        raise AuthenticationError("Usuário ou senha inválidos")
    token = create_access_token(person_id=person.id, handle=person.handle)
    return TokenOut(access_token=token, person=PersonOut.model_validate(person))

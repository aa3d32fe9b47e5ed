# civic_events/schemas/person.py
from __future__ import annotations
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel

# Entradas chegam "cruas" (como vêm do formulário); a validação
# ordenada fica no PersonDirectory para manter as mensagens por campo.

class PersonRegister(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[Union[int, str]] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    handle: Optional[str] = None
    password: Optional[str] = None

class PersonRegisterSimple(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[Union[int, str]] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class PersonUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[Union[int, str]] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class PersonOut(BaseModel):
    id: int
    national_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    handle: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class LoginIn(BaseModel):
    handle: Optional[str] = None
    password: Optional[str] = None

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    person: PersonOut

# civic_events/services/directory.py
"""Cadastro, autenticação e atualização de perfil de pessoas.

A validação segue uma ordem fixa para que o primeiro problema reportado
seja estável: presença (na ordem dos campos abaixo), depois formato,
depois unicidade (national_id -> handle -> email). Nada é gravado sem
que todas as checagens passem; as constraints únicas do banco cobrem a
unicidade entre processos.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from civic_events.core.errors import CivicEventsError, NotFoundError, UniquenessError, ValidationError
from civic_events.core.locks import KeyedLocks
from civic_events.core.security import hash_password, verify_password
from civic_events.db.base import MAX_ROW_ID
from civic_events.models.person import MAX_NATIONAL_ID, Person
from civic_events.services.ports import PersonStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")

FULL_REQUIRED = ("first_name", "last_name", "national_id", "phone", "email", "handle", "password")
SIMPLE_REQUIRED = ("first_name", "last_name", "national_id")
PROFILE_REQUIRED = ("first_name", "last_name", "email", "national_id", "phone")

# compartilhado por todas as instâncias do processo
_registration_locks = KeyedLocks()

Candidate = Union[BaseModel, Mapping[str, Any]]


def _as_dict(candidate: Candidate) -> Dict[str, Any]:
    if candidate is None:
        raise ValidationError("candidate", "required")
    if isinstance(candidate, BaseModel):
        return candidate.model_dump()
    return dict(candidate)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require(data: Mapping[str, Any], fields: Sequence[str]) -> None:
    for field in fields:
        if not _present(data.get(field)):
            raise ValidationError(field, "required")


def parse_national_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("national_id", "must be a number")
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            raise ValidationError("national_id", "must be a number") from None
    if number <= 0:
        raise ValidationError("national_id", "must be positive")
    if number > MAX_NATIONAL_ID:
        raise ValidationError("national_id", "out of range")
    return number


def check_email(value: str) -> str:
    # e-mail sempre minúsculo, como no cadastro de usuários
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("email", "invalid format")
    return email


class PersonDirectory:
    def __init__(
        self,
        store: PersonStore,
        locks: Optional[KeyedLocks] = None,
        hasher: Callable[[str], str] = hash_password,
        verifier: Callable[[str, Optional[str]], bool] = verify_password,
    ):
        self.store = store
        self._locks = locks if locks is not None else _registration_locks
        self._hash = hasher
        self._verify = verifier

    # ------------------------------------------------------------------
    # cadastro
    # ------------------------------------------------------------------

    def register(self, candidate: Candidate) -> Person:
        """Cadastro completo: pessoa com acesso ao sistema (handle + senha)."""
        data = _as_dict(candidate)
        _require(data, FULL_REQUIRED)
        national_id = parse_national_id(data["national_id"])
        email = check_email(data["email"])
        handle = data["handle"].strip()
        password_hash = self._hash(data["password"].strip())

        try:
            with self._locks.hold(("national_id", national_id), ("handle", handle), ("email", email)):
                self._ensure_unique(national_id=national_id, handle=handle, email=email)
                person = self.store.add(Person(
                    national_id=national_id,
                    first_name=data["first_name"].strip(),
                    last_name=data["last_name"].strip(),
                    phone=data["phone"].strip(),
                    email=email,
                    handle=handle,
                    password_hash=password_hash,
                ))
        except CivicEventsError as exc:
            logger.info("registration rejected (%s): %s", exc.code, exc.message)
            raise
        logger.info("registered person id=%s handle=%s", person.id, person.handle)
        return person

    def register_simple(self, candidate: Candidate) -> Person:
        """Participante sem acesso ao sistema; só o national_id precisa ser único."""
        data = _as_dict(candidate)
        _require(data, SIMPLE_REQUIRED)
        national_id = parse_national_id(data["national_id"])

        try:
            with self._locks.hold(("national_id", national_id)):
                self._ensure_unique(national_id=national_id)
                person = self.store.add(Person(
                    national_id=national_id,
                    first_name=data["first_name"].strip(),
                    last_name=data["last_name"].strip(),
                    phone=_clean(data.get("phone")),
                    # e-mail sem validação de formato neste modo
                    email=_clean(data.get("email")),
                ))
        except CivicEventsError as exc:
            logger.info("simple registration rejected (%s): %s", exc.code, exc.message)
            raise
        logger.info("registered participant id=%s", person.id)
        return person

    def _ensure_unique(
        self,
        *,
        national_id: int,
        handle: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        def taken(found: Optional[Person]) -> bool:
            return found is not None and found.id != exclude_id

        if taken(self.store.get_by_national_id(national_id)):
            raise UniquenessError("national_id")
        if handle is not None and taken(self.store.get_by_handle(handle)):
            raise UniquenessError("handle")
        if email is not None and taken(self.store.get_by_email(email)):
            raise UniquenessError("email")

    # ------------------------------------------------------------------
    # autenticação
    # ------------------------------------------------------------------

    def authenticate(self, handle: Optional[str], password: Optional[str]) -> Optional[Person]:
        """Retorna a pessoa correspondente ou ``None``.

        O handle é aparado; a senha é comparada exatamente como veio.
        """
        if not _present(handle):
            raise ValidationError("handle", "required")
        if not _present(password):
            raise ValidationError("password", "required")
        person = self.store.get_by_handle(handle.strip())
        if person is None or not self._verify(password, person.password_hash):
            logger.info("authentication failed for handle=%s", handle.strip())
            return None
        return person

    # ------------------------------------------------------------------
    # perfil / consultas
    # ------------------------------------------------------------------

    def get(self, person_id: int) -> Person:
        person = self.store.get(person_id) if 0 < person_id <= MAX_ROW_ID else None
        if person is None:
            raise NotFoundError("person", person_id)
        return person

    def find_by_national_id(self, national_id: Any) -> Optional[Person]:
        return self.store.get_by_national_id(parse_national_id(national_id))

    def search(self, fragment: Optional[str], limit: int = 50) -> Sequence[Person]:
        return self.store.search_by_name(fragment or "", limit=limit)

    def update_profile(self, person_id: int, changes: Candidate) -> Person:
        person = self.get(person_id)
        data = {k: v for k, v in _as_dict(changes).items() if v is not None}
        merged = {
            "first_name": data.get("first_name", person.first_name),
            "last_name": data.get("last_name", person.last_name),
            "email": data.get("email", person.email),
            "national_id": data.get("national_id", person.national_id),
            "phone": data.get("phone", person.phone),
        }
        _require(merged, PROFILE_REQUIRED)
        email = check_email(merged["email"])
        national_id = parse_national_id(merged["national_id"])

        with self._locks.hold(("national_id", national_id), ("email", email)):
            self._ensure_unique(national_id=national_id, email=email, exclude_id=person.id)
            person.first_name = merged["first_name"].strip()
            person.last_name = merged["last_name"].strip()
            person.phone = merged["phone"].strip()
            person.email = email
            person.national_id = national_id
            person = self.store.save(person)
        logger.info("profile updated for person id=%s", person.id)
        return person

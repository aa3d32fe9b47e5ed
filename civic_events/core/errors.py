# civic_events/core/errors.py
"""Taxonomia de erros do cadastro e da inscrição.

Violações de regra de negócio são tipadas e carregam um ``code`` estável
e uma ``message`` exibível ao usuário; só :class:`StorageFault` representa
falha de infraestrutura.

Uso:
    try:
        workflow.enroll(event_id, person_id)
    except CapacityError as e:
        show(e.message)
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class CivicEventsError(Exception):
    code = "ERROR"
    default_message = "Operation failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def as_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(CivicEventsError):
    """Entrada ausente ou malformada; nomeia o campo."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"

    def __init__(self, field: str, reason: str, message: Optional[str] = None):
        self.field = field
        self.reason = reason
        super().__init__(message or f"{field}: {reason}", {"field": field, "reason": reason})


class NotFoundError(ValidationError):
    code = "NOT_FOUND"

    def __init__(self, field: str, value: Any):
        super().__init__(field, "not found", f"{field} {value} not found")
        self.details["value"] = value


class UniquenessError(CivicEventsError):
    """O cadastro colide com uma pessoa existente em ``attribute``."""

    code = "UNIQUE_VIOLATION"

    def __init__(self, attribute: str, message: Optional[str] = None):
        self.attribute = attribute
        super().__init__(message or f"{attribute} already in use", {"attribute": attribute})


class StateError(CivicEventsError):
    code = "EVENT_NOT_OPEN"
    default_message = "event not open for enrollment"


class CapacityError(CivicEventsError):
    code = "NO_CAPACITY"
    default_message = "no capacity available"


class DuplicateError(CivicEventsError):
    code = "ALREADY_ENROLLED"
    default_message = "person already enrolled in this event"


class StorageFault(CivicEventsError):
    """Banco indisponível ou falha inesperada. Sem retry aqui."""

    code = "STORAGE_FAULT"
    default_message = "storage failure"


class AuthenticationError(CivicEventsError):
    code = "UNAUTHORIZED"
    default_message = "invalid credentials"


class PermissionDeniedError(CivicEventsError):
    """Autenticado, mas não é responsável pelo recurso."""

    code = "FORBIDDEN"
    default_message = "not allowed"

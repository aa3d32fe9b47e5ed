# civic_events/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from civic_events.core.config import settings

def _now() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(*, person_id: int, handle: str) -> str:
    """Access token curto (minutos), assinado com SECRET_KEY."""
    expire = _now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {
        "type": "access",
        "sub": str(person_id),
        "handle": handle,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        return None
    return payload

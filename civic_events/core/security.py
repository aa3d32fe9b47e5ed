# civic_events/core/security.py
from __future__ import annotations
from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["argon2", "bcrypt_sha256", "bcrypt"],
    deprecated="auto",
    argon2__time_cost=2,
    argon2__memory_cost=19456,
    argon2__parallelism=1,
)

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_password(plain: str, stored_hash: str | None) -> bool:
    # comparação exata: sem trim, sensível a maiúsculas
    if not stored_hash:
        return False
    return pwd_context.verify(plain, stored_hash)

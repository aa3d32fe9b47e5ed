# civic_events/models/person.py
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, String, DateTime, Index, UniqueConstraint, func, text
from civic_events.db.base import Base

# faixa da coluna BigInteger
MAX_NATIONAL_ID = 2**63 - 1

class Person(Base):
    __tablename__ = "people"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    national_id: Mapped[int] = mapped_column(BigInteger)
    first_name: Mapped[str] = mapped_column(String(120))
    last_name: Mapped[str] = mapped_column(String(120))
    email: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    # sem handle/senha = participante sem acesso ao sistema
    handle: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("national_id", name="uq_people_national_id"),
        UniqueConstraint("handle", name="uq_people_handle"),
        # e-mail único apenas entre quem tem conta
        Index(
            "uq_people_email", "email", unique=True,
            sqlite_where=text("handle IS NOT NULL"),
            postgresql_where=text("handle IS NOT NULL"),
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_account(self) -> bool:
        return self.handle is not None

    def __repr__(self) -> str:
        return f"<Person id={self.id} national_id={self.national_id}>"

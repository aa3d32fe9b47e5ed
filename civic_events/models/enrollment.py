# civic_events/models/enrollment.py
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Date, UniqueConstraint
from civic_events.db.base import Base

class Enrollment(Base):
    __tablename__ = "enrollments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"))
    person_id: Mapped[int] = mapped_column(ForeignKey("people.id"))
    enrolled_on: Mapped[date] = mapped_column(Date)

    person = relationship("Person")
    event = relationship("Event", back_populates="enrollments")

    __table_args__ = (UniqueConstraint("event_id", "person_id", name="uq_enrollment_event_person"),)

# civic_events/models/__init__.py
# Carrega módulos para registrar tabelas no metadata:
from civic_events.models.person import Person
from civic_events.models.event import Event, EventKind, EventState, Film, Modality, is_enrollment_admissible
from civic_events.models.enrollment import Enrollment

__all__ = ["Person", "Event", "EventKind", "EventState", "Film", "Modality", "is_enrollment_admissible", "Enrollment"]

# civic_events/crud/base.py
import logging
from typing import TypeVar, Generic, Type, Any, Optional, List, Dict, Iterable
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
from civic_events.core.errors import StorageFault
from civic_events.db.base import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchema = TypeVar("CreateSchema", bound=BaseModel)
UpdateSchema = TypeVar("UpdateSchema", bound=BaseModel)

def violated(exc: IntegrityError, constraint: str, columns: Iterable[str]) -> bool:
    """Diz se o IntegrityError veio da constraint dada.

    Postgres cita o nome da constraint; SQLite só cita "tabela.coluna".
    """
    text = str(getattr(exc, "orig", exc))
    if constraint in text:
        return True
    cols = list(columns)
    return bool(cols) and all(c in text for c in cols)

class CRUDBase(Generic[ModelType, CreateSchema, UpdateSchema]):
    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def get(self, id: Any) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def create(self, obj_in: CreateSchema, extra: Dict[str, Any] | None = None) -> ModelType:
        data = obj_in.model_dump()
        if extra: data.update(extra)
        return self.commit_new(self.model(**data))

    def update(self, db_obj: ModelType, obj_in: UpdateSchema | Dict[str, Any]) -> ModelType:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for f, v in data.items(): setattr(db_obj, f, v)
        return self.commit_new(db_obj)

    def commit_new(self, obj: ModelType) -> ModelType:
        try:
            self.db.add(obj); self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("storage failure on %s: %s", self.model.__name__, exc)
            raise StorageFault(details={"entity": self.model.__name__}) from exc
        self.db.refresh(obj)
        return obj

    def remove(self, obj: ModelType) -> ModelType:
        try:
            self.db.delete(obj); self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("storage failure removing %s: %s", self.model.__name__, exc)
            raise StorageFault(details={"entity": self.model.__name__}) from exc
        return obj

"""
Generic repository over a single mapped model.

Repositories only stage changes on the shared session; nothing here commits.
Persisting is the job of UnitOfWork.save_changes().
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from app.core.database import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    model: Type[ModelType]

    def __init__(self, db: Session):
        self.db = db

    def query(self):
        return self.db.query(self.model)

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def find(self, *criteria) -> List[ModelType]:
        return self.query().filter(*criteria).all()

    def first(self, *criteria) -> Optional[ModelType]:
        return self.query().filter(*criteria).first()

    def exists(self, *criteria) -> bool:
        return self.db.query(self.query().filter(*criteria).exists()).scalar()

    def count(self, *criteria) -> int:
        return self.query().filter(*criteria).count()

    def add(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        logger.debug(f"add: staged {self.model.__name__}")
        return entity

    def add_range(self, entities: List[ModelType]) -> List[ModelType]:
        self.db.add_all(entities)
        return entities


from datetime import datetime
from typing import Generic, List, Optional, Type, TypeVar

from sqlmodel import Session, SQLModel, select

from servicedownloadable.exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=SQLModel)


class Repository(Generic[ModelT]):
    """
    Persistence capability for one table.
    Every write commits immediately; one request = one session.
    """

    def __init__(self, session: Session, model: Type[ModelT]):
        self.session = session
        self.model = model

    def get_by_id(self, id) -> Optional[ModelT]:
        if id is None:
            return None
        return self.session.get(self.model, id)

    def get_existing_by_id(self, id, message: str = "Record not found") -> ModelT:
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundError(message)
        return entity

    def _select(self, filters: dict):
        statement = select(self.model)
        for name, value in filters.items():
            statement = statement.where(getattr(self.model, name) == value)
        return statement

    def find_one(self, **filters) -> Optional[ModelT]:
        return self.session.exec(self._select(filters)).first()

    def find(self, **filters) -> List[ModelT]:
        return list(self.session.exec(self._select(filters)).all())

    def store(self, entity: ModelT) -> ModelT:
        if hasattr(entity, "updated_at"):
            entity.updated_at = datetime.utcnow()
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def trash(self, entity: ModelT) -> None:
        self.session.delete(entity)
        self.session.commit()

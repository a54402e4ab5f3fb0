"""Repository base class used by all concrete repositories."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session


class BaseRepository:
    """Provides data access for a single model over a caller-owned session.

    Sub-classes set :attr:`model`.  Repositories add, query, flush and
    delete; they never commit or roll back.  Transaction boundaries belong
    to the services so that a multi-step write stays one unit of work.
    SQLAlchemy errors propagate unchanged.
    """

    model: Any = None

    def __init__(self, db: Session) -> None:
        self._db = db
        self._log = logging.getLogger(f'gamepulse.repository.{type(self).__name__}')

    def get(self, entity_id: int) -> Optional[Any]:
        return self._db.get(self.model, entity_id)

    def add(self, entity: Any) -> Any:
        """Stage *entity* and flush so generated columns are populated."""
        self._db.add(entity)
        self._db.flush()
        return entity

    def delete(self, entity: Any) -> None:
        self._db.delete(entity)
        self._db.flush()
        self._log.debug("Deleted %s %s", self.model.__name__, getattr(entity, 'id', None))

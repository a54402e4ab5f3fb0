"""Repository for user accounts."""
from typing import List, Optional

from database import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Queries the ``users`` table.  Email lookups are case-sensitive."""

    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self._db.query(User).filter(User.email == email).first()

    def list_newest_first(self) -> List[User]:
        return self._db.query(User).order_by(User.join_date.desc(), User.id.desc()).all()


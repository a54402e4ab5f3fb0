"""Repository for the append-only playtime session log."""
from typing import List

from database import PlaySession
from .base import BaseRepository


class SessionRepository(BaseRepository):
    """Appends and reads :class:`~database.PlaySession` rows.

    There is no update path; rows only disappear through the
    cascade when their game or user is deleted.
    """

    model = PlaySession

    def count_for_user(self, user_id: int) -> int:
        return self._db.query(PlaySession).filter(PlaySession.user_id == user_id).count()

    def list_for_user(self, user_id: int, limit: int = None) -> List[PlaySession]:
        query = (self._db.query(PlaySession)
                 .filter(PlaySession.user_id == user_id)
                 .order_by(PlaySession.session_date.desc(), PlaySession.id.desc()))
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_for_game(self, game_id: int) -> List[PlaySession]:
        return (self._db.query(PlaySession)
                .filter(PlaySession.game_id == game_id)
                .order_by(PlaySession.session_date.desc(), PlaySession.id.desc())
                .all())

"""Repository for library entries (``games`` table)."""
from datetime import datetime
from typing import List

from sqlalchemy import func

from database import Game
from .base import BaseRepository


class GameRepository(BaseRepository):
    """Queries and updates games owned by users.

    Playtime increments are issued as a single ``UPDATE ... SET playtime =
    playtime + :hours`` so the store serialises concurrent writers.
    """

    model = Game

    def list_for_user(self, user_id: int, limit: int = None) -> List[Game]:
        """Return *user_id*'s games, most recently added first."""
        query = (self._db.query(Game)
                 .filter(Game.user_id == user_id)
                 .order_by(Game.added_date.desc(), Game.id.desc()))
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def increment_playtime(self, game_id: int, hours: float, played_at: datetime) -> int:
        """Add *hours* to the stored playtime and mark the game as playing.

        Returns:
            Number of rows updated (0 when the game does not exist).
        """
        return (self._db.query(Game)
                .filter(Game.id == game_id)
                .update({
                    Game.playtime: Game.playtime + hours,
                    Game.last_played: played_at,
                    Game.status: 'playing',
                }, synchronize_session=False))

    def count_for_user(self, user_id: int) -> int:
        return self._db.query(Game).filter(Game.user_id == user_id).count()

    def count_by_status(self, user_id: int, status: str) -> int:
        return (self._db.query(Game)
                .filter(Game.user_id == user_id, Game.status == status)
                .count())

    def total_playtime_for_user(self, user_id: int) -> float:
        total = (self._db.query(func.coalesce(func.sum(Game.playtime), 0))
                 .filter(Game.user_id == user_id)
                 .scalar())
        return total or 0

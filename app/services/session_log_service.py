"""Read-only access to the playtime session log."""
import logging
from typing import List

from sqlalchemy.orm import Session

from database import PlaySession
from ..errors import store_errors
from ..repositories import SessionRepository
from ..validation import to_id

logger = logging.getLogger('gamepulse.services.sessions')


class SessionLogService:
    """Counts and lists logged sessions.  Sessions are only ever written by
    :meth:`~app.services.library_service.LibraryService.log_playtime`.
    """

    def count_for_user(self, db: Session, user_id) -> int:
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'counting sessions', logger):
            return SessionRepository(db).count_for_user(user_id)

    def list_for_user(self, db: Session, user_id, limit: int = None) -> List[PlaySession]:
        """Return *user_id*'s sessions, newest first (at most *limit*)."""
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'listing sessions', logger):
            return SessionRepository(db).list_for_user(user_id, limit=limit)

    def list_for_game(self, db: Session, game_id) -> List[PlaySession]:
        game_id = to_id(game_id, 'game_id')
        with store_errors(db, 'listing game sessions', logger):
            return SessionRepository(db).list_for_game(game_id)

"""Derived per-user statistics."""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from database import Game, utcnow
from ..errors import GamePulseError, store_errors
from ..repositories import BlogRepository, GameRepository, SessionRepository, UserRepository
from ..validation import to_id
from .library_service import LibraryService

logger = logging.getLogger('gamepulse.services.stats')

NO_GENRE = 'None'

EMPTY_GAMING_STATS = {
    'totalPlaytime': 0,
    'totalGames': 0,
    'completedGames': 0,
    'playingGames': 0,
    'backlogGames': 0,
    'favoriteGenre': NO_GENRE,
    'totalSessions': 0,
}


def favorite_genre(games: List[Game]) -> str:
    """Return the most common genre among *games*.

    Ties go to the genre encountered first while walking *games* in order.
    Games without a genre are ignored; ``'None'`` when nothing remains.
    """
    counts: Dict[str, int] = {}
    for game in games:
        if game.genre:
            counts[game.genre] = counts.get(game.genre, 0) + 1
    favorite, best = NO_GENRE, 0
    for genre, count in counts.items():
        if count > best:
            favorite, best = genre, count
    return favorite


class StatsService:
    """Aggregates library, session-log and blog data into per-user metrics.

    All methods accept a *db* SQLAlchemy session as the first argument so
    that callers (Flask route handlers) control the session lifecycle.
    """

    def __init__(self, library: LibraryService) -> None:
        self._library = library

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute_stats(self, db: Session, user_id) -> Dict:
        """Return the headline counters for *user_id*.

        Every counter is ``0`` when the user has no rows in the relevant
        table.  ``memberSince`` falls back to the current time when the user
        record is missing.

        Raises:
            StoreError: a query failed.
        """
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'computing stats', logger):
            user = UserRepository(db).get(user_id)
            games = GameRepository(db)
            if user is None:
                logger.warning("Stats requested for unknown user %s; using current time "
                               "for memberSince", user_id)
            member_since = user.join_date if user is not None else utcnow()
            return {
                'totalGames': games.count_for_user(user_id),
                'totalPlaytimeHours': games.total_playtime_for_user(user_id),
                'completedGames': games.count_by_status(user_id, 'completed'),
                'blogCount': BlogRepository(db).count_for_user(user_id),
                'totalSessions': SessionRepository(db).count_for_user(user_id),
                'memberSince': member_since.isoformat(),
            }

    def compute_gaming_stats(self, db: Session, user_id) -> Dict:
        """Return :meth:`compute_stats` plus per-status counts and the
        favourite genre.

        Never raises for lookup or store failures: any error yields
        :data:`EMPTY_GAMING_STATS` so a broken widget cannot block a page.
        """
        try:
            stats = self.compute_stats(db, user_id)
            games = self._library.list_games(db, user_id)
        except GamePulseError as exc:
            logger.warning("Gaming stats unavailable for user %s: %s", user_id, exc)
            return dict(EMPTY_GAMING_STATS)

        return {
            'totalPlaytime': stats['totalPlaytimeHours'],
            'totalGames': stats['totalGames'],
            'completedGames': stats['completedGames'],
            'playingGames': sum(1 for g in games if g.status == 'playing'),
            'backlogGames': sum(1 for g in games if g.status == 'backlog'),
            'favoriteGenre': favorite_genre(games),
            'totalSessions': stats['totalSessions'],
        }

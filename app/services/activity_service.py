"""Builds the per-user activity feed."""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from ..errors import store_errors
from ..repositories import GameRepository, SessionRepository
from ..validation import to_id

logger = logging.getLogger('gamepulse.services.activity')

FEED_LIMIT = 50


def _format_hours(hours: float) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    return f'{hours:g}'


class ActivityService:
    """Merges library additions and logged sessions into one feed.

    Events are ``{type, message, timestamp}`` dicts sorted newest first and
    capped at :data:`FEED_LIMIT`.  Each source is itself capped at the same
    limit, which cannot change the merged result.
    """

    def __init__(self, limit: int = FEED_LIMIT) -> None:
        self.limit = limit

    def build_feed(self, db: Session, user_id) -> List[Dict]:
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'building activity feed', logger):
            games = GameRepository(db).list_for_user(user_id, limit=self.limit)
            sessions = SessionRepository(db).list_for_user(user_id, limit=self.limit)

        events = [
            (game.added_date, {
                'type': 'game_added',
                'message': f'Added {game.title} to library',
            })
            for game in games
        ]
        events.extend(
            (session.session_date, {
                'type': 'playtime_logged',
                'message': f'Logged {_format_hours(session.hours)}h of gameplay',
            })
            for session in sessions
        )
        events.sort(key=lambda item: item[0], reverse=True)

        feed = []
        for timestamp, event in events[:self.limit]:
            event['timestamp'] = timestamp.isoformat()
            feed.append(event)
        return feed

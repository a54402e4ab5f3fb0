"""Business logic for the per-user game library and playtime logging."""
import logging
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from database import DEFAULT_COVER, Game, PlaySession, utcnow
from ..errors import InvalidInput, NotFound, store_errors
from ..repositories import GameRepository, SessionRepository, UserRepository
from ..validation import clean_text, require_fields, to_id, to_number

logger = logging.getLogger('gamepulse.services.library')

VALID_STATUSES = ('backlog', 'playing', 'completed')


class LibraryService:
    """Adds, lists, edits and removes library entries and logs playtime.

    All methods accept a *db* SQLAlchemy session as the first argument so
    that callers (Flask route handlers) control the session lifecycle.
    Each write commits exactly once; on a store failure the session is
    rolled back before :class:`~app.errors.StoreError` is raised.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_game(self, db: Session, user_id, title, platform=None, genre=None,
                 cover=None) -> Game:
        """Add a game to *user_id*'s library in ``backlog`` with no playtime.

        Raises:
            InvalidInput: user_id or title missing.
            NotFound:     no user has *user_id*.
        """
        require_fields({'user_id': user_id, 'title': title}, 'user_id', 'title')
        user_id = to_id(user_id, 'user_id')
        game = Game(
            user_id=user_id,
            title=clean_text(title),
            platform=clean_text(platform),
            genre=clean_text(genre),
            cover=clean_text(cover) or DEFAULT_COVER,
            status='backlog',
            playtime=0.0,
            added_date=utcnow(),
        )
        with store_errors(db, 'adding game', logger):
            if UserRepository(db).get(user_id) is None:
                raise NotFound('User not found')
            GameRepository(db).add(game)
            db.commit()
        logger.info("User %s added game %s (%s)", user_id, game.id, game.title)
        return game

    def list_games(self, db: Session, user_id) -> List[Game]:
        """Return *user_id*'s games, most recently added first."""
        require_fields({'user_id': user_id}, 'user_id')
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'listing games', logger):
            return GameRepository(db).list_for_user(user_id)

    def get_game(self, db: Session, game_id) -> Game:
        game_id = to_id(game_id, 'game_id')
        with store_errors(db, 'loading game', logger):
            game = GameRepository(db).get(game_id)
        if game is None:
            raise NotFound('Game not found')
        return game

    def update_game(self, db: Session, game_id, fields: Dict) -> Game:
        """Replace the editable fields of a game in one write.

        *fields* must carry ``title``, ``status`` and ``playtime``;
        ``platform``, ``genre`` and ``notes`` are overwritten too and become
        empty when omitted.  Moving to ``playing`` stamps ``last_played``
        and moving to ``completed`` stamps ``completed_date``; neither
        timestamp is ever cleared here.

        Raises:
            InvalidInput: a required field is missing or malformed.
            NotFound:     no game has *game_id*.
        """
        game_id = to_id(game_id, 'game_id')
        fields = fields or {}
        require_fields(fields, 'title', 'status', 'playtime')
        status = str(fields['status']).strip()
        if status not in VALID_STATUSES:
            raise InvalidInput(
                f"Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}")
        playtime = to_number(fields['playtime'], 'playtime', allow_zero=True)

        games = GameRepository(db)
        with store_errors(db, 'updating game', logger):
            game = games.get(game_id)
            if game is None:
                raise NotFound('Game not found')
            now = utcnow()
            game.title = clean_text(fields['title'])
            game.platform = clean_text(fields.get('platform'))
            game.genre = clean_text(fields.get('genre'))
            game.notes = clean_text(fields.get('notes'))
            game.status = status
            game.playtime = playtime
            if status == 'playing':
                game.last_played = now
            elif status == 'completed':
                game.completed_date = now
            db.commit()
        logger.info("Updated game %s (status=%s)", game_id, status)
        return game

    def delete_game(self, db: Session, game_id) -> Dict:
        """Delete a game (and its sessions); return the removed record."""
        game_id = to_id(game_id, 'game_id')
        games = GameRepository(db)
        with store_errors(db, 'deleting game', logger):
            game = games.get(game_id)
            if game is None:
                raise NotFound('Game not found')
            removed = game.to_dict()
            games.delete(game)
            db.commit()
        logger.info("Deleted game %s", game_id)
        return removed

    def log_playtime(self, db: Session, game_id, hours, user_id) -> Tuple[Game, PlaySession]:
        """Add *hours* to a game and append one session, atomically.

        The playtime increment is evaluated by the store as a relative
        update; the session insert runs in the same transaction, so either
        both persist or neither does.  The game is forced into ``playing``
        even when it was already ``completed``.

        Raises:
            InvalidInput: hours or user_id missing or malformed.
            NotFound:     no game has *game_id*, or no user has *user_id*.
        """
        game_id = to_id(game_id, 'game_id')
        require_fields({'hours': hours, 'user_id': user_id}, 'hours', 'user_id')
        hours = to_number(hours, 'hours')
        user_id = to_id(user_id, 'user_id')

        games = GameRepository(db)
        with store_errors(db, 'logging playtime', logger):
            now = utcnow()
            if games.increment_playtime(game_id, hours, now) == 0:
                db.rollback()
                raise NotFound('Game not found')
            if UserRepository(db).get(user_id) is None:
                db.rollback()
                raise NotFound('User not found')
            session = SessionRepository(db).add(PlaySession(
                user_id=user_id,
                game_id=game_id,
                hours=hours,
                session_date=now,
            ))
            db.commit()
            game = games.get(game_id)
        logger.info("Logged %sh on game %s for user %s", hours, game_id, user_id)
        return game, session

"""Repository package: expose all concrete repositories from one import."""
from .user_repository import UserRepository
from .game_repository import GameRepository
from .session_repository import SessionRepository
from .blog_repository import BlogRepository

__all__ = [
    'UserRepository',
    'GameRepository',
    'SessionRepository',
    'BlogRepository',
]
